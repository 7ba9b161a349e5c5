#!/usr/bin/env python3
"""
Example of configuring a protocol registry from a deployment manifest.
"""
import json
import logging
import os
import sys

from fundchain_sdk import (
    AssetConfig,
    Deployment,
    FundchainError,
    NetworkConfig,
    SubmissionError,
    create_environment,
)
from fundchain_sdk.deployment import configure_registry


def main():
    """
    Demonstrate the register-or-update flow against a running node.

    This example shows how to:
    1. Build an environment for a configured network
    2. Load deployment addresses produced by the deployment tooling
    3. Point the registry at the deployment's components
    4. Register new assets and update already registered ones
    """
    logging.basicConfig(level=logging.INFO)

    # Read environment variables
    PRIVATE_KEY = os.environ.get("FUNDCHAIN_PRIVATE_KEY")
    NETWORK = os.environ.get("FUNDCHAIN_NETWORK", "development")
    MANIFEST = os.environ.get("DEPLOYMENT_MANIFEST", "deployment.json")

    # Verify configuration
    if not PRIVATE_KEY:
        print("ERROR: FUNDCHAIN_PRIVATE_KEY environment variable is required")
        return 1

    # Available networks
    print("Available networks:")
    for network_name in NetworkConfig.load_networks().keys():
        print(f"  - {network_name}")
    print()

    with open(MANIFEST) as f:
        manifest = json.load(f)
    deployment = Deployment.model_validate(manifest["melon"])
    assets = [AssetConfig.model_validate(entry) for entry in manifest.get("assets", [])]

    environment = create_environment(network=NETWORK, priv_key=PRIVATE_KEY, deployment=deployment)
    print(f"Connected to {NETWORK} as {environment.wallet_address}")

    try:
        result = configure_registry(deployment, environment, assets=assets)
    except SubmissionError as e:
        print(f"Transaction failed (gas consumed: {e.consumed_gas}): {e}")
        return 1
    except FundchainError as e:
        print(f"Error: {str(e)}")
        return 1

    for name, method in result["exchanges"].items():
        print(f"Exchange {name}: {method}")
    for symbol, method in result["assets"].items():
        print(f"Asset {symbol}: {method}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
