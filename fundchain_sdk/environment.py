"""
Execution environment threaded through every pipeline stage.

Pipelines never fall back to a global environment; ``get_default_environment``
exists for scripts and other outermost entrypoints only.
"""
import logging
import os
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from eth_utils import to_checksum_address

from .chain.client import Web3ChainClient
from .config import NetworkConfig, Options
from .manifest import Deployment
from .models import ETHER, Token
from .signer import LocalSigner, Signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    """
    Read-only context shared by concurrent invocations.

    Attributes:
        chain: ChainClient used for reads, estimation and submission
        wallet_address: Sender address of every transaction
        native_asset: The chain's native asset (fees in it travel as tx value)
        options: Environment-wide call defaults
        deployment: Addresses of the protocol deployment, if known
        chain_id: Chain id stamped on prepared transactions
        logger: Logger used by pipeline stages
    """
    chain: Any
    wallet_address: str
    native_asset: Token = ETHER
    options: Options = field(default_factory=Options)
    deployment: Optional[Deployment] = None
    chain_id: Optional[int] = None
    logger: logging.Logger = field(default=logger, compare=False, repr=False)

    def __post_init__(self):
        try:
            object.__setattr__(self, "wallet_address", to_checksum_address(self.wallet_address))
        except ValueError:
            raise ValueError(f"Invalid wallet address: {self.wallet_address!r}")

    def with_options(self, **changes: Any) -> "Environment":
        """Copy of this environment with some Options fields replaced."""
        return replace(self, options=replace(self.options, **changes))

    def require_deployment(self) -> Deployment:
        if self.deployment is None:
            raise ValueError("Environment has no deployment configured")
        return self.deployment


def create_environment(
    network: str = "development",
    priv_key: Optional[str] = None,
    signer: Optional[Signer] = None,
    rpc_url: Optional[str] = None,
    deployment: Optional[Deployment] = None,
    options: Optional[Options] = None,
    logger: Optional[logging.Logger] = None
) -> Environment:
    """
    Build an environment connected to a known network.

    Args:
        network: Network name from networks.json
        priv_key: Private key for a LocalSigner (optional if signer provided)
        signer: Custom signer object (optional if priv_key provided)
        rpc_url: RPC URL override
        deployment: Deployment addresses
        options: Call defaults (read from FUNDCHAIN_* variables when omitted)
        logger: Logger for the chain client and pipeline

    Raises:
        ValueError: If neither priv_key nor signer is provided, or the network is unknown
    """
    if not priv_key and not signer:
        raise ValueError("Either priv_key or signer must be provided")
    signer = signer or LocalSigner(priv_key)

    url = NetworkConfig.get_rpc_url(network, override=rpc_url)
    log = logger or logging.getLogger("fundchain_sdk")
    chain = Web3ChainClient.from_rpc_url(url, signer=signer, logger=log)
    return Environment(
        chain=chain,
        wallet_address=signer.address,
        native_asset=NetworkConfig.get_native_asset(network),
        options=options or Options.from_env(),
        deployment=deployment,
        chain_id=NetworkConfig.get_chain_id(network),
        logger=log,
    )


_default_environment: Optional[Environment] = None
_default_lock = threading.RLock()


def get_default_environment() -> Environment:
    """
    Process-wide environment built from FUNDCHAIN_NETWORK, FUNDCHAIN_PRIVATE_KEY
    and FUNDCHAIN_RPC_URL. Created on first use.
    """
    global _default_environment
    with _default_lock:
        if _default_environment is None:
            _default_environment = create_environment(
                network=os.environ.get("FUNDCHAIN_NETWORK", "development"),
                priv_key=os.environ.get("FUNDCHAIN_PRIVATE_KEY"),
                rpc_url=os.environ.get("FUNDCHAIN_RPC_URL"),
            )
            logger.debug(f"Created default environment for {_default_environment.wallet_address}")
        return _default_environment


def set_default_environment(environment: Optional[Environment]) -> None:
    """Replace (or with None, reset) the process-wide environment."""
    global _default_environment
    with _default_lock:
        _default_environment = environment
