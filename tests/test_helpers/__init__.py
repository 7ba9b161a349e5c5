"""
Shared builders for the test suite.
"""
from typing import Optional

from eth_account import Account

from fundchain_sdk.config import Options
from fundchain_sdk.environment import Environment
from fundchain_sdk.manifest import Deployment, ExchangeConfig
from fundchain_sdk.models import ETHER, Token

from .chain import FakeChainClient, make_log

# Test constants used throughout tests
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_WALLET = Account.from_key(TEST_PRIV_KEY).address
TEST_CHAIN_ID = 1337
TEST_CONTRACT = "0x1234567890123456789012345678901234567890"
TEST_REGISTRY = "0x2345678901234567890123456789012345678901"
TEST_ENGINE = "0x3456789012345678901234567890123456789012"
TEST_PRICE_SOURCE = "0x4567890123456789012345678901234567890123"
TEST_MLN = "0x5678901234567890123456789012345678901234"
TEST_WETH = "0x6789012345678901234567890123456789012345"
TEST_ZERO_EX = "0x7890123456789012345678901234567890123456"
TEST_ZERO_EX_ADAPTER = "0x8901234567890123456789012345678901234567"


def create_test_deployment(**overrides) -> Deployment:
    values = dict(
        registry=TEST_REGISTRY,
        engine=TEST_ENGINE,
        price_source=TEST_PRICE_SOURCE,
        mln_token=TEST_MLN,
        native_asset=TEST_WETH,
        tokens={"MLN": TEST_MLN, "WETH": TEST_WETH},
        exchange_configs=[
            ExchangeConfig(
                name="ZeroEx",
                exchange_address=TEST_ZERO_EX,
                adapter_address=TEST_ZERO_EX_ADAPTER,
                takes_custody=False,
            )
        ],
    )
    values.update(overrides)
    return Deployment(**values)


def create_test_environment(
    chain: Optional[FakeChainClient] = None,
    deployment: Optional[Deployment] = None,
    options: Optional[Options] = None,
    native_asset: Token = ETHER
) -> Environment:
    """Environment over a FakeChainClient with consistent defaults"""
    return Environment(
        chain=chain if chain is not None else FakeChainClient(),
        wallet_address=TEST_WALLET,
        native_asset=native_asset,
        options=options or Options(),
        deployment=deployment,
        chain_id=TEST_CHAIN_ID,
    )


__all__ = [
    "FakeChainClient",
    "TEST_CHAIN_ID",
    "TEST_CONTRACT",
    "TEST_ENGINE",
    "TEST_MLN",
    "TEST_PRICE_SOURCE",
    "TEST_PRIV_KEY",
    "TEST_REGISTRY",
    "TEST_WALLET",
    "TEST_WETH",
    "TEST_ZERO_EX",
    "TEST_ZERO_EX_ADAPTER",
    "create_test_deployment",
    "create_test_environment",
    "make_log",
]
