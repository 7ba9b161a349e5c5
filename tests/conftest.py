"""
Pytest fixtures for the Fundchain SDK tests.
"""
import pytest
from web3.providers.rpc import HTTPProvider

from fundchain_sdk._rate_limited_log import reset_rate_limits
from fundchain_sdk.config import NetworkConfig
from fundchain_sdk.environment import set_default_environment
from tests.test_helpers import FakeChainClient, create_test_deployment, create_test_environment


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    def _dummy(self, method, params=None, _=None):      # signature match
        if method in {"eth_chainId"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x539"}       # 1337
        if method in {"eth_gasPrice"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        # everything else – return something harmless
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Start every test with fresh caches and no process-wide environment"""
    reset_rate_limits()
    NetworkConfig._networks_cache = None
    set_default_environment(None)
    yield
    NetworkConfig._networks_cache = None
    set_default_environment(None)


@pytest.fixture
def chain():
    return FakeChainClient()


@pytest.fixture
def deployment():
    return create_test_deployment()


@pytest.fixture
def environment(chain, deployment):
    return create_test_environment(chain=chain, deployment=deployment)
