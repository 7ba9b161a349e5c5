"""
Tests for read-only contract calls.
"""
import pytest

from fundchain_sdk.contracts import Contracts
from fundchain_sdk.exceptions import EncodingError
from fundchain_sdk.transactions import call_factory
from tests.test_helpers import TEST_CONTRACT, TEST_WALLET


def test_call_without_hooks_returns_raw_result(chain, environment):
    chain.respond(TEST_CONTRACT, "symbol", "MLN")

    symbol = call_factory("symbol", Contracts.PREMINED_TOKEN)

    assert symbol(TEST_CONTRACT, None, environment) == "MLN"
    assert chain.calls == [(TEST_CONTRACT, "symbol", [])]


def test_call_hooks(chain, environment):
    chain.respond(TEST_CONTRACT, "balanceOf", lambda owner: 10 if owner == TEST_WALLET else 0)

    balance = call_factory(
        "balanceOf",
        Contracts.PREMINED_TOKEN,
        prepare_args=lambda params, address, env: [params["owner"]],
        post_process=lambda result, params, address, env: result * 2,
    )

    assert balance(TEST_CONTRACT, {"owner": TEST_WALLET}, environment) == 20


def test_preparer_errors_become_encoding_errors(chain, environment):
    balance = call_factory(
        "balanceOf",
        Contracts.PREMINED_TOKEN,
        prepare_args=lambda params, address, env: [params["owner"]],
    )

    with pytest.raises(EncodingError, match="balanceOf"):
        balance(TEST_CONTRACT, {}, environment)
    assert chain.calls == []
