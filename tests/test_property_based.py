"""
Property-based tests for the Fundchain SDK.

These tests verify that properties hold true across many random inputs.
"""
from hypothesis import given, settings, strategies as st

from fundchain_sdk.contracts import Contracts
from fundchain_sdk.fees import AmguFeeEstimator
from fundchain_sdk.models import ETHER, CallOptions, Quantity, Token
from fundchain_sdk.transactions import transaction_factory
from tests.test_helpers import (
    TEST_CONTRACT,
    TEST_ENGINE,
    TEST_MLN,
    FakeChainClient,
    create_test_deployment,
    create_test_environment,
)

address_strategy = st.binary(min_size=20, max_size=20).map(lambda b: "0x" + b.hex())
amount_strategy = st.integers(min_value=0, max_value=2**256 - 1)
gas_strategy = st.integers(min_value=21000, max_value=30_000_000)

approve = transaction_factory("approve", Contracts.PREMINED_TOKEN)


class FixedPriceOracle:
    def __init__(self, price):
        self.price = price

    def get_price(self, asset, quote, environment):
        return self.price


@settings(max_examples=50)
@given(spender=address_strategy, amount=amount_strategy)
def test_prepare_is_deterministic(spender, amount):
    environment = create_test_environment()
    params = {"spender": spender, "amount": amount}

    first = approve.prepare(TEST_CONTRACT, params, environment)
    second = approve.prepare(TEST_CONTRACT, params, environment)

    assert first.raw_transaction.data == second.raw_transaction.data
    assert first.raw_transaction == second.raw_transaction


@settings(max_examples=50)
@given(gas=gas_strategy)
def test_fee_is_zero_when_not_fee_payable(gas):
    reference = Token(symbol="WETH", address="0x" + "11" * 20)
    pipeline = transaction_factory(
        "approve",
        Contracts.PREMINED_TOKEN,
        options=CallOptions(fee_payable=False),
        fee_estimator=AmguFeeEstimator(FixedPriceOracle(10**18), reference=reference),
    )
    environment = create_test_environment(chain=FakeChainClient(gas=gas))

    prepared = pipeline.prepare(TEST_CONTRACT, {"spender": TEST_CONTRACT, "amount": 1}, environment)

    assert prepared.fee == Quantity.zero(reference)
    assert prepared.gas_estimate == gas


@settings(max_examples=100)
@given(
    gas=gas_strategy,
    amgu_price=st.integers(min_value=0, max_value=10**12),
    price=st.integers(min_value=0, max_value=10**24),
    decimals=st.integers(min_value=0, max_value=18),
)
def test_fee_is_smallest_amount_covering_cost(gas, amgu_price, price, decimals):
    chain = FakeChainClient()
    chain.respond(TEST_ENGINE, "getAmguPrice", amgu_price)
    chain.respond(TEST_MLN, "decimals", decimals)
    environment = create_test_environment(chain=chain, deployment=create_test_deployment())

    fee = AmguFeeEstimator(FixedPriceOracle(price)).estimate_fee(gas, TEST_CONTRACT, environment)

    cost = gas * amgu_price * price
    assert fee.token == ETHER
    assert fee.quantity * 10**decimals >= cost
    assert fee.quantity == 0 or (fee.quantity - 1) * 10**decimals < cost
