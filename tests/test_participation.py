"""
Tests for investment requests.
"""
import pytest

from fundchain_sdk.contracts import Contracts, load_abi
from fundchain_sdk.exceptions import AddressQueryError, PreconditionError, SubmissionError
from fundchain_sdk.models import ETHER, Quantity, Token
from fundchain_sdk.operations.participation import (
    FundComponents,
    InvestmentRequest,
    RequestInvestmentParams,
    request_investment,
)
from tests.test_helpers import TEST_ENGINE, TEST_MLN, TEST_PRICE_SOURCE, TEST_WALLET, TEST_WETH, make_log

HUB = "0x2222222222222222222222222222222222222222"
PARTICIPATION = "0x3333333333333333333333333333333333333333"
WETH = Token(symbol="WETH", address=TEST_WETH, decimals=18)
AMGU_FEE = 5 * 10**8


def params(amount=10**18, participation=PARTICIPATION):
    return RequestInvestmentParams(
        fund=FundComponents(hub=HUB, participation=participation),
        requested_shares=10**18,
        investment_amount=Quantity(token=WETH, quantity=amount),
    )


@pytest.fixture
def fund_chain(chain):
    chain.respond(TEST_WETH, "allowance", lambda owner, spender: 10**18 if spender.lower() == PARTICIPATION else 0)
    chain.respond(TEST_ENGINE, "getAmguPrice", 10**6)
    chain.respond(TEST_MLN, "decimals", 18)
    chain.respond(TEST_PRICE_SOURCE, "getQuoteAsset", TEST_WETH)
    chain.respond(TEST_PRICE_SOURCE, "getPrice", (5 * 10**15, 1700000000))
    chain.receipt_logs = [
        make_log(
            load_abi(Contracts.PARTICIPATION),
            "InvestmentRequest",
            {
                "requestOwner": TEST_WALLET,
                "investmentAsset": TEST_WETH,
                "requestedShares": 10**18,
                "investmentAmount": 10**18,
            },
            PARTICIPATION,
        )
    ]
    return chain


def test_request_investment(fund_chain, environment):
    result = request_investment(params(), environment)

    assert result == InvestmentRequest(
        owner=TEST_WALLET,
        investment_asset=TEST_WETH,
        requested_shares=10**18,
        investment_amount=Quantity(token=WETH, quantity=10**18),
        tx_hash=result.tx_hash,
    )
    raw, _signed = fund_chain.sent[0]
    assert raw.to == PARTICIPATION


def test_amgu_fee_is_paid_as_value(fund_chain, environment):
    prepared = request_investment.prepare(params(), environment)

    assert prepared.fee == Quantity(token=ETHER, quantity=AMGU_FEE)
    assert prepared.raw_transaction.value == AMGU_FEE


def test_guard_checks_allowance(fund_chain, environment):
    with pytest.raises(PreconditionError, match="Approve it first"):
        request_investment(params(amount=10**18 + 1), environment)
    assert fund_chain.sent == []
    assert fund_chain.calls_to("getAmguPrice") == []


def test_native_investment_rejected(fund_chain, environment):
    native = params().model_copy(update={"investment_amount": Quantity(token=ETHER, quantity=1)})
    with pytest.raises(PreconditionError, match="native"):
        request_investment.prepare(native, environment)


def test_missing_participation_address(fund_chain, environment):
    with pytest.raises(AddressQueryError):
        request_investment({"fund": {"hub": HUB}}, environment)
    assert fund_chain.calls == []


def test_missing_event_is_reported(fund_chain, environment):
    fund_chain.receipt_logs = []
    with pytest.raises(SubmissionError, match="no InvestmentRequest event") as exc_info:
        request_investment(params(), environment)
    assert exc_info.value.consumed_gas
