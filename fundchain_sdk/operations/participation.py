"""
Fund participation: investment requests.
"""
from typing import Any, List

from pydantic import BaseModel, ConfigDict

from ..contracts import Contracts
from ..environment import Environment
from ..exceptions import PreconditionError, SubmissionError
from ..fees import AmguFeeEstimator, ContractPriceOracle
from ..models import CallOptions, Quantity, TxReceipt
from ..transactions import transaction_factory, with_contract_address_query
from .token import allowance


class FundComponents(BaseModel):
    """Addresses of the components of one fund"""
    model_config = ConfigDict(frozen=True)

    hub: str
    participation: str
    trading: str = ""
    vault: str = ""


class RequestInvestmentParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    fund: FundComponents
    requested_shares: int
    investment_amount: Quantity


class InvestmentRequest(BaseModel):
    """Result of a successful investment request"""
    model_config = ConfigDict(frozen=True)

    owner: str
    investment_asset: str
    requested_shares: int
    investment_amount: Quantity
    tx_hash: str


def _guard(params: RequestInvestmentParams, contract_address: str, environment: Environment) -> None:
    token = params.investment_amount.token
    if token.address is None:
        raise PreconditionError(f"Investments must be made in a token, not in native {token.symbol}")
    approved = allowance(token, environment.wallet_address, contract_address, environment)
    if approved.quantity < params.investment_amount.quantity:
        raise PreconditionError(
            f"Participation contract may only spend {approved.quantity} {token.symbol}, "
            f"investment needs {params.investment_amount.quantity}. Approve it first."
        )


def _prepare_args(params: RequestInvestmentParams, contract_address: str, environment: Environment) -> List[Any]:
    return [
        params.requested_shares,
        params.investment_amount.quantity,
        params.investment_amount.token.address,
    ]


def _post_process(
    receipt: TxReceipt,
    params: RequestInvestmentParams,
    contract_address: str,
    environment: Environment
) -> InvestmentRequest:
    events = receipt.events_named("InvestmentRequest")
    if not events:
        raise SubmissionError(
            f"Transaction {receipt.tx_hash} emitted no InvestmentRequest event",
            receipt=receipt,
            tx_hash=receipt.tx_hash
        )
    args = events[0].args
    token = params.investment_amount.token
    return InvestmentRequest(
        owner=args["requestOwner"],
        investment_asset=args["investmentAsset"],
        requested_shares=int(args["requestedShares"]),
        investment_amount=Quantity(token=token, quantity=int(args["investmentAmount"])),
        tx_hash=receipt.tx_hash,
    )


_request_investment = transaction_factory(
    "requestInvestment",
    Contracts.PARTICIPATION,
    guard=_guard,
    prepare_args=_prepare_args,
    post_process=_post_process,
    options=CallOptions(fee_payable=True),
    fee_estimator=AmguFeeEstimator(ContractPriceOracle()),
)

# Target: the fund's Participation contract, read from params.fund.participation
request_investment = with_contract_address_query(["fund", "participation"], _request_investment)
