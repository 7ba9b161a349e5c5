"""
ERC20 token operations.
"""
from typing import Any, Dict, List

from eth_utils import to_checksum_address

from ..contracts import Contracts
from ..environment import Environment
from ..exceptions import PreconditionError
from ..models import Quantity, Token, create_quantity
from ..transactions import ContractCall, call_factory, transaction_factory


def _owner_args(params: Dict[str, Any], contract_address: str, environment: Environment) -> List[Any]:
    return [params["owner"]]


def _allowance_args(params: Dict[str, Any], contract_address: str, environment: Environment) -> List[Any]:
    return [params["owner"], params["spender"]]


_balance_of: ContractCall = call_factory("balanceOf", Contracts.PREMINED_TOKEN, prepare_args=_owner_args)
_allowance: ContractCall = call_factory("allowance", Contracts.PREMINED_TOKEN, prepare_args=_allowance_args)
_symbol: ContractCall = call_factory("symbol", Contracts.PREMINED_TOKEN)
_decimals: ContractCall = call_factory("decimals", Contracts.PREMINED_TOKEN)


def get_token(token_address: str, environment: Environment) -> Token:
    """Read symbol and decimals of an ERC20 token"""
    return Token(
        symbol=_symbol(token_address, None, environment),
        address=to_checksum_address(token_address),
        decimals=int(_decimals(token_address, None, environment)),
    )


def balance_of(token: Token, owner: str, environment: Environment) -> Quantity:
    """Token balance of ``owner``"""
    if token.address is None:
        raise ValueError(f"{token.symbol} is the native asset and has no token contract")
    balance = _balance_of(token.address, {"owner": owner}, environment)
    return create_quantity(token, int(balance))


def allowance(token: Token, owner: str, spender: str, environment: Environment) -> Quantity:
    """Amount ``spender`` may still transfer on behalf of ``owner``"""
    if token.address is None:
        raise ValueError(f"{token.symbol} is the native asset and has no token contract")
    remaining = _allowance(token.address, {"owner": owner, "spender": spender}, environment)
    return create_quantity(token, int(remaining))


def ensure_sufficient_balance(required: Quantity, owner: str, environment: Environment) -> None:
    """
    Guard helper: fail unless ``owner`` holds at least ``required``.

    Raises:
        PreconditionError: If the balance is too low
    """
    balance = balance_of(required.token, owner, environment)
    if balance.quantity < required.quantity:
        raise PreconditionError(
            f"Insufficient {required.token.symbol} balance of {owner}: "
            f"has {balance.quantity}, needs {required.quantity}"
        )


# Parameters: {"spender": address, "amount": int}
approve = transaction_factory("approve", Contracts.PREMINED_TOKEN)
