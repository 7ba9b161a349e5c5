"""
Fund trading operations.

Orders are relayed to an exchange through the fund's Trading contract:
``callOnExchange`` takes the index of a registered exchange, the signature
of the adapter method to run and the order packed into fixed-size arrays.
"""
from typing import Any, List, Tuple

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import decode_hex, to_checksum_address
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..contracts import Contracts
from ..environment import Environment
from ..exceptions import EncodingError
from ..models import create_quantity
from ..transactions import ContractCall, call_factory, transaction_factory
from .token import ensure_sufficient_balance, get_token

NULL_ADDRESS = "0x0000000000000000000000000000000000000000"
ERC20_ASSET_DATA_PREFIX = "0xf47261b0"
MAKE_ORDER_SIGNATURE = "makeOrder(address,address[6],uint256[8],bytes32,bytes,bytes,bytes)"


class SignedOrder(BaseModel):
    """A 0x order signed by the fund manager"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    maker_address: str = Field(..., alias="makerAddress")
    taker_address: str = Field(NULL_ADDRESS, alias="takerAddress")
    fee_recipient_address: str = Field(NULL_ADDRESS, alias="feeRecipientAddress")
    sender_address: str = Field(NULL_ADDRESS, alias="senderAddress")
    maker_asset_amount: int = Field(..., alias="makerAssetAmount")
    taker_asset_amount: int = Field(..., alias="takerAssetAmount")
    maker_fee: int = Field(0, alias="makerFee")
    taker_fee: int = Field(0, alias="takerFee")
    expiration_time_seconds: int = Field(..., alias="expirationTimeSeconds")
    salt: int
    maker_asset_data: str = Field(..., alias="makerAssetData")
    taker_asset_data: str = Field(..., alias="takerAssetData")
    exchange_address: str = Field(NULL_ADDRESS, alias="exchangeAddress")
    signature: str

    @field_validator(
        "maker_asset_amount", "taker_asset_amount", "maker_fee", "taker_fee",
        "expiration_time_seconds", "salt",
        mode="before"
    )
    @classmethod
    def _parse_uint(cls, value: Any) -> Any:
        if isinstance(value, str):
            return int(value, 0)
        return value


def encode_erc20_asset_data(token_address: str) -> str:
    """0x asset data for an ERC20 token: proxy id followed by the ABI-encoded address"""
    encoded = abi_encode(["address"], [to_checksum_address(token_address)])
    return ERC20_ASSET_DATA_PREFIX + encoded.hex()


def decode_erc20_asset_data(asset_data: str) -> str:
    """
    Extract the token address from ERC20 asset data.

    Raises:
        EncodingError: If the data is not ERC20 asset data
    """
    if not asset_data.lower().startswith(ERC20_ASSET_DATA_PREFIX):
        raise EncodingError(f"Not ERC20 asset data: {asset_data[:10]}")
    payload = decode_hex(asset_data[len(ERC20_ASSET_DATA_PREFIX):])
    if len(payload) != 32:
        raise EncodingError(f"ERC20 asset data must hold one address, got {len(payload)} bytes")
    (token_address,) = abi_decode(["address"], payload)
    return to_checksum_address(token_address)


get_hub: ContractCall = call_factory("hub", Contracts.TRADING)
get_vault: ContractCall = call_factory("vault", Contracts.HUB)
_get_exchange_info: ContractCall = call_factory("getExchangeInfo", Contracts.TRADING)


def get_exchange_index(exchange_address: str, trading_address: str, environment: Environment) -> int:
    """
    Position of ``exchange_address`` among the exchanges the fund may trade on.

    Raises:
        ValueError: If the fund has no such exchange
    """
    exchanges, _adapters, _takes_custody = _get_exchange_info(trading_address, None, environment)
    wanted = exchange_address.lower()
    for index, address in enumerate(exchanges):
        if address.lower() == wanted:
            return index
    raise ValueError(f"Exchange {exchange_address} is not registered with trading contract {trading_address}")


def _vault_of(trading_address: str, environment: Environment) -> str:
    hub = get_hub(trading_address, None, environment)
    return get_vault(hub, None, environment)


def _make_order_guard(params: SignedOrder, contract_address: str, environment: Environment) -> None:
    vault = _vault_of(contract_address, environment)
    maker_token = get_token(decode_erc20_asset_data(params.maker_asset_data), environment)
    required = create_quantity(maker_token, params.maker_asset_amount)
    ensure_sufficient_balance(required, vault, environment)


def _make_order_args(params: SignedOrder, contract_address: str, environment: Environment) -> List[Any]:
    deployment = environment.require_deployment()
    zero_ex = deployment.exchange("ZeroEx").exchange_address
    exchange_index = get_exchange_index(zero_ex, contract_address, environment)

    maker_token = decode_erc20_asset_data(params.maker_asset_data)
    taker_token = decode_erc20_asset_data(params.taker_asset_data)

    order_addresses: Tuple[str, ...] = (
        contract_address,
        NULL_ADDRESS,
        maker_token,
        taker_token,
        params.fee_recipient_address,
        NULL_ADDRESS,
    )
    order_values = [
        params.maker_asset_amount,
        params.taker_asset_amount,
        params.maker_fee,
        params.taker_fee,
        params.expiration_time_seconds,
        params.salt,
        0,
        0,
    ]
    return [
        exchange_index,
        MAKE_ORDER_SIGNATURE,
        list(order_addresses),
        order_values,
        "0x" + "00" * 32,
        params.maker_asset_data,
        params.taker_asset_data,
        params.signature,
    ]


# Target: the fund's Trading contract. Parameters: SignedOrder.
make_order = transaction_factory(
    "callOnExchange",
    Contracts.TRADING,
    guard=_make_order_guard,
    prepare_args=_make_order_args,
)
