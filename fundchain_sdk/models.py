"""
Data models for the Fundchain SDK.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class Token(BaseModel):
    """An asset the protocol knows about. ``address`` is None for the chain's native asset."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    address: Optional[str] = None
    decimals: int = 18

    @property
    def is_native(self) -> bool:
        return self.address is None

    def same_asset(self, other: "Token") -> bool:
        """Compare two tokens by address (case-insensitive), or by symbol for native assets."""
        if self.address is None or other.address is None:
            return self.address is None and other.address is None and self.symbol == other.symbol
        return self.address.lower() == other.address.lower()


class Quantity(BaseModel):
    """An amount of a token in its smallest unit."""
    model_config = ConfigDict(frozen=True)

    token: Token
    quantity: int

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> int:
        if isinstance(value, str):
            return int(value, 0)
        return value

    @property
    def is_zero(self) -> bool:
        return self.quantity == 0

    @classmethod
    def zero(cls, token: Token) -> "Quantity":
        return cls(token=token, quantity=0)


def create_quantity(token: Token, quantity: Union[int, str]) -> Quantity:
    """Build a Quantity from an int or a decimal/hex string of base units."""
    return Quantity(token=token, quantity=quantity)


ETHER = Token(symbol="ETH", decimals=18)


class CallOptions(BaseModel):
    """
    Per-operation call options.

    ``fee_payable`` of None defers to the environment default.
    """
    model_config = ConfigDict(frozen=True)

    fee_payable: Optional[bool] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    value: Optional[int] = None
    nonce: Optional[int] = None


class UnsignedRawTransaction(BaseModel):
    """Raw unsigned transaction as accepted by eth_sendTransaction / eth_signTransaction"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_address: str = Field(..., alias="from")
    to: str
    data: str
    gas: int
    gas_price: int = Field(..., alias="gasPrice")
    value: int = 0
    nonce: Optional[int] = None
    chain_id: Optional[int] = Field(None, alias="chainId")

    def to_tx_dict(self) -> Dict[str, Any]:
        """Transaction dict with JSON-RPC keys, omitting unset nonce/chainId."""
        return self.model_dump(by_alias=True, exclude_none=True)


class DecodedEvent(BaseModel):
    """A receipt log reinterpreted against a contract interface"""
    event: str
    args: Dict[str, Any]
    address: Optional[str] = None
    log_index: Optional[int] = None


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    logs: List[Dict[str, Any]]
    events: List[DecodedEvent] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    def events_named(self, name: str) -> List[DecodedEvent]:
        return [event for event in self.events if event.event == name]


class _SubmissionMarker:
    """Submission state shared by a prepared transaction and its signed copies"""

    def __init__(self):
        self.submitted = False


class PreparedTransaction(BaseModel):
    """
    A fully assembled transaction that has not been submitted yet.

    Returned by ``prepare`` and consumed exactly once by ``send``. Callers who
    sign outside of the SDK attach the signed bytes with ``with_signature``;
    the signed copy and the original are consumed together.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    method: str
    params: Any = None
    fee: Quantity
    gas_estimate: int
    transaction_args: List[Any]
    raw_transaction: UnsignedRawTransaction
    signed_transaction: Optional[str] = None

    _marker: _SubmissionMarker = PrivateAttr(default_factory=_SubmissionMarker)

    @property
    def submitted(self) -> bool:
        return self._marker.submitted

    def mark_submitted(self) -> None:
        self._marker.submitted = True

    def with_signature(self, signed_transaction: Union[str, bytes]) -> "PreparedTransaction":
        """Return a copy carrying externally signed raw transaction bytes."""
        if self.submitted:
            raise ValueError("Cannot sign a transaction that was already submitted")
        if isinstance(signed_transaction, bytes):
            signed_transaction = "0x" + signed_transaction.hex()
        signed = self.model_copy(update={"signed_transaction": signed_transaction})
        signed._marker = self._marker
        return signed
