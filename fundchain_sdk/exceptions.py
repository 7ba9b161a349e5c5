"""
Exceptions for the Fundchain SDK.

Every error raised by the transaction pipeline derives from FundchainError.
The ``local`` flag tells the caller whether chain state may have changed:
guard, encoding and estimation failures never reach the chain, while a
submission failure may have consumed gas.
"""
from typing import Any, Optional


class FundchainError(Exception):
    """Base exception for all Fundchain SDK errors."""

    local: bool = True


class PreconditionError(FundchainError):
    """Raised by a guard when a transaction would fail on-chain."""
    pass


class EncodingError(FundchainError):
    """Raised when parameters cannot be mapped to the target method's arguments."""
    pass


class AddressQueryError(EncodingError):
    """Raised when a contract address cannot be resolved from invocation parameters."""

    def __init__(self, message: str, path: Optional[list] = None):
        self.path = list(path or [])
        super().__init__(message)


class EstimationError(FundchainError):
    """Raised when gas, gas price or fee estimation fails."""
    pass


class SubmissionError(FundchainError):
    """
    Raised when the chain rejects or fails to include a transaction.

    Attributes:
        receipt: The receipt of the failed transaction, if one was mined
        tx_hash: Hash of the submitted transaction, if known
    """

    def __init__(
        self,
        message: str,
        receipt: Optional[Any] = None,
        tx_hash: Optional[str] = None
    ):
        self.receipt = receipt
        self.tx_hash = tx_hash
        super().__init__(message)

    @property
    def consumed_gas(self) -> bool:
        """True when the transaction was mined and its gas was paid."""
        return self.receipt is not None and getattr(self.receipt, "gas_used", 0) > 0

    @property
    def local(self) -> bool:  # type: ignore[override]
        # Once broadcast, the transaction may still be mined after a timeout
        return self.receipt is None and self.tx_hash is None


class DecodingError(FundchainError):
    """Raised when a log entry does not match any event of a contract interface."""
    pass
