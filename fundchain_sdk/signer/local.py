"""
Signer backed by a private key held in memory.
"""
from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount


class LocalSigner:
    """
    Sign transactions with a local private key.

    Args:
        priv_key: Hex-encoded private key (with or without 0x prefix)
    """

    def __init__(self, priv_key: str):
        if not priv_key:
            raise ValueError("priv_key must be provided")
        self._account: LocalAccount = Account.from_key(priv_key)

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        return self._account.sign_transaction(transaction_dict)

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address})"
