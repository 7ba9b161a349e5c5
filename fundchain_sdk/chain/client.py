"""
Chain client adapter.

The transaction pipeline talks to the chain only through the ``ChainClient``
protocol; ``Web3ChainClient`` implements it on top of web3.py.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from web3 import Web3
from web3.exceptions import TimeExhausted

from ..abi import contract_interface, find_function, normalize_args
from ..config import validate_rpc_url
from ..exceptions import SubmissionError
from ..models import DecodedEvent, TxReceipt, UnsignedRawTransaction
from ..signer import Signer
from .events import decode_logs

logger = logging.getLogger(__name__)


class ChainClient(Protocol):
    """Primitives the transaction pipeline needs from a chain connection"""

    def call(self, address: str, abi: Sequence[Dict[str, Any]], method: str, args: Sequence[Any]) -> Any:
        """Read-only call returning decoded return values"""
        ...

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        ...

    def gas_price(self) -> int:
        ...

    def send_transaction(
        self,
        raw_transaction: UnsignedRawTransaction,
        signed_transaction: Optional[str] = None
    ) -> Mapping[str, Any]:
        """Submit a transaction and block until its receipt is available"""
        ...

    def decode_logs(self, abi: Sequence[Dict[str, Any]], logs: Sequence[Mapping[str, Any]]) -> List[DecodedEvent]:
        ...


def _hexify(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return value


def convert_receipt(receipt: Mapping[str, Any]) -> TxReceipt:
    """
    Convert a web3 (or plain dict) receipt to our TxReceipt model

    Args:
        receipt: The receipt mapping returned by the chain client

    Returns:
        Our TxReceipt model
    """
    receipt_dict = {key: _hexify(value) for key, value in dict(receipt).items() if key != "logs"}
    receipt_dict["logs"] = [dict(log) for log in receipt.get("logs", [])]
    return TxReceipt.model_validate(receipt_dict)


class Web3ChainClient:
    """
    ChainClient backed by a web3.py connection.

    When a signer is configured transactions are signed locally and relayed
    with ``eth_sendRawTransaction``; otherwise the node's unlocked account
    signs through ``eth_sendTransaction``. Read calls go through web3
    contract objects.
    """

    def __init__(
        self,
        w3: Web3,
        signer: Optional[Signer] = None,
        receipt_timeout: float = 120,
        poll_interval: float = 0.1,
        logger: Optional[logging.Logger] = None
    ):
        self.w3 = w3
        self.signer = signer
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_rpc_url(cls, rpc_url: str, signer: Optional[Signer] = None, **kwargs: Any) -> "Web3ChainClient":
        """
        Connect to an HTTP JSON-RPC endpoint.

        Raises:
            ValueError: If the URL doesn't use https (unless it is localhost/127.0.0.1)
        """
        validate_rpc_url(rpc_url)
        return cls(Web3(Web3.HTTPProvider(rpc_url)), signer=signer, **kwargs)

    def call(self, address: str, abi: Sequence[Dict[str, Any]], method: str, args: Sequence[Any]) -> Any:
        fn_abi = find_function(abi, method, len(args))
        contract = contract_interface([fn_abi], address=address, w3=self.w3)
        return contract.functions[method](*normalize_args(fn_abi, args)).call()

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        return self.w3.eth.estimate_gas(transaction)

    def gas_price(self) -> int:
        return self.w3.eth.gas_price

    def send_transaction(
        self,
        raw_transaction: UnsignedRawTransaction,
        signed_transaction: Optional[str] = None
    ) -> Mapping[str, Any]:
        """
        Submit a transaction and wait for its receipt.

        Args:
            raw_transaction: The unsigned transaction
            signed_transaction: Already signed raw transaction to relay as-is

        Returns:
            The receipt as returned by web3

        Raises:
            SubmissionError: If signing, sending or waiting for the receipt fails
        """
        try:
            if signed_transaction:
                tx_hash = self.w3.eth.send_raw_transaction(signed_transaction)
            else:
                tx = raw_transaction.to_tx_dict()
                if "nonce" not in tx:
                    tx["nonce"] = self.w3.eth.get_transaction_count(raw_transaction.from_address, "pending")
                if self.signer is not None:
                    if "chainId" not in tx:
                        tx["chainId"] = self.w3.eth.chain_id
                    try:
                        signed = self.signer.sign_transaction(tx)
                    except Exception as e:
                        self.logger.error(f"Transaction signing failed: {e}")
                        raise SubmissionError(f"Failed to sign transaction: {str(e)}")
                    tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
                else:
                    tx_hash = self.w3.eth.send_transaction(tx)
        except SubmissionError:
            raise
        except Exception as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise SubmissionError(f"Failed to send transaction: {str(e)}") from e

        tx_hash_hex = _hexify(tx_hash)
        self.logger.info(f"Transaction sent: {tx_hash_hex}")

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.receipt_timeout,
                poll_latency=self.poll_interval
            )
        except TimeExhausted as e:
            raise SubmissionError(f"Timed out waiting for receipt: {str(e)}", tx_hash=tx_hash_hex) from e
        return receipt

    def decode_logs(self, abi: Sequence[Dict[str, Any]], logs: Sequence[Mapping[str, Any]]) -> List[DecodedEvent]:
        return decode_logs(abi, logs, logger_instance=self.logger)
