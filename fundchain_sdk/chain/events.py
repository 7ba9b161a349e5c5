"""
Decoding of receipt logs against a contract interface.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_utils import decode_hex, to_checksum_address
from web3.exceptions import MismatchedABI, Web3Exception

from ..abi import contract_interface
from ..exceptions import DecodingError
from ..models import DecodedEvent
from .._rate_limited_log import rate_limited_log

logger = logging.getLogger(__name__)


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return decode_hex(value)


def _web3_log(log: Mapping[str, Any]) -> Dict[str, Any]:
    # process_log reads every receipt field; logs built by hand may omit some
    return {
        "address": log.get("address"),
        "blockHash": log.get("blockHash"),
        "blockNumber": log.get("blockNumber"),
        "transactionHash": log.get("transactionHash"),
        "transactionIndex": log.get("transactionIndex"),
        "logIndex": log.get("logIndex"),
        "topics": [_as_bytes(t) for t in log.get("topics", [])],
        "data": _as_bytes(log.get("data", b"") or b""),
    }


def decode_log(abi: Sequence[Dict[str, Any]], log: Mapping[str, Any]) -> DecodedEvent:
    """
    Decode a single log entry.

    Args:
        abi: Contract ABI the log is expected to belong to
        log: Receipt log with ``topics``, ``data`` and optionally ``address``/``logIndex``

    Returns:
        The decoded event

    Raises:
        DecodingError: If no event of the interface matches the log
    """
    try:
        entry = _web3_log(log)
    except (TypeError, ValueError) as e:
        raise DecodingError(f"Malformed log entry: {e}")

    if not entry["topics"]:
        raise DecodingError("Log has no topics")

    contract = contract_interface(abi)
    for event_abi in abi:
        if event_abi.get("type") != "event" or event_abi.get("anonymous", False):
            continue
        name = event_abi["name"]
        try:
            decoded = contract.events[name]().process_log(entry)
        except MismatchedABI:
            continue
        except (Web3Exception, AbiDecodingError, TypeError, ValueError) as e:
            raise DecodingError(f"Cannot decode {name} log: {e}")

        address = decoded["address"]
        return DecodedEvent(
            event=decoded["event"],
            args=dict(decoded["args"]),
            address=to_checksum_address(address) if address else None,
            log_index=decoded["logIndex"],
        )

    raise DecodingError(f"No event of the contract interface matches topic 0x{entry['topics'][0].hex()}")


def decode_logs(
    abi: Sequence[Dict[str, Any]],
    logs: Sequence[Mapping[str, Any]],
    logger_instance: Optional[logging.Logger] = None
) -> List[DecodedEvent]:
    """
    Decode every log of a receipt that belongs to ``abi``, in receipt order.

    Logs emitted by other interfaces (tokens moved during a trade, for
    instance) are skipped.
    """
    log_instance = logger_instance or logger
    events = []
    for log in logs:
        try:
            events.append(decode_log(abi, log))
        except DecodingError as e:
            rate_limited_log(f"Skipping undecodable log: {e}", level="debug", logger_instance=log_instance)
    return events
