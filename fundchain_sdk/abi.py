"""
ABI helpers: signatures, selectors and call-data encoding.

Encoding goes through web3 contract objects, which need no provider to
build call data. Argument preparers hand over plain Python values (ints,
numeric strings, addresses in any case); ``normalize_args`` maps those
literals onto the types web3 validates against the method's inputs.
"""
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_utils import (
    collapse_if_tuple,
    event_abi_to_log_topic,
    function_abi_to_4byte_selector,
    function_signature_to_4byte_selector,
    to_checksum_address,
)
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import Web3Exception

from .exceptions import EncodingError

_ARRAY_RE = re.compile(r"^(.*)\[(\d*)\]$")
_INT_RE = re.compile(r"^u?int\d*$")

# Provider-less instance, only used for its codec
_codec_w3 = Web3()


def contract_interface(
    abi: Sequence[Dict[str, Any]],
    address: Optional[str] = None,
    w3: Optional[Web3] = None
) -> Contract:
    """web3 contract object for ``abi``, bound to ``address`` when given."""
    w3 = w3 or _codec_w3
    if address is None:
        return w3.eth.contract(abi=list(abi))
    return w3.eth.contract(address=to_checksum_address(address), abi=list(abi))


def function_signature(fn_abi: Dict[str, Any]) -> str:
    types = ",".join(collapse_if_tuple(i) for i in fn_abi.get("inputs", []))
    return f"{fn_abi['name']}({types})"


def selector_from_signature(signature: str) -> bytes:
    """4-byte selector of a textual signature such as ``transfer(address,uint256)``."""
    return function_signature_to_4byte_selector(signature)


def function_selector(fn_abi: Dict[str, Any]) -> bytes:
    return function_abi_to_4byte_selector(fn_abi)


def event_topic(event_abi: Dict[str, Any]) -> bytes:
    return event_abi_to_log_topic(event_abi)


def find_function(abi: Sequence[Dict[str, Any]], name: str, arg_count: Optional[int] = None) -> Dict[str, Any]:
    """
    Resolve a function entry of an ABI by name, disambiguating overloads by arity.

    Raises:
        EncodingError: If no (or more than one) function matches
    """
    candidates = [
        entry for entry in abi
        if entry.get("type", "function") == "function" and entry.get("name") == name
    ]
    if arg_count is not None and len(candidates) > 1:
        candidates = [c for c in candidates if len(c.get("inputs", [])) == arg_count]
    if not candidates:
        raise EncodingError(f"Contract interface has no function '{name}'")
    if len(candidates) > 1:
        raise EncodingError(f"Ambiguous function '{name}' with {arg_count} arguments")
    return candidates[0]


def _normalize(abi_input: Dict[str, Any], value: Any) -> Any:
    abi_type = abi_input["type"]

    array = _ARRAY_RE.match(abi_type)
    if array:
        if not isinstance(value, (list, tuple)):
            raise EncodingError(f"expected a sequence for {abi_type}, got {type(value).__name__}")
        item_input = dict(abi_input, type=array.group(1))
        return [_normalize(item_input, item) for item in value]

    if abi_type == "tuple":
        components = abi_input.get("components", [])
        if isinstance(value, Mapping):
            missing = [c["name"] for c in components if c["name"] not in value]
            if missing:
                raise EncodingError(f"tuple argument is missing {', '.join(missing)}")
            value = [value[c["name"]] for c in components]
        if not isinstance(value, (list, tuple)) or len(value) != len(components):
            raise EncodingError(f"tuple expects {len(components)} items, got {value!r}")
        return tuple(_normalize(c, item) for c, item in zip(components, value))

    if not isinstance(value, str):
        return value

    if _INT_RE.match(abi_type):
        raw = value.strip()
        try:
            return int(raw, 16) if raw.lower().startswith("0x") else int(raw, 10)
        except ValueError:
            raise EncodingError(f"invalid integer value: {value!r}")
    if abi_type == "bool" and value.lower() in ("true", "false"):
        return value.lower() == "true"
    if abi_type == "address":
        try:
            return to_checksum_address(value)
        except ValueError:
            raise EncodingError(f"invalid address: {value!r}")
    return value


def normalize_args(fn_abi: Dict[str, Any], args: Sequence[Any]) -> List[Any]:
    """Map prepared argument literals onto the Python types web3 expects for ``fn_abi``."""
    inputs = fn_abi.get("inputs", [])
    if len(args) != len(inputs):
        raise EncodingError(
            f"{fn_abi.get('name')} expects {len(inputs)} arguments, got {len(args)}"
        )
    return [_normalize(i, arg) for i, arg in zip(inputs, args)]


def encode_function_call(fn_abi: Dict[str, Any], args: Sequence[Any]) -> str:
    """Encode selector plus arguments as 0x-prefixed call data."""
    normalized = normalize_args(fn_abi, args)
    try:
        return contract_interface([fn_abi]).encode_abi(fn_abi["name"], args=normalized)
    except (Web3Exception, AbiEncodingError, TypeError, ValueError, OverflowError) as e:
        raise EncodingError(f"Cannot encode arguments for {function_signature(fn_abi)}: {e}")
