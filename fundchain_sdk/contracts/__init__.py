"""
Contract interfaces known to the SDK.

ABIs ship as package data under ``contracts/abis`` and are loaded lazily
through ``importlib.resources``.
"""
import json
import threading
from enum import Enum
from importlib import resources
from typing import Any, Dict, List


class Contracts(str, Enum):
    """Contract types addressable by operation descriptors."""
    REGISTRY = "Registry"
    TRADING = "Trading"
    HUB = "Hub"
    ENGINE = "Engine"
    PRICE_SOURCE = "PriceSource"
    PREMINED_TOKEN = "PreminedToken"
    PARTICIPATION = "Participation"


_abi_cache: Dict[str, List[Dict[str, Any]]] = {}
_abi_cache_lock = threading.RLock()


def load_abi(contract: Contracts) -> List[Dict[str, Any]]:
    """
    Load the ABI of a contract type.

    Args:
        contract: Contract type to load

    Returns:
        The ABI as a list of entries

    Raises:
        ValueError: If the bundled ABI file is missing or malformed
    """
    name = Contracts(contract).value
    with _abi_cache_lock:
        if name not in _abi_cache:
            try:
                text = (
                    resources.files("fundchain_sdk.contracts")
                    .joinpath("abis")
                    .joinpath(f"{name}.json")
                    .read_text(encoding="utf-8")
                )
                _abi_cache[name] = json.loads(text)["abi"]
            except (FileNotFoundError, KeyError, json.JSONDecodeError) as e:
                raise ValueError(f"Cannot load ABI for {name}: {e}")
        return _abi_cache[name]


__all__ = ["Contracts", "load_abi"]
