"""
Network configuration and process-level options.
"""
import json
import os
import urllib.parse
from dataclasses import dataclass
from importlib import resources
from typing import Any, Dict, Optional

from .models import Token


def validate_rpc_url(url: str, url_name: str = "rpc_url") -> None:
    """
    Reject plain-text endpoints unless they point at the local machine.

    Raises:
        ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
    """
    parsed = urllib.parse.urlparse(url)
    # Check if it's a localhost or 127.0.0.1 address (with or without port)
    host = parsed.netloc.split(':')[0]
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not is_local:
        raise ValueError(f"{url_name} must use https:// for security (got: {parsed.scheme}://)")


class NetworkConfig:
    """Registry of known networks, read from the bundled networks.json"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        if cls._networks_cache is None:
            text = resources.files("fundchain_sdk").joinpath("networks.json").read_text(encoding="utf-8")
            cls._networks_cache = json.loads(text)
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get a network configuration by name.

        Raises:
            ValueError: If the network is unknown; the message lists available networks
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL: explicit override, then ``<NETWORK>_RPC_URL``, then networks.json.
        """
        if override:
            return override
        env_var = f"{network.upper().replace('-', '_')}_RPC_URL"
        if os.environ.get(env_var):
            return os.environ[env_var]
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_native_asset(cls, network: str) -> Token:
        native = cls.get_network(network).get("nativeAsset", {"symbol": "ETH", "decimals": 18})
        return Token(symbol=native["symbol"], decimals=native.get("decimals", 18))


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Options:
    """
    Environment-wide defaults applied to every call.

    Attributes:
        gas_price: Gas price in wei; None means ask the chain
        gas_multiplier: Safety factor applied to gas estimates for the gas limit
        fee_payable: Default for operations that don't say whether they pay the protocol fee
    """
    gas_price: Optional[int] = None
    gas_multiplier: float = 1.1
    fee_payable: bool = False

    @classmethod
    def from_env(cls) -> "Options":
        """Read FUNDCHAIN_GAS_PRICE, FUNDCHAIN_GAS_MULTIPLIER and FUNDCHAIN_FEE_PAYABLE."""
        gas_price = os.environ.get("FUNDCHAIN_GAS_PRICE")
        multiplier = os.environ.get("FUNDCHAIN_GAS_MULTIPLIER")
        fee_payable = os.environ.get("FUNDCHAIN_FEE_PAYABLE")
        try:
            return cls(
                gas_price=int(gas_price) if gas_price else None,
                gas_multiplier=float(multiplier) if multiplier else 1.1,
                fee_payable=_env_bool(fee_payable) if fee_payable else False,
            )
        except ValueError as e:
            raise ValueError(f"Invalid FUNDCHAIN_* option in environment: {e}")
