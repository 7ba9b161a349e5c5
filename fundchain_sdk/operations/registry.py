"""
Registry operations: assets, exchange adapters and protocol components.

``register_*`` refuses entries that already exist and ``update_*`` refuses
entries that don't; ``fundchain_sdk.deployment`` picks the right one.
"""
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from ..contracts import Contracts
from ..environment import Environment
from ..exceptions import PreconditionError
from ..manifest import AssetConfig
from ..transactions import ContractCall, call_factory, transaction_factory


class ExchangeAdapterParams(BaseModel):
    """Registry entry binding an exchange to its adapter"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    exchange_address: str = Field(..., alias="exchangeAddress")
    adapter_address: str = Field(..., alias="adapterAddress")
    takes_custody: bool = Field(False, alias="takesCustody")
    sigs: List[str] = Field(default_factory=list)


def _asset_key(params: Dict[str, Any], contract_address: str, environment: Environment) -> List[Any]:
    return [params["asset"]]


def _adapter_key(params: Dict[str, Any], contract_address: str, environment: Environment) -> List[Any]:
    return [params["adapter"]]


_asset_is_registered: ContractCall = call_factory(
    "assetIsRegistered", Contracts.REGISTRY, prepare_args=_asset_key
)
_exchange_adapter_is_registered: ContractCall = call_factory(
    "exchangeAdapterIsRegistered", Contracts.REGISTRY, prepare_args=_adapter_key
)


def asset_is_registered(registry: str, asset: str, environment: Environment) -> bool:
    return bool(_asset_is_registered(registry, {"asset": asset}, environment))


def exchange_adapter_is_registered(registry: str, adapter: str, environment: Environment) -> bool:
    return bool(_exchange_adapter_is_registered(registry, {"adapter": adapter}, environment))


def _asset_args(params: AssetConfig, contract_address: str, environment: Environment) -> List[Any]:
    return [
        params.address,
        params.name,
        params.symbol,
        params.url,
        params.reserve_min,
        list(params.standards),
        list(params.sigs),
    ]


def _require_unregistered_asset(params: AssetConfig, contract_address: str, environment: Environment) -> None:
    if asset_is_registered(contract_address, params.address, environment):
        raise PreconditionError(f"Asset {params.symbol} ({params.address}) is already registered")


def _require_registered_asset(params: AssetConfig, contract_address: str, environment: Environment) -> None:
    if not asset_is_registered(contract_address, params.address, environment):
        raise PreconditionError(f"Asset {params.symbol} ({params.address}) is not registered")


register_asset = transaction_factory(
    "registerAsset", Contracts.REGISTRY, guard=_require_unregistered_asset, prepare_args=_asset_args
)
update_asset = transaction_factory(
    "updateAsset", Contracts.REGISTRY, guard=_require_registered_asset, prepare_args=_asset_args
)


def _adapter_args(params: ExchangeAdapterParams, contract_address: str, environment: Environment) -> List[Any]:
    return [params.exchange_address, params.adapter_address, params.takes_custody, list(params.sigs)]


def _require_unregistered_exchange(
    params: ExchangeAdapterParams, contract_address: str, environment: Environment
) -> None:
    if exchange_adapter_is_registered(contract_address, params.adapter_address, environment):
        raise PreconditionError(f"Adapter {params.adapter_address} is already registered")


def _require_registered_exchange(
    params: ExchangeAdapterParams, contract_address: str, environment: Environment
) -> None:
    if not exchange_adapter_is_registered(contract_address, params.adapter_address, environment):
        raise PreconditionError(f"Adapter {params.adapter_address} is not registered")


register_exchange_adapter = transaction_factory(
    "registerExchangeAdapter",
    Contracts.REGISTRY,
    guard=_require_unregistered_exchange,
    prepare_args=_adapter_args,
)
update_exchange_adapter = transaction_factory(
    "updateExchangeAdapter",
    Contracts.REGISTRY,
    guard=_require_registered_exchange,
    prepare_args=_adapter_args,
)

# Flat setters, parameters: {"address": component_address}
set_price_source = transaction_factory("setPriceSource", Contracts.REGISTRY)
set_native_asset = transaction_factory("setNativeAsset", Contracts.REGISTRY)
set_mln_token = transaction_factory("setMlnToken", Contracts.REGISTRY)
set_engine = transaction_factory("setEngine", Contracts.REGISTRY)
