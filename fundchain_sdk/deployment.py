"""
Registry orchestration for a deployment.

Brings the registry in line with a manifest: components are set, and each
asset and exchange adapter is registered when new or updated when the
registry already knows it.
"""
import logging
from typing import Dict, Iterable, List, Optional

from .abi import selector_from_signature
from .environment import Environment
from .manifest import AssetConfig, Deployment, ExchangeConfig
from .operations import registry as registry_ops
from .transactions import TransactionPipeline

logger = logging.getLogger(__name__)

EXCHANGE_METHOD_SIGNATURES = (
    "makeOrder(address,address[6],uint256[8],bytes32,bytes,bytes,bytes)",
    "takeOrder(address,address[6],uint256[8],bytes32,bytes,bytes,bytes)",
    "cancelOrder(address,address[6],uint256[8],bytes32,bytes,bytes,bytes)",
    "withdrawTokens(address,address[6],uint256[8],bytes32,bytes,bytes,bytes)",
)


def exchange_method_selectors() -> List[str]:
    """4-byte selectors of the adapter methods a fund may call on an exchange"""
    return ["0x" + selector_from_signature(signature).hex() for signature in EXCHANGE_METHOD_SIGNATURES]


def upsert_asset(
    registry: str,
    asset: AssetConfig,
    environment: Environment,
    register: Optional[TransactionPipeline] = None,
    update: Optional[TransactionPipeline] = None
) -> str:
    """
    Register ``asset``, or update it if the registry already has it.

    Returns:
        "update" or "register", whichever method was called
    """
    register = register or registry_ops.register_asset
    update = update or registry_ops.update_asset
    if registry_ops.asset_is_registered(registry, asset.address, environment):
        environment.logger.info(f"Updating registered asset {asset.symbol}")
        update(registry, asset, environment)
        return "update"
    environment.logger.info(f"Registering asset {asset.symbol}")
    register(registry, asset, environment)
    return "register"


def upsert_assets(registry: str, assets: Iterable[AssetConfig], environment: Environment) -> Dict[str, str]:
    """Upsert every asset; returns symbol -> method called"""
    return {asset.symbol: upsert_asset(registry, asset, environment) for asset in assets}


def upsert_exchange_adapter(
    registry: str,
    exchange: ExchangeConfig,
    environment: Environment,
    sigs: Optional[List[str]] = None,
    register: Optional[TransactionPipeline] = None,
    update: Optional[TransactionPipeline] = None
) -> str:
    """
    Register the adapter of ``exchange``, or update it if already registered.

    Args:
        registry: Registry address
        exchange: Exchange and adapter addresses
        environment: Execution environment
        sigs: Allowed method selectors; all exchange methods by default
        register: Pipeline used for new adapters
        update: Pipeline used for known adapters

    Returns:
        "update" or "register", whichever method was called
    """
    register = register or registry_ops.register_exchange_adapter
    update = update or registry_ops.update_exchange_adapter
    params = registry_ops.ExchangeAdapterParams(
        exchange_address=exchange.exchange_address,
        adapter_address=exchange.adapter_address,
        takes_custody=exchange.takes_custody,
        sigs=sigs if sigs is not None else exchange_method_selectors(),
    )
    if registry_ops.exchange_adapter_is_registered(registry, exchange.adapter_address, environment):
        environment.logger.info(f"Updating adapter of exchange {exchange.name}")
        update(registry, params, environment)
        return "update"
    environment.logger.info(f"Registering adapter of exchange {exchange.name}")
    register(registry, params, environment)
    return "register"


def upsert_exchange_adapters(
    registry: str,
    exchanges: Iterable[ExchangeConfig],
    environment: Environment
) -> Dict[str, str]:
    """Upsert every exchange adapter; returns exchange name -> method called"""
    return {exchange.name: upsert_exchange_adapter(registry, exchange, environment) for exchange in exchanges}


def configure_registry(
    deployment: Deployment,
    environment: Environment,
    assets: Iterable[AssetConfig] = ()
) -> Dict[str, Dict[str, str]]:
    """
    Point the registry at the deployment's components, then upsert adapters and assets.

    Raises:
        ValueError: If the deployment has no registry address
    """
    if not deployment.registry:
        raise ValueError("Deployment has no registry address")
    registry = deployment.registry

    setters = (
        (registry_ops.set_price_source, deployment.price_source),
        (registry_ops.set_native_asset, deployment.native_asset),
        (registry_ops.set_mln_token, deployment.mln_token),
        (registry_ops.set_engine, deployment.engine),
    )
    for setter, address in setters:
        if address:
            logger.debug(f"{setter.name}({address})")
            setter(registry, {"address": address}, environment)

    return {
        "exchanges": upsert_exchange_adapters(registry, deployment.exchange_configs, environment),
        "assets": upsert_assets(registry, assets, environment),
    }
