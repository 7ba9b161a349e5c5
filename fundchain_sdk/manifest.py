"""
Deployment manifest models.

A manifest maps protocol components to the addresses they were deployed at.
Reading and writing manifest files is left to the deployment tooling; this
module only validates an already parsed mapping.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExchangeConfig(BaseModel):
    """An exchange integrated through an adapter contract"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    exchange_address: str = Field(..., alias="exchangeAddress")
    adapter_address: str = Field(..., alias="adapterAddress")
    takes_custody: bool = Field(False, alias="takesCustody")


class AssetConfig(BaseModel):
    """Registry entry describing an asset"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str
    symbol: str
    name: str = ""
    url: str = ""
    reserve_min: int = Field(0, alias="reserveMin")
    standards: List[int] = Field(default_factory=list)
    sigs: List[str] = Field(default_factory=list)


class Deployment(BaseModel):
    """Resolved addresses of a protocol deployment"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    registry: Optional[str] = None
    engine: Optional[str] = None
    price_source: Optional[str] = Field(None, alias="priceSource")
    mln_token: Optional[str] = Field(None, alias="mlnToken")
    native_asset: Optional[str] = Field(None, alias="nativeAsset")
    tokens: Dict[str, str] = Field(default_factory=dict)
    exchange_configs: List[ExchangeConfig] = Field(default_factory=list, alias="exchangeConfigs")

    def exchange(self, name: str) -> ExchangeConfig:
        """
        Look up an exchange configuration by name.

        Raises:
            ValueError: If the deployment has no exchange with that name
        """
        for config in self.exchange_configs:
            if config.name == name:
                return config
        available = ", ".join(c.name for c in self.exchange_configs) or "none"
        raise ValueError(f"Exchange '{name}' is not part of the deployment (available: {available})")
