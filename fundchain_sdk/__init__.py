"""
Fundchain SDK: a guarded, fee-aware transaction pipeline for fund protocol contracts.
"""
from .config import NetworkConfig, Options
from .contracts import Contracts, load_abi
from .environment import (
    Environment,
    create_environment,
    get_default_environment,
    set_default_environment,
)
from .exceptions import (
    AddressQueryError,
    DecodingError,
    EncodingError,
    EstimationError,
    FundchainError,
    PreconditionError,
    SubmissionError,
)
from .fees import AmguFeeEstimator, ContractPriceOracle, FeeEstimator, HttpPriceOracle, PriceOracle
from .manifest import AssetConfig, Deployment, ExchangeConfig
from .models import (
    ETHER,
    CallOptions,
    DecodedEvent,
    PreparedTransaction,
    Quantity,
    Token,
    TxReceipt,
    UnsignedRawTransaction,
    create_quantity,
)
from .signer import LocalSigner, Signer
from .transactions import (
    ContractCall,
    OperationDescriptor,
    TransactionPipeline,
    call_factory,
    transaction_factory,
    with_contract_address_query,
)
from .version import __version__

__all__ = [
    "AddressQueryError",
    "AmguFeeEstimator",
    "AssetConfig",
    "CallOptions",
    "ContractCall",
    "ContractPriceOracle",
    "Contracts",
    "DecodedEvent",
    "DecodingError",
    "Deployment",
    "ETHER",
    "EncodingError",
    "Environment",
    "EstimationError",
    "ExchangeConfig",
    "FeeEstimator",
    "FundchainError",
    "HttpPriceOracle",
    "LocalSigner",
    "NetworkConfig",
    "OperationDescriptor",
    "Options",
    "PreconditionError",
    "PreparedTransaction",
    "PriceOracle",
    "Quantity",
    "Signer",
    "SubmissionError",
    "Token",
    "TransactionPipeline",
    "TxReceipt",
    "UnsignedRawTransaction",
    "__version__",
    "call_factory",
    "create_environment",
    "create_quantity",
    "get_default_environment",
    "load_abi",
    "set_default_environment",
    "transaction_factory",
    "with_contract_address_query",
]
