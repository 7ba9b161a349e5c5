"""
Transaction pipeline and read-only calls.
"""
from .calls import ContractCall, call_factory
from .factory import (
    AddressQueryTransaction,
    OperationDescriptor,
    TransactionPipeline,
    default_guard,
    default_post_process,
    default_prepare_args,
    transaction_factory,
    with_contract_address_query,
)

__all__ = [
    "AddressQueryTransaction",
    "ContractCall",
    "OperationDescriptor",
    "TransactionPipeline",
    "call_factory",
    "default_guard",
    "default_post_process",
    "default_prepare_args",
    "transaction_factory",
    "with_contract_address_query",
]
