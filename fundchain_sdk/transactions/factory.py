"""
Transaction pipeline.

Every state-changing contract call runs through the same three stages:

1. ``prepare``: guard, argument preparation, gas and fee estimation, and
   assembly of an unsigned transaction;
2. ``send``: submission, receipt retrieval and event decoding;
3. post-processing of the receipt into a domain result.

An operation is declared once as an ``OperationDescriptor`` and turned into
a ``TransactionPipeline``:

    approve = transaction_factory("approve", Contracts.PREMINED_TOKEN)
    approve(token_address, {"spender": spender, "amount": 10**18}, environment)

``prepare`` and ``send`` stay available separately so a transaction can be
signed outside of the SDK before it is relayed:

    prepared = approve.prepare(token_address, params, environment)
    signed = prepared.with_signature(external_signer.sign(prepared.raw_transaction))
    approve.send(token_address, signed, params, None, environment)
"""
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar, Union

from eth_utils import to_checksum_address
from pydantic import BaseModel, ValidationError

from ..abi import encode_function_call, find_function
from ..chain.client import convert_receipt
from ..contracts import Contracts, load_abi
from ..environment import Environment
from ..exceptions import AddressQueryError, EncodingError, EstimationError, FundchainError, SubmissionError
from ..fees import FeeEstimator
from ..models import CallOptions, PreparedTransaction, Quantity, TxReceipt, UnsignedRawTransaction

logger = logging.getLogger(__name__)

P = TypeVar("P")
R = TypeVar("R")

GuardFunction = Callable[[Any, str, Environment], None]
PrepareArgsFunction = Callable[[Any, str, Environment], List[Any]]
PostProcessFunction = Callable[[TxReceipt, Any, str, Environment], Any]
OptionsOrCallback = Union[CallOptions, Callable[[Environment], CallOptions]]


def default_guard(params: Any, contract_address: str, environment: Environment) -> None:
    """No preconditions beyond what the contract enforces itself."""
    return None


def _field_values(params: Any) -> List[Any]:
    if isinstance(params, Mapping):
        return list(params.values())
    if isinstance(params, BaseModel):
        return [getattr(params, name) for name in type(params).model_fields]
    if dataclasses.is_dataclass(params) and not isinstance(params, type):
        return [getattr(params, f.name) for f in dataclasses.fields(params)]
    if isinstance(params, (list, tuple)):
        return list(params)
    raise EncodingError(f"Cannot derive arguments from {type(params).__name__} parameters")


def default_prepare_args(params: Any, contract_address: str, environment: Environment) -> List[str]:
    """
    Take the parameter values in definition order and stringify each.

    Only usable for flat parameter shapes whose values are primitives;
    nested values raise EncodingError instead of being stringified.
    """
    if params is None:
        return []
    values = _field_values(params)
    for value in values:
        if isinstance(value, (Mapping, list, tuple, set, BaseModel)):
            raise EncodingError(
                f"Default argument preparation only supports flat parameters, got {type(value).__name__}"
            )
    return [str(value) for value in values]


def default_post_process(receipt: TxReceipt, params: Any, contract_address: str, environment: Environment) -> bool:
    return True


@dataclass(frozen=True)
class OperationDescriptor(Generic[P, R]):
    """
    Definition of one on-chain method call and its hooks.

    Attributes:
        name: Contract method name
        contract: Contract type whose interface declares the method
        guard: Pre-flight check, raises PreconditionError
        prepare_args: Maps parameters to the ordered method arguments
        post_process: Maps the receipt to the domain result
        options: Call options, or a callable deriving them from the environment
    """
    name: str
    contract: Contracts
    guard: GuardFunction = default_guard
    prepare_args: PrepareArgsFunction = default_prepare_args
    post_process: PostProcessFunction = default_post_process
    options: OptionsOrCallback = field(default_factory=CallOptions)

    @property
    def abi(self) -> List[Dict[str, Any]]:
        return load_abi(self.contract)

    def resolve_options(self, environment: Environment) -> CallOptions:
        if callable(self.options):
            return self.options(environment)
        return self.options


class TransactionPipeline(Generic[P, R]):
    """
    Executes an OperationDescriptor: ``prepare`` then ``send``.

    The pipeline is immutable and can be shared between threads; all
    per-call state lives in the PreparedTransaction.

    Args:
        descriptor: The operation to execute
        fee_estimator: Estimator for fee-payable calls
    """

    def __init__(self, descriptor: OperationDescriptor, fee_estimator: Optional[FeeEstimator] = None):
        self.descriptor = descriptor
        self.fee_estimator = fee_estimator

    @property
    def name(self) -> str:
        return self.descriptor.name

    def __repr__(self) -> str:
        return f"TransactionPipeline({self.descriptor.contract.value}.{self.descriptor.name})"

    def _is_fee_payable(self, options: CallOptions, environment: Environment) -> bool:
        if options.fee_payable is None:
            return environment.options.fee_payable
        return options.fee_payable

    def _estimate_gas(self, transaction: Dict[str, Any], environment: Environment) -> int:
        try:
            return int(environment.chain.estimate_gas(transaction))
        except FundchainError:
            raise
        except Exception as e:
            raise EstimationError(f"Gas estimation for {self.name} failed: {str(e)}") from e

    def _gas_price(self, options: CallOptions, environment: Environment) -> int:
        if options.gas_price is not None:
            return options.gas_price
        if environment.options.gas_price is not None:
            return environment.options.gas_price
        try:
            return int(environment.chain.gas_price())
        except Exception as e:
            raise EstimationError(f"Cannot fetch gas price: {str(e)}") from e

    def prepare(self, contract_address: str, params: P, environment: Environment) -> PreparedTransaction:
        """
        Validate, encode and price a call without submitting it.

        Args:
            contract_address: Address of the target contract
            params: Operation parameters
            environment: Execution environment

        Returns:
            The prepared, unsigned transaction

        Raises:
            PreconditionError: If the guard rejects the call
            EncodingError: If the parameters don't fit the method signature
            EstimationError: If gas, gas price or fee estimation fails
        """
        descriptor = self.descriptor
        log = environment.logger

        descriptor.guard(params, contract_address, environment)

        try:
            args = list(descriptor.prepare_args(params, contract_address, environment))
        except FundchainError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise EncodingError(f"Cannot prepare arguments for {self.name}: {str(e)}") from e

        fn_abi = find_function(descriptor.abi, self.name, len(args))
        data = encode_function_call(fn_abi, args)
        try:
            to = to_checksum_address(contract_address)
        except ValueError:
            raise EncodingError(f"Invalid contract address: {contract_address!r}")

        options = descriptor.resolve_options(environment)
        sender = environment.wallet_address

        if options.gas is not None:
            gas_estimate = options.gas
        else:
            gas_estimate = self._estimate_gas(
                {"from": sender, "to": to, "data": data, "value": options.value or 0},
                environment
            )
        log.debug(f"Estimated gas for {self.name}: {gas_estimate}")

        if self._is_fee_payable(options, environment):
            if self.fee_estimator is None:
                raise EstimationError(f"{self.name} is fee-payable but no fee estimator is configured")
            fee = self.fee_estimator.estimate_fee(gas_estimate, contract_address, environment)
        else:
            reference = (
                self.fee_estimator.reference_asset(environment)
                if self.fee_estimator is not None
                else environment.native_asset
            )
            fee = Quantity.zero(reference)

        value = options.value or 0
        if fee.token.same_asset(environment.native_asset):
            value += fee.quantity
        elif not fee.is_zero:
            log.debug(f"Fee of {fee.quantity} {fee.token.symbol} is not paid in the native asset; not attached as value")

        gas_limit = options.gas if options.gas is not None else int(gas_estimate * environment.options.gas_multiplier)

        raw_transaction = UnsignedRawTransaction(
            from_address=sender,
            to=to,
            data=data,
            gas=gas_limit,
            gas_price=self._gas_price(options, environment),
            value=value,
            nonce=options.nonce,
            chain_id=environment.chain_id,
        )
        return PreparedTransaction(
            method=self.name,
            params=params,
            fee=fee,
            gas_estimate=gas_estimate,
            transaction_args=args,
            raw_transaction=raw_transaction,
        )

    def send(
        self,
        contract_address: str,
        prepared: PreparedTransaction,
        params: P,
        options: Optional[CallOptions],
        environment: Environment
    ) -> R:
        """
        Submit a prepared transaction and post-process its receipt.

        Args:
            contract_address: Address of the target contract
            prepared: Result of ``prepare`` (optionally signed externally)
            params: Operation parameters, handed to the post-processor
            options: Call options in effect; a ``nonce`` fills an unsigned
                transaction that left nonce assignment to the chain client
            environment: Execution environment

        Returns:
            The post-processed result

        Raises:
            SubmissionError: If the transaction was already submitted, could not
                be sent, or reverted
        """
        log = environment.logger
        options = options or self.descriptor.resolve_options(environment)

        if prepared.submitted:
            raise SubmissionError(f"Prepared {prepared.method} transaction was already submitted")
        prepared.mark_submitted()

        raw_transaction = prepared.raw_transaction
        if options.nonce is not None and raw_transaction.nonce is None and not prepared.signed_transaction:
            raw_transaction = raw_transaction.model_copy(update={"nonce": options.nonce})

        log.info(f"Sending {self.name} to {contract_address}")
        try:
            raw_receipt = environment.chain.send_transaction(raw_transaction, prepared.signed_transaction)
        except FundchainError:
            raise
        except Exception as e:
            log.error(f"Failed to send {self.name} transaction: {e}")
            raise SubmissionError(f"Failed to send {self.name} transaction: {str(e)}") from e

        try:
            receipt = convert_receipt(raw_receipt)
        except ValidationError as e:
            raise SubmissionError(f"Malformed receipt for {self.name}: {str(e)}") from e

        if not receipt.succeeded:
            log.error(f"{self.name} transaction {receipt.tx_hash} reverted")
            raise SubmissionError(
                f"{self.name} transaction {receipt.tx_hash} reverted (gas used: {receipt.gas_used})",
                receipt=receipt,
                tx_hash=receipt.tx_hash
            )
        log.info(f"{self.name} confirmed in block {receipt.block_number}: {receipt.tx_hash}")

        events = environment.chain.decode_logs(self.descriptor.abi, receipt.logs)
        receipt = receipt.model_copy(update={"events": events})

        return self.descriptor.post_process(receipt, params, contract_address, environment)

    def execute(self, contract_address: str, params: P, environment: Environment) -> R:
        """Prepare and send in one go, with the descriptor's own options."""
        prepared = self.prepare(contract_address, params, environment)
        return self.send(
            contract_address,
            prepared,
            params,
            self.descriptor.resolve_options(environment),
            environment
        )

    __call__ = execute


def transaction_factory(
    name: str,
    contract: Contracts,
    guard: Optional[GuardFunction] = None,
    prepare_args: Optional[PrepareArgsFunction] = None,
    post_process: Optional[PostProcessFunction] = None,
    options: Optional[OptionsOrCallback] = None,
    fee_estimator: Optional[FeeEstimator] = None
) -> TransactionPipeline:
    """
    Declare an operation and return its pipeline.

    Hooks left as None use the defaults: no-op guard, flat stringifying
    argument preparation, and a post-processor returning True.
    """
    descriptor: OperationDescriptor = OperationDescriptor(
        name=name,
        contract=contract,
        guard=guard or default_guard,
        prepare_args=prepare_args or default_prepare_args,
        post_process=post_process or default_post_process,
        options=options if options is not None else CallOptions(),
    )
    return TransactionPipeline(descriptor, fee_estimator=fee_estimator)


class AddressQueryTransaction(Generic[P, R]):
    """
    A pipeline whose target address is read from the parameters themselves.

    Args:
        query: Path of mapping keys / attribute names leading to the address
        transaction: The wrapped pipeline
    """

    def __init__(self, query: Sequence[str], transaction: TransactionPipeline):
        if not query:
            raise ValueError("Contract address query must not be empty")
        self.query = list(query)
        self.transaction = transaction

    def resolve_address(self, params: P) -> str:
        """
        Walk the query path through ``params``.

        Raises:
            AddressQueryError: If a step of the path is missing or the value is empty
        """
        value: Any = params
        for depth, key in enumerate(self.query):
            if isinstance(value, Mapping):
                if key not in value:
                    value = None
                else:
                    value = value[key]
            else:
                value = getattr(value, key, None)
            if value is None or value == "":
                missing = ".".join(self.query[:depth + 1])
                raise AddressQueryError(f"Parameters have no contract address at '{missing}'", path=self.query)
        return str(value)

    def prepare(self, params: P, environment: Environment) -> PreparedTransaction:
        return self.transaction.prepare(self.resolve_address(params), params, environment)

    def send(
        self,
        prepared: PreparedTransaction,
        params: P,
        options: Optional[CallOptions],
        environment: Environment
    ) -> R:
        return self.transaction.send(self.resolve_address(params), prepared, params, options, environment)

    def execute(self, params: P, environment: Environment) -> R:
        return self.transaction.execute(self.resolve_address(params), params, environment)

    __call__ = execute


def with_contract_address_query(query: Sequence[str], transaction: TransactionPipeline) -> AddressQueryTransaction:
    """Derive the target contract address of ``transaction`` from ``query`` inside its parameters."""
    return AddressQueryTransaction(query, transaction)
