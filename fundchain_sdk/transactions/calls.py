"""
Read-only contract calls.

The read side mirrors the transaction pipeline without guard, fee or
submission: arguments are prepared, the call is made, and the decoded
return value is post-processed.
"""
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from ..contracts import Contracts, load_abi
from ..environment import Environment
from ..exceptions import EncodingError, FundchainError

CallPrepareArgsFunction = Callable[[Any, str, Environment], List[Any]]
CallPostProcessFunction = Callable[[Any, Any, str, Environment], Any]


def _no_args(params: Any, contract_address: str, environment: Environment) -> List[Any]:
    return []


def _identity(result: Any, params: Any, contract_address: str, environment: Environment) -> Any:
    return result


@dataclass(frozen=True)
class ContractCall:
    """
    A read-only contract method.

    Attributes:
        name: Contract method name
        contract: Contract type whose interface declares the method
        prepare_args: Maps parameters to the ordered method arguments
        post_process: Maps the decoded return value to the result
    """
    name: str
    contract: Contracts
    prepare_args: CallPrepareArgsFunction = _no_args
    post_process: CallPostProcessFunction = _identity

    def __call__(self, contract_address: str, params: Any, environment: Environment) -> Any:
        try:
            args = list(self.prepare_args(params, contract_address, environment))
        except FundchainError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise EncodingError(f"Cannot prepare arguments for {self.name}: {str(e)}") from e

        result = environment.chain.call(contract_address, load_abi(self.contract), self.name, args)
        return self.post_process(result, params, contract_address, environment)


def call_factory(
    name: str,
    contract: Contracts,
    prepare_args: Optional[CallPrepareArgsFunction] = None,
    post_process: Optional[CallPostProcessFunction] = None
) -> ContractCall:
    """Declare a read-only call; omitted hooks take no arguments and return the raw result."""
    return ContractCall(
        name=name,
        contract=contract,
        prepare_args=prepare_args or _no_args,
        post_process=post_process or _identity,
    )
