"""
Collaborator interfaces: the caller's account and paymaster provider.

Any object with the right attributes works; ``starknet.py``-style results
(objects with a ``transaction_hash``/``typed_data`` attribute) and plain
dicts are both accepted.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable

from .exceptions import ConfigurationError

RawSignature = Union[Sequence[Union[int, str]], Dict[str, Any], Any]


@runtime_checkable
class Account(Protocol):
    """Protocol for the caller's signing account"""
    address: str

    def sign_message(self, typed_data: Any) -> RawSignature:
        """Sign typed data and return the signature (list of scalars or an ``{r, s}`` pair)"""
        ...

    def execute(self, calls: List[Dict[str, Any]]) -> Any:
        """Submit calls through the account's multicall; the result carries ``transaction_hash``"""
        ...

    def get_chain_id(self) -> Union[int, str]:
        """Return the chain the account is connected to"""
        ...


@runtime_checkable
class PaymasterProvider(Protocol):
    """Protocol for a fee-abstraction relay"""

    def build_transaction(self, invoke: Dict[str, Any], params: Any) -> Any:
        """Return a prepared transaction carrying ``typed_data``"""
        ...

    def execute_transaction(self, invoke: Dict[str, Any], params: Any) -> Any:
        """Relay a signed invoke; the result carries ``transaction_hash``"""
        ...


@dataclass(frozen=True)
class PaymasterOptions:
    """
    Paymaster configuration for an execution.

    Attributes:
        provider: The paymaster provider that builds and relays transactions
        params: Provider-specific execution parameters (fee mode, version,
            gas token), passed through untouched
        active: Route executions through the paymaster only when True
    """
    provider: PaymasterProvider
    params: Any = None
    active: bool = True


@dataclass(frozen=True)
class GaslessOptions:
    """
    Gas abstraction for DCA orders, settled directly with the AVNU API.

    Either ``gasfree`` (sponsored, no token needed) or a gas token allowance
    (``gas_token_address`` + ``max_gas_token_amount``).
    """
    gasfree: bool = False
    gas_token_address: Optional[str] = None
    max_gas_token_amount: Optional[int] = None

    def validate(self) -> None:
        """
        Raises:
            ConfigurationError: If a gas token allowance is required but incomplete
        """
        if self.gasfree:
            return
        if not self.gas_token_address or self.max_gas_token_amount is None:
            raise ConfigurationError(
                "gas_token_address and max_gas_token_amount are required for gasless execution"
            )
        if self.max_gas_token_amount < 0:
            raise ConfigurationError("max_gas_token_amount must be non-negative")


def result_field(result: Any, name: str) -> Any:
    """
    Read ``name`` from a collaborator's result, dict or object.

    Raises:
        KeyError: If the field is absent
    """
    if isinstance(result, dict):
        if name not in result:
            raise KeyError(f"Missing '{name}' in result: {result}")
        return result[name]
    if not hasattr(result, name):
        raise KeyError(f"Missing '{name}' on {type(result).__name__}")
    return getattr(result, name)
