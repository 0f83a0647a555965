"""
Paymaster flow: build, sign and execute a relayed transaction.

The provider builds typed data for an ``invoke`` on behalf of the account,
the account signs it locally, and the provider relays the signed payload.
Errors from any step reach the caller unchanged; :class:`PaymasterFlow`
additionally records which step failed.
"""
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from .exceptions import ConfigurationError, PaymasterStateError
from .interfaces import Account, PaymasterOptions, RawSignature, result_field
from .models import Call, ExecutionResult, SignedPaymasterTransaction
from .utils import to_hex


CallLike = Union[Call, Dict[str, Any]]


def normalize_signature(raw_signature: RawSignature) -> List[str]:
    """
    Convert an account signature to its canonical form.

    Accepts a sequence of scalars (ints or hex/decimal strings) or an
    ``{r, s}`` pair, as a dict or an object with ``r``/``s`` attributes.
    Already-canonical input comes back unchanged.

    Returns:
        List of minimal, even-length hex strings

    Raises:
        ValueError: If the signature shape is not recognised
    """
    if isinstance(raw_signature, dict):
        if "r" in raw_signature and "s" in raw_signature:
            return [to_hex(raw_signature["r"]), to_hex(raw_signature["s"])]
        raise ValueError(f"Unsupported signature object, expected r and s: {sorted(raw_signature)}")
    if isinstance(raw_signature, (list, tuple)):
        return [to_hex(scalar) for scalar in raw_signature]
    if hasattr(raw_signature, "r") and hasattr(raw_signature, "s"):
        return [to_hex(raw_signature.r), to_hex(raw_signature.s)]
    raise ValueError(f"Unsupported signature type: {type(raw_signature).__name__}")


def calls_to_wire(calls: Sequence[CallLike]) -> List[Dict[str, Any]]:
    """Render calls in the ``{contractAddress, entrypoint, calldata}`` shape."""
    return [call.to_wire() if isinstance(call, Call) else dict(call) for call in calls]


def build_paymaster_transaction(
    taker_address: str,
    paymaster: PaymasterOptions,
    calls: Sequence[CallLike],
) -> Any:
    """
    Ask the paymaster provider to prepare typed data for ``calls``.

    Args:
        taker_address: Address of the account the calls run as
        paymaster: Paymaster provider and its execution parameters
        calls: Ordered calls to execute

    Returns:
        The typed data to sign
    """
    if paymaster.provider is None:
        raise ConfigurationError("Paymaster provider is required")
    invoke = {"type": "invoke", "invoke": {"userAddress": taker_address, "calls": calls_to_wire(calls)}}
    prepared = paymaster.provider.build_transaction(invoke, paymaster.params)
    return result_field(prepared, "typed_data")


def sign_paymaster_transaction(account: Account, typed_data: Any) -> SignedPaymasterTransaction:
    """
    Sign typed data with the account and normalize the signature.

    Returns:
        The typed data paired with its canonical signature
    """
    raw_signature = account.sign_message(typed_data)
    return SignedPaymasterTransaction(typed_data=typed_data, signature=normalize_signature(raw_signature))


def execute_paymaster_transaction(
    taker_address: str,
    paymaster: PaymasterOptions,
    signed_transaction: SignedPaymasterTransaction,
) -> ExecutionResult:
    """
    Relay a signed transaction through the paymaster provider.

    Returns:
        ExecutionResult with the relayed transaction hash

    Raises:
        ConfigurationError: If no paymaster provider is configured
    """
    if paymaster.provider is None:
        raise ConfigurationError("Paymaster provider is required")
    invoke = {
        "type": "invoke",
        "invoke": {
            "userAddress": taker_address,
            "typedData": signed_transaction.typed_data,
            "signature": list(signed_transaction.signature),
        },
    }
    result = paymaster.provider.execute_transaction(invoke, paymaster.params)
    return ExecutionResult(transaction_hash=result_field(result, "transaction_hash"))


def execute_all_paymaster_flow(
    account: Account,
    paymaster: PaymasterOptions,
    calls: Sequence[CallLike],
) -> ExecutionResult:
    """Run build, sign and execute in order, stopping at the first failure."""
    return PaymasterFlow(account, paymaster).run_all(calls)


class PaymasterStep(str, Enum):
    BUILD = "build"
    SIGN = "sign"
    EXECUTE = "execute"


class PaymasterFlowState(str, Enum):
    PENDING = "pending"
    BUILT = "built"
    SIGNED = "signed"
    EXECUTED = "executed"
    FAILED = "failed"


class PaymasterFlow:
    """
    One relayed execution, driven strictly in order.

    ``build`` → ``sign`` → ``execute``; each step only runs once the previous
    one has succeeded. A failing step leaves the instance in ``FAILED`` with
    ``failed_step`` set, and the original exception propagates.

    Args:
        account: The account that signs the typed data
        paymaster: Paymaster provider and parameters
        logger: Optional logger instance
    """

    def __init__(self, account: Account, paymaster: PaymasterOptions, logger: Optional[logging.Logger] = None):
        self.account = account
        self.paymaster = paymaster
        self.logger = logger or logging.getLogger(__name__)
        self.state = PaymasterFlowState.PENDING
        self.failed_step: Optional[PaymasterStep] = None
        self.typed_data: Any = None
        self.signed_transaction: Optional[SignedPaymasterTransaction] = None
        self.result: Optional[ExecutionResult] = None

    def build(self, calls: Sequence[CallLike]) -> Any:
        self._require(PaymasterFlowState.PENDING, PaymasterStep.BUILD)
        with self._step(PaymasterStep.BUILD):
            self.typed_data = build_paymaster_transaction(self.account.address, self.paymaster, calls)
        self.state = PaymasterFlowState.BUILT
        return self.typed_data

    def sign(self) -> SignedPaymasterTransaction:
        self._require(PaymasterFlowState.BUILT, PaymasterStep.SIGN)
        with self._step(PaymasterStep.SIGN):
            self.signed_transaction = sign_paymaster_transaction(self.account, self.typed_data)
        self.state = PaymasterFlowState.SIGNED
        return self.signed_transaction

    def execute(self) -> ExecutionResult:
        self._require(PaymasterFlowState.SIGNED, PaymasterStep.EXECUTE)
        with self._step(PaymasterStep.EXECUTE):
            self.result = execute_paymaster_transaction(
                self.account.address, self.paymaster, self.signed_transaction
            )
        self.state = PaymasterFlowState.EXECUTED
        self.logger.info(f"Paymaster transaction relayed: {self.result.transaction_hash}")
        return self.result

    def run_all(self, calls: Sequence[CallLike]) -> ExecutionResult:
        self.build(calls)
        self.sign()
        return self.execute()

    def _require(self, expected: PaymasterFlowState, step: PaymasterStep) -> None:
        if self.state != expected:
            raise PaymasterStateError(
                f"Cannot run paymaster {step.value} step in state {self.state.value}", state=self.state
            )

    @contextmanager
    def _step(self, step: PaymasterStep) -> Iterator[None]:
        self.logger.debug(f"Paymaster {step.value} step started")
        try:
            yield
        except Exception as e:
            self.state = PaymasterFlowState.FAILED
            self.failed_step = step
            self.logger.warning(f"Paymaster {step.value} step failed: {e}")
            raise
