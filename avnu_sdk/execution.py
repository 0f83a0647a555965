"""
Execution helpers shared by the swap, DCA and staking surfaces.

Every ``execute_*`` entry point ends in :func:`execute_calls`, which picks the
direct path (the account pays gas) or the paymaster path and returns the same
:class:`ExecutionResult` either way.
"""
import logging
from typing import Any, Callable, Optional, Sequence, Union

from .exceptions import ChainMismatchError
from .interfaces import Account, GaslessOptions, PaymasterOptions, result_field
from .models import ExecutionResult
from .paymaster import CallLike, calls_to_wire, execute_all_paymaster_flow, sign_paymaster_transaction
from .utils import same_chain

logger = logging.getLogger(__name__)

BeforeExecuteCallback = Callable[[], Any]


def ensure_chain_id(account: Account, chain_id: Optional[Union[int, str]]) -> None:
    """
    Check that ``account`` is connected to ``chain_id``.

    Nothing is checked when ``chain_id`` is None.

    Raises:
        ChainMismatchError: If the account reports another chain
    """
    if chain_id is None:
        return
    account_chain_id = account.get_chain_id()
    if not same_chain(chain_id, account_chain_id):
        logger.warning(f"Chain mismatch: expected {chain_id}, account is on {account_chain_id}")
        raise ChainMismatchError(chain_id, account_chain_id)


def execute_direct(account: Account, calls: Sequence[CallLike]) -> ExecutionResult:
    """
    Submit calls through the account's own multicall.

    The submission is not retried; a failure reaches the caller as raised by
    the account.

    Returns:
        ExecutionResult with the submitted transaction hash
    """
    result = account.execute(calls_to_wire(calls))
    transaction_hash = result_field(result, "transaction_hash")
    logger.info(f"Transaction submitted: {transaction_hash}")
    return ExecutionResult(transaction_hash=transaction_hash)


def is_paymaster_active(paymaster: Optional[PaymasterOptions]) -> bool:
    return paymaster is not None and paymaster.active


def execute_calls(
    account: Account,
    calls: Sequence[CallLike],
    paymaster: Optional[PaymasterOptions] = None,
) -> ExecutionResult:
    """
    Execute ``calls`` through the paymaster when it is active, directly otherwise.

    Args:
        account: The caller's account
        calls: Ordered calls; an approval, when present, comes first
        paymaster: Optional paymaster configuration

    Returns:
        ExecutionResult, whichever path ran
    """
    if is_paymaster_active(paymaster):
        logger.debug(f"Executing {len(calls)} call(s) through the paymaster")
        return execute_all_paymaster_flow(account, paymaster, calls)
    logger.debug(f"Executing {len(calls)} call(s) directly")
    return execute_direct(account, calls)


def execute_typed_data_flow(
    account: Account,
    gasless: GaslessOptions,
    build: Callable[[], Any],
    submit: Callable[[Any, Sequence[str]], ExecutionResult],
    on_before_execute: Optional[BeforeExecuteCallback] = None,
) -> ExecutionResult:
    """
    Gasless execution settled directly with the API.

    ``gasless`` is validated before ``build`` runs, so incomplete settings
    never reach the network. ``on_before_execute`` runs after the account has
    signed and right before ``submit`` sends the signed payload.

    Args:
        account: Account that signs the typed data
        gasless: Gas token allowance or gas-free mode
        build: Fetches the typed data to sign
        submit: Sends the typed data and its canonical signature
        on_before_execute: Optional hook invoked just before submission

    Raises:
        ConfigurationError: If ``gasless`` is incomplete
    """
    gasless.validate()
    typed_data = build()
    signed = sign_paymaster_transaction(account, typed_data)
    if on_before_execute is not None:
        on_before_execute()
    return submit(signed.typed_data, signed.signature)
