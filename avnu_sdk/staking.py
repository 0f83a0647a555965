"""
Staking surface: delegation to the AVNU staking pools.

Every action posts to ``/staking/v1/pools/{pool}/members/{user}/{action}``
and gets back the calls that perform it.
"""
import logging
from typing import Any, Dict, Optional

from .config import STAKING_API_VERSION, AvnuOptions
from .execution import execute_calls
from .gateway import RequestGateway, get_default_gateway
from .interfaces import Account, PaymasterOptions
from .models import AvnuCalls, ExecutionResult, StakingInfo, UserStakingInfo
from .utils import to_hex

logger = logging.getLogger(__name__)

STAKING_PATH = f"/staking/{STAKING_API_VERSION}"


def get_staking_info(
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> StakingInfo:
    """Fetch AVNU's staker info, including its delegation pools."""
    gateway = gateway or get_default_gateway()
    return gateway.get(STAKING_PATH, None, options, StakingInfo)


def get_user_staking_info(
    token_address: str,
    user_address: str,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> UserStakingInfo:
    """
    Fetch a user's position in the pool of ``token_address``.

    Args:
        token_address: The staked token
        user_address: The delegator
    """
    gateway = gateway or get_default_gateway()
    return gateway.get(f"{STAKING_PATH}/pools/{token_address}/members/{user_address}", None, options, UserStakingInfo)


def _action_to_calls(action: str, pool_address: str, user_address: str, body: Dict[str, Any],
                     options: Optional[AvnuOptions], gateway: Optional[RequestGateway]) -> AvnuCalls:
    path = f"{STAKING_PATH}/pools/{pool_address}/members/{user_address}/{action}"
    gateway = gateway or get_default_gateway()
    return gateway.post(path, body, options, AvnuCalls)


def stake_to_calls(
    pool_address: str,
    user_address: str,
    amount: int,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> AvnuCalls:
    """Build the calls that delegate ``amount`` to ``pool_address``."""
    body = {"userAddress": user_address, "amount": to_hex(amount)}
    return _action_to_calls("stake", pool_address, user_address, body, options, gateway)


def initiate_unstake_to_calls(
    pool_address: str,
    user_address: str,
    amount: int,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> AvnuCalls:
    """Build the calls that start the withdrawal period for ``amount``."""
    body = {"userAddress": user_address, "amount": to_hex(amount)}
    return _action_to_calls("initiate-withdraw", pool_address, user_address, body, options, gateway)


def unstake_to_calls(
    pool_address: str,
    user_address: str,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> AvnuCalls:
    """Build the calls that claim a withdrawal once its period has ended."""
    body = {"userAddress": user_address}
    return _action_to_calls("claim-withdraw", pool_address, user_address, body, options, gateway)


def claim_rewards_to_calls(
    pool_address: str,
    user_address: str,
    restake: bool = False,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> AvnuCalls:
    """
    Build the calls that claim pending rewards.

    Args:
        restake: Stake the rewards again instead of sending them to the user
            (STRK pools only)
    """
    body = {"userAddress": user_address, "restake": restake}
    return _action_to_calls("claim-rewards", pool_address, user_address, body, options, gateway)


def execute_stake(
    account: Account,
    pool_address: str,
    amount: int,
    paymaster: Optional[PaymasterOptions] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    """
    Delegate ``amount`` to ``pool_address`` from ``account``.

    Returns:
        ExecutionResult, from the paymaster when it is active
    """
    staking_calls = stake_to_calls(pool_address, account.address, amount, options, gateway)
    return execute_calls(account, staking_calls.calls, paymaster)


def execute_initiate_unstake(
    account: Account,
    pool_address: str,
    amount: int,
    paymaster: Optional[PaymasterOptions] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    staking_calls = initiate_unstake_to_calls(pool_address, account.address, amount, options, gateway)
    return execute_calls(account, staking_calls.calls, paymaster)


def execute_unstake(
    account: Account,
    pool_address: str,
    paymaster: Optional[PaymasterOptions] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    staking_calls = unstake_to_calls(pool_address, account.address, options, gateway)
    return execute_calls(account, staking_calls.calls, paymaster)


def execute_claim_rewards(
    account: Account,
    pool_address: str,
    restake: bool = False,
    paymaster: Optional[PaymasterOptions] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    staking_calls = claim_rewards_to_calls(pool_address, account.address, restake, options, gateway)
    logger.debug(f"Claiming rewards from pool {pool_address} (restake={restake})")
    return execute_calls(account, staking_calls.calls, paymaster)
