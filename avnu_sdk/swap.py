"""
Swap surface: quotes, prices, call building and execution.
"""
import logging
from typing import List, Optional, Sequence

from .config import SWAP_API_VERSION, AvnuOptions
from .execution import ensure_chain_id, execute_calls
from .gateway import RequestGateway, get_default_gateway
from .interfaces import Account, PaymasterOptions
from .models import AvnuCalls, ExecutionResult, Price, Quote, Source
from .utils import to_hex

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10000

SWAP_PATH = f"/swap/{SWAP_API_VERSION}"


def validate_slippage(slippage_bps: int) -> int:
    """
    Check a slippage tolerance in basis points.

    Raises:
        ValueError: If it is not an integer between 0 and 10000
    """
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        raise ValueError(f"Slippage must be an integer number of basis points, got {slippage_bps!r}")
    if not 0 <= slippage_bps <= BPS_DENOMINATOR:
        raise ValueError(f"Slippage must be between 0 and {BPS_DENOMINATOR} bps, got {slippage_bps}")
    return slippage_bps


def calculate_min_received_amount(amount: int, slippage_bps: int) -> int:
    """
    Lowest amount received once ``slippage_bps`` is applied.

    >>> calculate_min_received_amount(1_000_000, 30)
    997000
    """
    validate_slippage(slippage_bps)
    return amount - amount * slippage_bps // BPS_DENOMINATOR


def calculate_max_spend_amount(amount: int, slippage_bps: int) -> int:
    """
    Highest amount spent once ``slippage_bps`` is applied.

    >>> calculate_max_spend_amount(1_000_000, 30)
    1003000
    """
    validate_slippage(slippage_bps)
    return amount + amount * slippage_bps // BPS_DENOMINATOR


def fetch_quotes(
    sell_token_address: str,
    buy_token_address: str,
    sell_amount: Optional[int] = None,
    buy_amount: Optional[int] = None,
    taker_address: Optional[str] = None,
    size: Optional[int] = None,
    exclude_sources: Optional[Sequence[str]] = None,
    integrator_fees: Optional[int] = None,
    integrator_fee_recipient: Optional[str] = None,
    integrator_name: Optional[str] = None,
    only_direct: Optional[bool] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[Quote]:
    """
    Fetch the best quotes for a token pair, best first.

    Exactly one side of the trade is usually fixed: pass ``sell_amount`` for
    an exact-input quote or ``buy_amount`` for an exact-output one.

    Args:
        sell_token_address: Token to sell
        buy_token_address: Token to buy
        sell_amount: Amount to sell, in minor units
        buy_amount: Amount to buy, in minor units
        taker_address: Address that will execute the trade
        size: Maximum number of quotes
        exclude_sources: Liquidity sources to ignore
        integrator_fees: Integrator fee in bps
        integrator_fee_recipient: Address receiving integrator fees
        integrator_name: Integrator identifier
        only_direct: Restrict to single-hop routes
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        List of quotes

    Raises:
        ValueError: If neither ``sell_amount`` nor ``buy_amount`` is given
    """
    if not sell_amount and not buy_amount:
        raise ValueError("Sell amount or buy amount is required")
    params = {
        "sellTokenAddress": sell_token_address,
        "buyTokenAddress": buy_token_address,
        "sellAmount": to_hex(sell_amount) if sell_amount else None,
        "buyAmount": to_hex(buy_amount) if buy_amount else None,
        "takerAddress": taker_address,
        "size": size,
        "excludeSources": list(exclude_sources) if exclude_sources else None,
        "integratorFees": to_hex(integrator_fees) if integrator_fees else None,
        "integratorFeeRecipient": integrator_fee_recipient,
        "integratorName": integrator_name,
        "onlyDirect": only_direct,
    }
    gateway = gateway or get_default_gateway()
    return gateway.get(f"{SWAP_PATH}/quotes", params, options, List[Quote])


def fetch_prices(
    sell_token_address: str,
    buy_token_address: str,
    sell_amount: int,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[Price]:
    """
    Fetch raw per-source prices, without path optimization, best first.
    """
    params = {
        "sellTokenAddress": sell_token_address,
        "buyTokenAddress": buy_token_address,
        "sellAmount": to_hex(sell_amount),
    }
    gateway = gateway or get_default_gateway()
    return gateway.get(f"{SWAP_PATH}/prices", params, options, List[Price])


def fetch_sources(
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[Source]:
    gateway = gateway or get_default_gateway()
    return gateway.get(f"{SWAP_PATH}/sources", None, options, List[Source])


def quote_to_calls(
    quote_id: str,
    taker_address: str,
    slippage_bps: int,
    include_approve: bool = True,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> AvnuCalls:
    """
    Build the calls that execute a quote.

    The server reproduces the quote's economics under ``slippage_bps``; no
    amount is recomputed here.

    Args:
        quote_id: Id of the selected quote
        taker_address: Address that executes the trade
        slippage_bps: Tolerance in basis points (``50`` is 0.5%)
        include_approve: Prepend the token approval call
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        AvnuCalls; with ``include_approve`` the approval comes first
    """
    body = {
        "quoteId": quote_id,
        "takerAddress": taker_address,
        "slippage": validate_slippage(slippage_bps),
        "includeApprove": include_approve,
    }
    gateway = gateway or get_default_gateway()
    return gateway.post(f"{SWAP_PATH}/build", body, options, AvnuCalls)


def execute_swap(
    account: Account,
    quote: Quote,
    slippage_bps: int,
    execute_approve: bool = True,
    paymaster: Optional[PaymasterOptions] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    """
    Execute a quote with ``account``.

    The quote's chain is checked against the account before anything is
    built. The calls are then relayed through ``paymaster`` when it is
    active, or submitted by the account otherwise.

    Args:
        account: The caller's account
        quote: The selected quote
        slippage_bps: Tolerance in basis points
        execute_approve: False if the account already approved the sell amount
        paymaster: Optional paymaster configuration
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        ExecutionResult

    Raises:
        ChainMismatchError: If the account is on another chain than the quote
    """
    ensure_chain_id(account, quote.chain_id)
    swap_calls = quote_to_calls(
        quote.quote_id, account.address, slippage_bps, execute_approve, options=options, gateway=gateway
    )
    logger.debug(f"Built {len(swap_calls.calls)} call(s) for quote {quote.quote_id}")
    return execute_calls(account, swap_calls.calls, paymaster)
