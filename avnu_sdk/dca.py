"""
DCA surface: recurring orders that sell a fixed amount per cycle.
"""
import logging
from typing import Any, Dict, Optional, Sequence

from .config import DCA_API_VERSION, AvnuOptions
from .execution import BeforeExecuteCallback, execute_calls, execute_typed_data_flow
from .gateway import RequestGateway, get_default_gateway
from .interfaces import Account, GaslessOptions, PaymasterOptions
from .models import AvnuCalls, CreateDcaOrder, DcaOrder, DcaOrderStatus, ExecutionResult, Page
from .utils import to_hex

logger = logging.getLogger(__name__)

DCA_ORDERS_PATH = f"/dca/{DCA_API_VERSION}/orders"


def get_dca_orders(
    trader_address: str,
    status: Optional[DcaOrderStatus] = None,
    page: Optional[int] = None,
    size: Optional[int] = None,
    sort: Optional[str] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> Page[DcaOrder]:
    """
    List a trader's DCA orders.

    Args:
        trader_address: Owner of the orders
        status: Only orders in this status
        page: Zero-based page number
        size: Page size
        sort: Sort expression, e.g. ``timestamp,desc``
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        One page of orders
    """
    params = {
        "traderAddress": trader_address,
        "status": status.value if isinstance(status, DcaOrderStatus) else status,
        "page": page,
        "size": size,
        "sort": sort,
    }
    gateway = gateway or get_default_gateway()
    return gateway.get(DCA_ORDERS_PATH, params, options, Page[DcaOrder])


def _action_to_calls(endpoint: str, body: Any, options: Optional[AvnuOptions],
                     gateway: Optional[RequestGateway]) -> AvnuCalls:
    path = f"{DCA_ORDERS_PATH}/{endpoint}" if endpoint else DCA_ORDERS_PATH
    gateway = gateway or get_default_gateway()
    return gateway.post(path, body, options, AvnuCalls)


def create_dca_to_calls(
    order: CreateDcaOrder,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> AvnuCalls:
    """Build the calls that open ``order``."""
    return _action_to_calls("", order.to_wire(), options, gateway)


def cancel_dca_to_calls(
    order_address: str,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> AvnuCalls:
    """Build the calls that cancel the order deployed at ``order_address``."""
    return _action_to_calls(f"{order_address}/cancel", None, options, gateway)


def _gasless_body(gasless: GaslessOptions) -> Dict[str, Any]:
    if gasless.gasfree:
        return {"gasfree": True}
    return {
        "gasfree": False,
        "gasTokenAddress": gasless.gas_token_address,
        "maxGasTokenAmount": to_hex(gasless.max_gas_token_amount),
    }


def build_create_dca_typed_data(
    order: CreateDcaOrder,
    gasless: GaslessOptions,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> Any:
    """
    Request typed data that authorizes opening ``order`` without paying gas.

    Raises:
        ConfigurationError: If ``gasless`` lacks a gas token allowance
    """
    gasless.validate()
    body = {**order.to_wire(), **_gasless_body(gasless)}
    gateway = gateway or get_default_gateway()
    return gateway.post(f"{DCA_ORDERS_PATH}/build-typed-data", body, options)


def execute_create_dca_typed_data(
    user_address: str,
    typed_data: Any,
    signature: Sequence[str],
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    """
    Submit signed typed data; the API relays it and settles gas.

    Returns:
        ExecutionResult, with the gas token spent when gas was paid in a token
    """
    body = {"userAddress": user_address, "typedData": typed_data, "signature": list(signature)}
    gateway = gateway or get_default_gateway()
    return gateway.post(f"{DCA_ORDERS_PATH}/execute", body, options, ExecutionResult)


def execute_create_dca(
    account: Account,
    order: CreateDcaOrder,
    paymaster: Optional[PaymasterOptions] = None,
    gasless: Optional[GaslessOptions] = None,
    on_before_execute: Optional[BeforeExecuteCallback] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    """
    Open a DCA order.

    With ``gasless`` the order is authorized through typed data the API
    builds and relays; no call list is built. ``on_before_execute`` is only
    used on that path, after signing and before submission. Without
    ``gasless`` the order's calls go through ``paymaster`` when it is active,
    or through the account.

    Args:
        account: The caller's account
        order: Order to create
        paymaster: Optional paymaster configuration
        gasless: Optional gas abstraction settled with the API
        on_before_execute: Optional hook run right before the gasless submission
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Raises:
        ConfigurationError: If ``gasless`` is incomplete, before any request
    """
    if gasless is not None:
        return execute_typed_data_flow(
            account,
            gasless,
            build=lambda: build_create_dca_typed_data(order, gasless, options, gateway),
            submit=lambda typed_data, signature: execute_create_dca_typed_data(
                account.address, typed_data, signature, options, gateway
            ),
            on_before_execute=on_before_execute,
        )
    dca_calls = create_dca_to_calls(order, options, gateway)
    return execute_calls(account, dca_calls.calls, paymaster)


def execute_cancel_dca(
    account: Account,
    order_address: str,
    paymaster: Optional[PaymasterOptions] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> ExecutionResult:
    """Cancel the DCA order deployed at ``order_address``."""
    dca_calls = cancel_dca_to_calls(order_address, options, gateway)
    logger.debug(f"Cancelling DCA order {order_address}")
    return execute_calls(account, dca_calls.calls, paymaster)
