"""
AVNU SDK - quotes, swaps, DCA orders, staking and market data on Starknet.
"""
from .client import AvnuClient
from .config import AvnuOptions, NetworkConfig
from .exceptions import (
    AvnuError, ChainMismatchError, ConfigurationError, ContractError, IntegrityError, InvalidSignatureError,
    MissingSignatureError, PaymasterStateError, RequestCancelledError, RequestError, ResponseValidationError
)
from .gateway import RequestGateway, ResponseAuthenticator, verify_response
from .interfaces import Account, GaslessOptions, PaymasterOptions, PaymasterProvider
from .market import get_market_data, get_prices, get_price_feed, get_token_market_data
from .models import (
    AvnuCalls, Call, CreateDcaOrder, DcaOrder, DcaOrderStatus, ExecutionResult, FeedDateRange, FeedResolution,
    Page, PriceFeedType, PricingStrategy, Quote, Route, SignedPaymasterTransaction, Token, TokenBalance,
    TokenMarketData, TokenPrice
)
from .paymaster import (
    PaymasterFlow, PaymasterFlowState, PaymasterStep, build_paymaster_transaction, execute_all_paymaster_flow,
    execute_paymaster_transaction, normalize_signature, sign_paymaster_transaction
)
from .swap import (
    calculate_max_spend_amount, calculate_min_received_amount, execute_swap, fetch_prices, fetch_quotes,
    fetch_sources, quote_to_calls
)
from .version import __version__

__all__ = [
    "AvnuClient",
    "AvnuOptions",
    "NetworkConfig",
    "AvnuError",
    "ChainMismatchError",
    "ConfigurationError",
    "ContractError",
    "IntegrityError",
    "InvalidSignatureError",
    "MissingSignatureError",
    "PaymasterStateError",
    "RequestCancelledError",
    "RequestError",
    "ResponseValidationError",
    "RequestGateway",
    "ResponseAuthenticator",
    "verify_response",
    "Account",
    "GaslessOptions",
    "PaymasterOptions",
    "PaymasterProvider",
    "AvnuCalls",
    "Call",
    "CreateDcaOrder",
    "DcaOrder",
    "DcaOrderStatus",
    "ExecutionResult",
    "FeedDateRange",
    "FeedResolution",
    "Page",
    "PriceFeedType",
    "PricingStrategy",
    "Quote",
    "Route",
    "SignedPaymasterTransaction",
    "Token",
    "TokenBalance",
    "TokenMarketData",
    "TokenPrice",
    "get_market_data",
    "get_prices",
    "get_price_feed",
    "get_token_market_data",
    "PaymasterFlow",
    "PaymasterFlowState",
    "PaymasterStep",
    "build_paymaster_transaction",
    "execute_all_paymaster_flow",
    "execute_paymaster_transaction",
    "normalize_signature",
    "sign_paymaster_transaction",
    "calculate_max_spend_amount",
    "calculate_min_received_amount",
    "execute_swap",
    "fetch_prices",
    "fetch_quotes",
    "fetch_sources",
    "quote_to_calls",
    "__version__",
]
