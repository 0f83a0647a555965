"""
Token catalogue lookups.
"""
from typing import List, Optional, Sequence, Union

from .config import TOKENS_API_VERSION, AvnuOptions
from .gateway import RequestGateway, get_default_gateway
from .models import Page, Token, TokenBalance

TOKENS_PATH = f"/{TOKENS_API_VERSION}/starknet/tokens"
BALANCES_PATH = f"/{TOKENS_API_VERSION}/starknet/balances"

VERIFIED_TAGS = ("Verified", "Unruggable")


def fetch_tokens(
    page: Optional[int] = None,
    size: Optional[int] = None,
    search: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> Page[Token]:
    """
    Fetch exchangeable tokens, optionally filtered.

    Args:
        page: Zero-based page number
        size: Page size
        search: Free-text search on name, symbol or address
        tags: Only tokens carrying all of these tags
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        One page of tokens
    """
    params = {
        "page": page,
        "size": size,
        "search": search,
        "tag": list(tags) if tags else None,
    }
    gateway = gateway or get_default_gateway()
    return gateway.get(TOKENS_PATH, params, options, Page[Token])


def fetch_token_by_address(
    token_address: str,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> Token:
    gateway = gateway or get_default_gateway()
    return gateway.get(f"{TOKENS_PATH}/{token_address}", None, options, Token)


def fetch_verified_token_by_symbol(
    symbol: str,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> Optional[Token]:
    """
    Look up a verified token by its exact symbol (case-insensitive).

    Returns:
        The token, or None when the best match has another symbol
    """
    result = fetch_tokens(page=0, size=1, search=symbol, tags=VERIFIED_TAGS, options=options, gateway=gateway)
    if result.content and result.content[0].symbol.lower() == symbol.lower():
        return result.content[0]
    return None


def fetch_tokens_balances(
    user_address: str,
    tokens: Sequence[Union[Token, str]],
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[TokenBalance]:
    """
    Fetch an account's balances for several tokens.

    Args:
        user_address: Account holding the tokens
        tokens: Tokens, or token addresses, to look up
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        One balance per requested token
    """
    params = {
        "userAddress": user_address,
        "tokenAddress": [token.address if isinstance(token, Token) else token for token in tokens],
    }
    gateway = gateway or get_default_gateway()
    return gateway.get(BALANCES_PATH, params, options, List[TokenBalance])
