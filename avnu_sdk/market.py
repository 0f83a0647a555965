"""
Market data from the AVNU impulse API: token market data, price, volume and
TVL feeds, and bulk USD prices.

Every call goes through the same gateway as the rest of the SDK, so responses
are authenticated whenever the options carry a public key.
"""
import calendar
import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple, Union

from .config import IMPULSE_API_VERSION, PRICES_API_VERSION, AvnuOptions, get_impulse_base_url
from .gateway import RequestGateway, get_default_gateway
from .models import (
    CandlePriceData, DataPoint, DataPointWithUsd, ExchangeDataPoint, ExchangeRangeDataPoint, FeedDateRange,
    FeedResolution, PriceFeedType, TokenMarketData, TokenPrice
)

logger = logging.getLogger(__name__)

TOKENS_PATH = f"/{IMPULSE_API_VERSION}/tokens"
PRICES_PATH = f"/{PRICES_API_VERSION}/tokens/prices"

DateRange = Union[FeedDateRange, str]
Resolution = Union[FeedResolution, str]


def _subtract_months(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _format_moment(moment: datetime, full_date: bool) -> str:
    if full_date:
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return moment.strftime("%Y-%m-%d")


def dates_from_range(
    date_range: Optional[DateRange],
    full_date: bool = True,
    now: Optional[datetime] = None,
) -> Optional[Tuple[str, str]]:
    """
    Turn a relative range into ``(start, end)`` date strings ending now.

    Args:
        date_range: How far back the range starts; None for no range
        full_date: ISO 8601 UTC timestamps when True, ``YYYY-MM-DD`` otherwise
        now: Range end; the current UTC time when omitted

    Returns:
        The formatted bounds, or None when no range was given
    """
    if date_range is None:
        return None
    date_range = FeedDateRange(date_range)
    now = now or datetime.now(timezone.utc)
    if date_range == FeedDateRange.ONE_HOUR:
        start = now - timedelta(hours=1)
    elif date_range == FeedDateRange.ONE_DAY:
        start = now - timedelta(days=1)
    elif date_range == FeedDateRange.ONE_WEEK:
        start = now - timedelta(weeks=1)
    elif date_range == FeedDateRange.ONE_MONTH:
        start = _subtract_months(now, 1)
    else:
        start = _subtract_months(now, 12)
    return _format_moment(start, full_date), _format_moment(now, full_date)


def _feed_params(date_range: Optional[DateRange], resolution: Optional[Resolution],
                 quote_token_address: Optional[str] = None) -> dict:
    dates = dates_from_range(date_range, full_date=True)
    return {
        "resolution": FeedResolution(resolution).value if resolution is not None else None,
        "startDate": dates[0] if dates else None,
        "endDate": dates[1] if dates else None,
        "quoteTokenAddress": quote_token_address,
    }


def _simple_params(date_range: Optional[DateRange]) -> dict:
    dates = dates_from_range(date_range, full_date=False)
    return {"startDate": dates[0] if dates else None, "endDate": dates[1] if dates else None}


def _get(path: str, params: Optional[dict], options: Optional[AvnuOptions],
         gateway: Optional[RequestGateway], schema):
    gateway = gateway or get_default_gateway()
    return gateway.get(path, params, options, schema, base_url=get_impulse_base_url(options))


def get_market_data(
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[TokenMarketData]:
    """Fetch the most traded Starknet tokens with their market data."""
    return _get(TOKENS_PATH, None, options, gateway, List[TokenMarketData])


def get_token_market_data(
    token_address: str,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> TokenMarketData:
    return _get(f"{TOKENS_PATH}/{token_address}", None, options, gateway, TokenMarketData)


def get_price_feed(
    token_address: str,
    feed_type: Union[PriceFeedType, str] = PriceFeedType.LINE,
    date_range: Optional[DateRange] = None,
    resolution: Optional[Resolution] = None,
    quote_token_address: Optional[str] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> Union[List[DataPoint], List[CandlePriceData]]:
    """
    Fetch a token's price history.

    Args:
        token_address: Token to chart
        feed_type: ``LINE`` for points, ``CANDLE`` for OHLCV candles
        date_range: How far back the feed starts
        resolution: Bucket size of each point
        quote_token_address: Price in this token instead of USD
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        Data points for ``LINE``, candles for ``CANDLE``
    """
    feed_type = PriceFeedType(feed_type)
    if feed_type == PriceFeedType.CANDLE:
        path, schema = f"{TOKENS_PATH}/{token_address}/prices/candle", List[CandlePriceData]
    else:
        path, schema = f"{TOKENS_PATH}/{token_address}/prices/line", List[DataPoint]
    return _get(path, _feed_params(date_range, resolution, quote_token_address), options, gateway, schema)


def get_volume_by_exchange(
    token_address: str,
    date_range: Optional[DateRange] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[ExchangeRangeDataPoint]:
    """Fetch a token's traded volume per exchange over ``date_range``."""
    return _get(f"{TOKENS_PATH}/{token_address}/exchange-volumes", _simple_params(date_range),
                options, gateway, List[ExchangeRangeDataPoint])


def get_exchange_volume_feed(
    token_address: str,
    date_range: Optional[DateRange] = None,
    resolution: Optional[Resolution] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[ExchangeDataPoint]:
    return _get(f"{TOKENS_PATH}/{token_address}/exchange-volumes/line", _feed_params(date_range, resolution),
                options, gateway, List[ExchangeDataPoint])


def get_tvl_by_exchange(
    token_address: str,
    at: Optional[Union[date, datetime, str]] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[ExchangeDataPoint]:
    """
    Fetch a token's TVL per exchange.

    Args:
        token_address: Token to look up
        at: Point in time; the latest snapshot when omitted. Strings are
            sent as given, dates as midnight UTC.
    """
    if isinstance(at, datetime):
        at = _format_moment(at.astimezone(timezone.utc), full_date=True)
    elif isinstance(at, date):
        at = _format_moment(datetime(at.year, at.month, at.day, tzinfo=timezone.utc), full_date=True)
    return _get(f"{TOKENS_PATH}/{token_address}/exchange-tvl", {"date": at}, options, gateway,
                List[ExchangeDataPoint])


def get_exchange_tvl_feed(
    token_address: str,
    date_range: Optional[DateRange] = None,
    resolution: Optional[Resolution] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[ExchangeDataPoint]:
    return _get(f"{TOKENS_PATH}/{token_address}/exchange-tvl/line", _feed_params(date_range, resolution),
                options, gateway, List[ExchangeDataPoint])


def get_transfer_volume_feed(
    token_address: str,
    date_range: Optional[DateRange] = None,
    resolution: Optional[Resolution] = None,
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[DataPointWithUsd]:
    """Fetch a token's transferred volume over time, all exchanges combined."""
    return _get(f"{TOKENS_PATH}/{token_address}/volumes/line", _feed_params(date_range, resolution),
                options, gateway, List[DataPointWithUsd])


def get_prices(
    token_addresses: Sequence[str],
    options: Optional[AvnuOptions] = None,
    gateway: Optional[RequestGateway] = None,
) -> List[TokenPrice]:
    """
    Fetch USD prices for several tokens in one request.

    Args:
        token_addresses: Tokens to price
        options: Per-call options
        gateway: Gateway to use; the shared default when omitted

    Returns:
        One price per token the API knows about
    """
    gateway = gateway or get_default_gateway()
    logger.debug(f"Fetching prices for {len(token_addresses)} tokens")
    return gateway.post(PRICES_PATH, {"tokens": list(token_addresses)}, options, List[TokenPrice],
                        base_url=get_impulse_base_url(options))
