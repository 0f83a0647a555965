"""
Data models for the AVNU SDK.

Wire payloads use camelCase keys and hex-encoded amounts; the models expose
snake_case attributes and plain Python ints.
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Generic, Iterator, List, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from .utils import parse_int, to_hex

HexInt = Annotated[int, BeforeValidator(parse_int), PlainSerializer(to_hex, return_type=str)]

PERCENT_TOLERANCE = 1e-6

T = TypeVar("T")


def _hex_timestamp(value: Any) -> Optional[datetime]:
    # Unix seconds, either as an int or a hex string
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromtimestamp(parse_int(value), tz=timezone.utc)


HexTimestamp = Annotated[Optional[datetime], BeforeValidator(_hex_timestamp)]


class AvnuModel(BaseModel):
    """Base model: camelCase aliases, immutable instances."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump to the API's JSON shape."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Call(AvnuModel):
    """A single contract call, ready for on-chain submission."""
    contract_address: str
    entrypoint: str
    calldata: List[str] = Field(default_factory=list)

    @field_validator("calldata", mode="before")
    @classmethod
    def _calldata_as_strings(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [to_hex(item) if isinstance(item, int) else item for item in value]
        return value


class AvnuCalls(AvnuModel):
    """Ordered calls returned by a build endpoint."""
    chain_id: Optional[str] = None
    calls: List[Call]


class Route(AvnuModel):
    """
    One edge of a quote's routing tree.

    ``percent`` is the share of the parent edge that flows through this
    route; sub-routes split this route's amount again.
    """
    name: str
    address: str
    percent: float
    sell_token_address: str
    buy_token_address: str
    route_info: Optional[Dict[str, Any]] = None
    alternative_swap_count: Optional[int] = None
    routes: List["Route"] = Field(default_factory=list)

    def walk(self) -> Iterator["Route"]:
        """Yield this route and every sub-route, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.routes))

    def validate_percentages(self) -> bool:
        """
        Check that the children of every node split it completely.

        Raises:
            ValueError: If a node's sub-route percentages do not sum to 1.0
        """
        for node in self.walk():
            if node.routes:
                _check_split(node.routes, f"route {node.name} ({node.address})")
        return True


def _check_split(routes: List[Route], where: str) -> None:
    total = sum(route.percent for route in routes)
    if abs(total - 1.0) > PERCENT_TOLERANCE:
        raise ValueError(f"Sub-route percentages of {where} sum to {total}, expected 1.0")


class Fee(AvnuModel):
    fee_token: str
    avnu_fees: HexInt = 0
    avnu_fees_in_usd: Optional[float] = None
    avnu_fees_bps: HexInt = 0
    integrator_fees: HexInt = 0
    integrator_fees_in_usd: Optional[float] = None
    integrator_fees_bps: HexInt = 0


class GasTokenPrice(AvnuModel):
    token_address: str
    gas_fees_in_usd: float
    gas_fees_in_gas_token: HexInt


class Gasless(AvnuModel):
    active: bool
    gas_token_prices: List[GasTokenPrice] = Field(default_factory=list)


class Quote(AvnuModel):
    """A priced, time-bounded proposal to trade one token for another."""
    quote_id: str
    sell_token_address: str
    sell_amount: HexInt
    sell_amount_in_usd: Optional[float] = None
    buy_token_address: str
    buy_amount: HexInt
    buy_amount_in_usd: Optional[float] = None
    buy_amount_without_fees: Optional[HexInt] = None
    chain_id: str
    block_number: Optional[int] = None
    expiry: Optional[int] = None
    routes: List[Route] = Field(default_factory=list)
    gas_fees: HexInt = 0
    gas_fees_in_usd: Optional[float] = None
    fee: Optional[Fee] = None
    price_impact: Optional[float] = None
    liquidity_source: Optional[str] = None
    gasless: Optional[Gasless] = None
    exact_token_to: Optional[bool] = None

    def iter_routes(self) -> Iterator[Route]:
        """Yield every route of the tree, depth first."""
        for route in self.routes:
            yield from route.walk()

    def validate_routes(self) -> bool:
        """
        Check the routing tree: top-level routes and every node's
        sub-routes must each split 100% of their parent.

        Raises:
            ValueError: On an incomplete or overfull split
        """
        if self.routes:
            _check_split(self.routes, f"quote {self.quote_id}")
        for route in self.routes:
            route.validate_percentages()
        return True


class Price(AvnuModel):
    sell_token_address: str
    sell_amount: HexInt
    buy_token_address: str
    buy_amount: HexInt
    source_name: Optional[str] = None
    gas_fees: HexInt = 0
    gas_fees_in_usd: Optional[float] = None


class SourceType(str, Enum):
    DEX = "DEX"
    MARKET_MAKER = "MARKET_MAKER"
    TOKEN_WRAPPER = "TOKEN_WRAPPER"
    ORDERBOOK = "ORDERBOOK"


class Source(AvnuModel):
    name: str
    type: SourceType
    icon: Optional[str] = None


class Token(AvnuModel):
    name: str
    address: str
    symbol: str
    decimals: int
    logo_uri: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    last_daily_volume_usd: Optional[float] = None
    extensions: Dict[str, Any] = Field(default_factory=dict)


class TokenBalance(AvnuModel):
    """Balance of one token held by one account."""
    user_address: str
    token_address: str
    balance: HexInt


class Page(AvnuModel, Generic[T]):
    """One page of a paginated listing; ``content`` is typed by the caller."""
    content: List[T]
    total_pages: int
    total_elements: int
    size: int
    number: int


class ExecutionResult(AvnuModel):
    """
    Outcome of an execution, whichever path submitted it.

    ``gas_token_address``/``gas_token_amount`` are set when gas was paid in
    an alternate token.
    """
    transaction_hash: str
    gas_token_address: Optional[str] = None
    gas_token_amount: Optional[HexInt] = None

    @field_validator("transaction_hash", mode="before")
    @classmethod
    def _hash_as_hex(cls, value: Any) -> Any:
        if isinstance(value, int):
            return hex(value)
        return value


class SignedPaymasterTransaction(AvnuModel):
    """Typed data paired with its canonical signature."""
    typed_data: Any
    signature: List[str]


# DCA

class DcaOrderStatus(str, Enum):
    INDEXING = "INDEXING"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class DcaTradeStatus(str, Enum):
    CANCELLED = "CANCELLED"
    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"


class PricingStrategy(AvnuModel):
    token_to_min_amount: Optional[str] = None
    token_to_max_amount: Optional[str] = None


class DcaTrade(AvnuModel):
    sell_amount: HexInt
    sell_amount_in_usd: Optional[float] = None
    buy_amount: Optional[HexInt] = None
    buy_amount_in_usd: Optional[float] = None
    expected_trade_date: datetime
    actual_trade_date: Optional[datetime] = None
    status: DcaTradeStatus
    tx_hash: Optional[str] = None
    error_reason: Optional[str] = None


class DcaOrder(AvnuModel):
    id: str
    block_number: int
    timestamp: datetime
    trader_address: str
    order_address: str
    creation_transaction_hash: str
    order_class_hash: str
    sell_token_address: str
    sell_amount: HexInt
    sell_amount_per_cycle: HexInt
    buy_token_address: str
    start_date: datetime
    end_date: datetime
    close_date: Optional[datetime] = None
    frequency: str
    iterations: int
    status: DcaOrderStatus
    pricing_strategy: PricingStrategy = Field(default_factory=PricingStrategy)
    amount_sold: HexInt
    amount_bought: HexInt
    average_amount_bought: HexInt
    executed_trades_count: int
    cancelled_trades_count: int
    pending_trades_count: int
    trades: List[DcaTrade] = Field(default_factory=list)


class CreateDcaOrder(AvnuModel):
    """
    A recurring order to create.

    ``frequency`` is an ISO-8601 duration such as ``PT1H`` or ``P1D``.
    """
    sell_token_address: str
    buy_token_address: str
    sell_amount: HexInt
    sell_amount_per_cycle: HexInt
    frequency: str
    pricing_strategy: PricingStrategy = Field(default_factory=PricingStrategy)
    trader_address: str


# Staking

class DelegationPool(AvnuModel):
    pool_address: str
    token_address: str
    staked_amount: HexInt
    staked_amount_in_usd: Optional[float] = None
    apr: float


class StakingInfo(AvnuModel):
    self_staked_amount: HexInt
    self_staked_amount_in_usd: Optional[float] = None
    operational_address: str
    reward_address: str
    staker_address: str
    commission: float
    delegation_pools: List[DelegationPool] = Field(default_factory=list)


class Apr(AvnuModel):
    date: datetime
    apr: float


class GasFeeInfo(AvnuModel):
    gas_fee_amount: HexInt
    gas_fee_amount_usd: Optional[float] = None
    gas_fee_token_address: str


class StakingAction(AvnuModel):
    block_number: HexInt
    date: datetime
    transaction_hash: str
    gas_fee: Optional[GasFeeInfo] = None
    type: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class UserStakingInfo(AvnuModel):
    token_address: str
    token_price_in_usd: float
    pool_address: str
    user_address: str
    amount: HexInt
    amount_in_usd: Optional[float] = None
    unclaimed_rewards: HexInt
    unclaimed_rewards_in_usd: Optional[float] = None
    unpool_amount: HexInt
    unpool_amount_in_usd: Optional[float] = None
    unpool_time: HexTimestamp = None
    total_claimed_rewards: HexInt
    total_claimed_rewards_historical_usd: float
    total_claimed_rewards_usd: float
    user_actions: List[StakingAction] = Field(default_factory=list)
    total_user_actions_count: int
    expected_yearly_strk_rewards: HexInt
    aprs: List[Apr] = Field(default_factory=list)


# Market data

class FeedDateRange(str, Enum):
    ONE_HOUR = "1H"
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    ONE_YEAR = "1Y"


class FeedResolution(str, Enum):
    ONE_MIN = "1"
    FIVE_MIN = "5"
    FIFTEEN_MIN = "15"
    HOURLY = "1H"
    FOUR_HOUR = "4H"
    DAILY = "1D"
    WEEKLY = "1W"
    MONTHLY = "1M"
    YEARLY = "1Y"


class PriceFeedType(str, Enum):
    LINE = "LINE"
    CANDLE = "CANDLE"


class MarketPrice(AvnuModel):
    usd: float


class TokenPrice(AvnuModel):
    """USD price of a token, on Starknet and on the global market."""
    address: str
    decimals: int
    global_market: Optional[MarketPrice] = None
    starknet_market: Optional[MarketPrice] = None


class StarknetMarket(AvnuModel):
    # Keys with a digit after an underscore don't camel-case cleanly
    usd: float
    usd_tvl: Optional[float] = None
    usd_price_change_1h: Optional[float] = Field(default=None, alias="usdPriceChange1h")
    usd_price_change_percentage_1h: Optional[float] = Field(default=None, alias="usdPriceChangePercentage1h")
    usd_price_change_24h: Optional[float] = Field(default=None, alias="usdPriceChange24h")
    usd_price_change_percentage_24h: Optional[float] = Field(default=None, alias="usdPriceChangePercentage24h")
    usd_price_change_7d: Optional[float] = Field(default=None, alias="usdPriceChange7d")
    usd_price_change_percentage_7d: Optional[float] = Field(default=None, alias="usdPriceChangePercentage7d")
    usd_volume_24h: Optional[float] = Field(default=None, alias="usdVolume24h")
    usd_trading_volume_24h: Optional[float] = Field(default=None, alias="usdTradingVolume24h")


class GlobalMarket(AvnuModel):
    usd: float
    usd_market_cap: Optional[float] = None
    usd_fdv: Optional[float] = None
    usd_market_cap_change_24h: Optional[float] = Field(default=None, alias="usdMarketCapChange24h")
    usd_market_cap_change_percentage_24h: Optional[float] = Field(
        default=None, alias="usdMarketCapChangePercentage24h"
    )


class DataPoint(AvnuModel):
    date: datetime
    value: float


class DataPointWithUsd(DataPoint):
    value_usd: float


class CandlePriceData(AvnuModel):
    date: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


class ExchangeDataPoint(DataPointWithUsd):
    exchange: str


class ExchangeRangeDataPoint(AvnuModel):
    """Per-exchange total over ``start_date``..``end_date``."""
    value: float
    value_usd: float
    exchange: str
    start_date: date
    end_date: date


class TokenMarketData(AvnuModel):
    name: str
    symbol: str
    address: str
    decimals: int
    logo_uri: Optional[str] = None
    coingecko_id: Optional[str] = None
    verified: bool = False
    starknet: StarknetMarket
    global_: Optional[GlobalMarket] = Field(default=None, alias="global")
    tags: List[str] = Field(default_factory=list)
    line_price_feed_in_usd: List[DataPoint] = Field(default_factory=list)
