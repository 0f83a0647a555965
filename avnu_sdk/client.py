"""
AvnuClient - convenience façade over the service modules.
"""
import logging
from datetime import date, datetime
from typing import Any, List, Optional, Sequence, Union

from . import dca, market, staking, swap, tokens
from .config import AvnuOptions
from .execution import BeforeExecuteCallback
from .gateway import RequestGateway
from .interfaces import Account, GaslessOptions, PaymasterOptions
from .models import (
    AvnuCalls, CandlePriceData, CreateDcaOrder, DataPoint, DataPointWithUsd, DcaOrder, DcaOrderStatus,
    ExchangeDataPoint, ExchangeRangeDataPoint, ExecutionResult, Page, Price, PriceFeedType, Quote, Source,
    StakingInfo, Token, TokenBalance, TokenMarketData, TokenPrice, UserStakingInfo
)


class AvnuClient:
    """
    Client for the AVNU API.

    Binds one :class:`RequestGateway` and default :class:`AvnuOptions` so
    callers don't have to pass them on every call. Each method accepts an
    ``options`` override for that call only.

    Args:
        options: Default options (base URL, trust anchor, abort signal, timeout)
        gateway: Optional pre-built gateway
        retry_count: Connection retries for GET requests when the gateway is created here
        logger: Optional logger instance
    """

    def __init__(
        self,
        options: Optional[AvnuOptions] = None,
        gateway: Optional[RequestGateway] = None,
        retry_count: int = 0,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.options = options or AvnuOptions()
        self.gateway = gateway or RequestGateway(retry_count=retry_count, logger=self.logger)

    def __enter__(self) -> "AvnuClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.gateway.close()

    def _options(self, options: Optional[AvnuOptions]) -> AvnuOptions:
        return self.options.merge(options)

    # Swap

    def fetch_quotes(self, sell_token_address: str, buy_token_address: str,
                     options: Optional[AvnuOptions] = None, **request: Any) -> List[Quote]:
        """Fetch quotes; ``request`` takes the keyword arguments of :func:`swap.fetch_quotes`."""
        return swap.fetch_quotes(sell_token_address, buy_token_address,
                                 options=self._options(options), gateway=self.gateway, **request)

    def fetch_prices(self, sell_token_address: str, buy_token_address: str, sell_amount: int,
                     options: Optional[AvnuOptions] = None) -> List[Price]:
        return swap.fetch_prices(sell_token_address, buy_token_address, sell_amount,
                                 self._options(options), self.gateway)

    def fetch_sources(self, options: Optional[AvnuOptions] = None) -> List[Source]:
        return swap.fetch_sources(self._options(options), self.gateway)

    def quote_to_calls(self, quote_id: str, taker_address: str, slippage_bps: int,
                       include_approve: bool = True, options: Optional[AvnuOptions] = None) -> AvnuCalls:
        return swap.quote_to_calls(quote_id, taker_address, slippage_bps, include_approve,
                                   self._options(options), self.gateway)

    def execute_swap(self, account: Account, quote: Quote, slippage_bps: int, execute_approve: bool = True,
                     paymaster: Optional[PaymasterOptions] = None,
                     options: Optional[AvnuOptions] = None) -> ExecutionResult:
        """
        Execute a quote; see :func:`swap.execute_swap`.

        Raises:
            ChainMismatchError: If the account is on another chain than the quote
        """
        self.logger.debug(f"Executing swap for quote {quote.quote_id}")
        return swap.execute_swap(account, quote, slippage_bps, execute_approve, paymaster,
                                 self._options(options), self.gateway)

    # DCA

    def get_dca_orders(self, trader_address: str, status: Optional[DcaOrderStatus] = None,
                       page: Optional[int] = None, size: Optional[int] = None, sort: Optional[str] = None,
                       options: Optional[AvnuOptions] = None) -> Page[DcaOrder]:
        return dca.get_dca_orders(trader_address, status, page, size, sort, self._options(options), self.gateway)

    def create_dca_to_calls(self, order: CreateDcaOrder, options: Optional[AvnuOptions] = None) -> AvnuCalls:
        return dca.create_dca_to_calls(order, self._options(options), self.gateway)

    def cancel_dca_to_calls(self, order_address: str, options: Optional[AvnuOptions] = None) -> AvnuCalls:
        return dca.cancel_dca_to_calls(order_address, self._options(options), self.gateway)

    def execute_create_dca(self, account: Account, order: CreateDcaOrder,
                           paymaster: Optional[PaymasterOptions] = None,
                           gasless: Optional[GaslessOptions] = None,
                           on_before_execute: Optional[BeforeExecuteCallback] = None,
                           options: Optional[AvnuOptions] = None) -> ExecutionResult:
        return dca.execute_create_dca(account, order, paymaster, gasless, on_before_execute,
                                      self._options(options), self.gateway)

    def execute_cancel_dca(self, account: Account, order_address: str,
                           paymaster: Optional[PaymasterOptions] = None,
                           options: Optional[AvnuOptions] = None) -> ExecutionResult:
        return dca.execute_cancel_dca(account, order_address, paymaster, self._options(options), self.gateway)

    # Staking

    def get_staking_info(self, options: Optional[AvnuOptions] = None) -> StakingInfo:
        return staking.get_staking_info(self._options(options), self.gateway)

    def get_user_staking_info(self, token_address: str, user_address: str,
                              options: Optional[AvnuOptions] = None) -> UserStakingInfo:
        return staking.get_user_staking_info(token_address, user_address, self._options(options), self.gateway)

    def execute_stake(self, account: Account, pool_address: str, amount: int,
                      paymaster: Optional[PaymasterOptions] = None,
                      options: Optional[AvnuOptions] = None) -> ExecutionResult:
        return staking.execute_stake(account, pool_address, amount, paymaster, self._options(options), self.gateway)

    def execute_initiate_unstake(self, account: Account, pool_address: str, amount: int,
                                 paymaster: Optional[PaymasterOptions] = None,
                                 options: Optional[AvnuOptions] = None) -> ExecutionResult:
        return staking.execute_initiate_unstake(account, pool_address, amount, paymaster,
                                                self._options(options), self.gateway)

    def execute_unstake(self, account: Account, pool_address: str,
                        paymaster: Optional[PaymasterOptions] = None,
                        options: Optional[AvnuOptions] = None) -> ExecutionResult:
        return staking.execute_unstake(account, pool_address, paymaster, self._options(options), self.gateway)

    def execute_claim_rewards(self, account: Account, pool_address: str, restake: bool = False,
                              paymaster: Optional[PaymasterOptions] = None,
                              options: Optional[AvnuOptions] = None) -> ExecutionResult:
        return staking.execute_claim_rewards(account, pool_address, restake, paymaster,
                                             self._options(options), self.gateway)

    # Tokens

    def fetch_tokens(self, page: Optional[int] = None, size: Optional[int] = None, search: Optional[str] = None,
                     tags: Optional[Sequence[str]] = None, options: Optional[AvnuOptions] = None) -> Page[Token]:
        return tokens.fetch_tokens(page, size, search, tags, self._options(options), self.gateway)

    def fetch_token_by_address(self, token_address: str, options: Optional[AvnuOptions] = None) -> Token:
        return tokens.fetch_token_by_address(token_address, self._options(options), self.gateway)

    def fetch_verified_token_by_symbol(self, symbol: str, options: Optional[AvnuOptions] = None) -> Optional[Token]:
        return tokens.fetch_verified_token_by_symbol(symbol, self._options(options), self.gateway)

    def fetch_tokens_balances(self, user_address: str, token_list: Sequence[Union[Token, str]],
                              options: Optional[AvnuOptions] = None) -> List[TokenBalance]:
        return tokens.fetch_tokens_balances(user_address, token_list, self._options(options), self.gateway)

    # Market data

    def get_market_data(self, options: Optional[AvnuOptions] = None) -> List[TokenMarketData]:
        return market.get_market_data(self._options(options), self.gateway)

    def get_token_market_data(self, token_address: str, options: Optional[AvnuOptions] = None) -> TokenMarketData:
        return market.get_token_market_data(token_address, self._options(options), self.gateway)

    def get_price_feed(self, token_address: str, feed_type: Union[PriceFeedType, str] = PriceFeedType.LINE,
                       date_range: Optional[market.DateRange] = None,
                       resolution: Optional[market.Resolution] = None,
                       quote_token_address: Optional[str] = None,
                       options: Optional[AvnuOptions] = None) -> Union[List[DataPoint], List[CandlePriceData]]:
        return market.get_price_feed(token_address, feed_type, date_range, resolution, quote_token_address,
                                     self._options(options), self.gateway)

    def get_volume_by_exchange(self, token_address: str, date_range: Optional[market.DateRange] = None,
                               options: Optional[AvnuOptions] = None) -> List[ExchangeRangeDataPoint]:
        return market.get_volume_by_exchange(token_address, date_range, self._options(options), self.gateway)

    def get_exchange_volume_feed(self, token_address: str, date_range: Optional[market.DateRange] = None,
                                 resolution: Optional[market.Resolution] = None,
                                 options: Optional[AvnuOptions] = None) -> List[ExchangeDataPoint]:
        return market.get_exchange_volume_feed(token_address, date_range, resolution,
                                               self._options(options), self.gateway)

    def get_tvl_by_exchange(self, token_address: str, at: Optional[Union[date, datetime, str]] = None,
                            options: Optional[AvnuOptions] = None) -> List[ExchangeDataPoint]:
        return market.get_tvl_by_exchange(token_address, at, self._options(options), self.gateway)

    def get_exchange_tvl_feed(self, token_address: str, date_range: Optional[market.DateRange] = None,
                              resolution: Optional[market.Resolution] = None,
                              options: Optional[AvnuOptions] = None) -> List[ExchangeDataPoint]:
        return market.get_exchange_tvl_feed(token_address, date_range, resolution,
                                            self._options(options), self.gateway)

    def get_transfer_volume_feed(self, token_address: str, date_range: Optional[market.DateRange] = None,
                                 resolution: Optional[market.Resolution] = None,
                                 options: Optional[AvnuOptions] = None) -> List[DataPointWithUsd]:
        return market.get_transfer_volume_feed(token_address, date_range, resolution,
                                               self._options(options), self.gateway)

    def get_prices(self, token_addresses: Sequence[str], options: Optional[AvnuOptions] = None) -> List[TokenPrice]:
        return market.get_prices(token_addresses, self._options(options), self.gateway)
