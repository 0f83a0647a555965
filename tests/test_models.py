"""
Tests for the wire models.
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from avnu_sdk.models import (
    Call, CreateDcaOrder, DcaOrder, ExecutionResult, Page, PricingStrategy, Quote, Route, Token,
    UserStakingInfo
)

from conftest import ETH_ADDRESS, USDC_ADDRESS


def make_route(name, percent, routes=None):
    return Route(
        name=name,
        address=f"0x{len(name):04x}",
        percent=percent,
        sell_token_address=ETH_ADDRESS,
        buy_token_address=USDC_ADDRESS,
        routes=routes or [],
    )


class TestQuote:
    """Test Quote parsing."""

    def test_parse_wire_payload(self, quote_payload):
        quote = Quote.model_validate(quote_payload)

        assert quote.quote_id == "quote-1"
        assert quote.sell_amount == 10 ** 18
        assert quote.buy_amount == 2 * 10 ** 18
        assert quote.gas_fees == 0
        assert quote.chain_id == "0x534e5f4d41494e"
        assert [route.name for route in quote.routes] == ["Ekubo", "Nostra"]

    def test_quote_is_immutable(self, quote_payload):
        quote = Quote.model_validate(quote_payload)
        with pytest.raises(ValidationError):
            quote.sell_amount = 1

    def test_missing_chain_id(self, quote_payload):
        del quote_payload["chainId"]
        with pytest.raises(ValidationError):
            Quote.model_validate(quote_payload)

    def test_amounts_dump_as_hex(self, quote_payload):
        wire = Quote.model_validate(quote_payload).to_wire()
        assert wire["sellAmount"] == "0x0de0b6b3a7640000"
        assert wire["quoteId"] == "quote-1"

    def test_validate_routes(self, quote_payload):
        assert Quote.model_validate(quote_payload).validate_routes()

    def test_validate_routes_incomplete_split(self, quote_payload):
        quote_payload["routes"][1]["percent"] = 0.3
        quote = Quote.model_validate(quote_payload)
        with pytest.raises(ValueError) as exc_info:
            quote.validate_routes()
        assert "quote-1" in str(exc_info.value)


class TestRouteTree:
    """Test the recursive routing tree."""

    def test_walk_depth_first(self):
        tree = make_route("root", 1.0, [
            make_route("a", 0.5, [make_route("a1", 0.25), make_route("a2", 0.75)]),
            make_route("b", 0.5),
        ])
        assert [route.name for route in tree.walk()] == ["root", "a", "a1", "a2", "b"]

    def test_nested_split_checked(self):
        tree = make_route("root", 1.0, [
            make_route("a", 0.5, [make_route("a1", 0.2), make_route("a2", 0.2)]),
            make_route("b", 0.5),
        ])
        with pytest.raises(ValueError) as exc_info:
            tree.validate_percentages()
        assert "route a" in str(exc_info.value)

    def test_leaf_is_valid(self):
        assert make_route("leaf", 1.0).validate_percentages()

    def test_iter_routes_covers_all_levels(self, quote_payload):
        quote_payload["routes"][0]["routes"] = [
            {"name": "Inner", "address": "0x0666", "percent": 1.0,
             "sellTokenAddress": ETH_ADDRESS, "buyTokenAddress": USDC_ADDRESS},
        ]
        quote = Quote.model_validate(quote_payload)
        assert [route.name for route in quote.iter_routes()] == ["Ekubo", "Inner", "Nostra"]


class TestCall:
    """Test Call normalisation."""

    def test_int_calldata_hex_encoded(self):
        call = Call(contract_address="0x01", entrypoint="transfer", calldata=[1, "0x02", 256])
        assert call.calldata == ["0x01", "0x02", "0x0100"]

    def test_wire_shape(self):
        call = Call.model_validate({"contractAddress": "0x01", "entrypoint": "approve", "calldata": []})
        assert call.to_wire() == {"contractAddress": "0x01", "entrypoint": "approve", "calldata": []}


def test_execution_result_accepts_int_hash():
    assert ExecutionResult(transaction_hash=0xabc).transaction_hash == "0xabc"


def test_execution_result_gas_token():
    result = ExecutionResult.model_validate(
        {"transactionHash": "0x01", "gasTokenAddress": USDC_ADDRESS, "gasTokenAmount": "0x0f"}
    )
    assert result.gas_token_amount == 15
    assert result.gas_token_address == USDC_ADDRESS


def test_create_dca_order_wire():
    order = CreateDcaOrder(
        sell_token_address=ETH_ADDRESS,
        buy_token_address=USDC_ADDRESS,
        sell_amount=10 ** 18,
        sell_amount_per_cycle=10 ** 17,
        frequency="P1D",
        pricing_strategy=PricingStrategy(token_to_min_amount="0x10"),
        trader_address="0x0123",
    )
    assert order.to_wire() == {
        "sellTokenAddress": ETH_ADDRESS,
        "buyTokenAddress": USDC_ADDRESS,
        "sellAmount": "0x0de0b6b3a7640000",
        "sellAmountPerCycle": "0x016345785d8a0000",
        "frequency": "P1D",
        "pricingStrategy": {"tokenToMinAmount": "0x10"},
        "traderAddress": "0x0123",
    }


def test_dca_order_page():
    payload = {
        "content": [{
            "id": "order-1",
            "blockNumber": 100,
            "timestamp": "2024-05-01T10:00:00Z",
            "traderAddress": "0x0123",
            "orderAddress": "0x0999",
            "creationTransactionHash": "0x0aaa",
            "orderClassHash": "0x0bbb",
            "sellTokenAddress": ETH_ADDRESS,
            "sellAmount": "0x64",
            "sellAmountPerCycle": "0x0a",
            "buyTokenAddress": USDC_ADDRESS,
            "startDate": "2024-05-01T10:00:00Z",
            "endDate": "2024-05-11T10:00:00Z",
            "frequency": "P1D",
            "iterations": 10,
            "status": "ACTIVE",
            "pricingStrategy": {},
            "amountSold": "0x14",
            "amountBought": "0x28",
            "averageAmountBought": "0x14",
            "executedTradesCount": 2,
            "cancelledTradesCount": 0,
            "pendingTradesCount": 8,
            "trades": [{
                "sellAmount": "0x0a",
                "expectedTradeDate": "2024-05-02T10:00:00Z",
                "status": "SUCCEEDED",
                "buyAmount": "0x14",
            }],
        }],
        "totalPages": 1,
        "totalElements": 1,
        "size": 10,
        "number": 0,
    }
    page = Page[DcaOrder].model_validate(payload)

    assert page.total_elements == 1
    order = page.content[0]
    assert order.sell_amount == 100
    assert order.status.value == "ACTIVE"
    assert order.trades[0].buy_amount == 20


def test_token_defaults():
    token = Token.model_validate({"name": "Ether", "address": ETH_ADDRESS, "symbol": "ETH", "decimals": 18})
    assert token.tags == []
    assert token.logo_uri is None


def test_user_staking_unpool_time_from_hex():
    info = UserStakingInfo.model_validate({
        "tokenAddress": "0x04718f5a0fc34cc1af16a1cdee98ffb20c31f5cd61d6ab07201858f4287c938d",
        "tokenPriceInUsd": 0.5,
        "poolAddress": "0x0777",
        "userAddress": "0x0123",
        "amount": "0x03e8",
        "unclaimedRewards": "0x0a",
        "unpoolAmount": "0x00",
        "unpoolTime": "0x6553f100",
        "totalClaimedRewards": "0x00",
        "totalClaimedRewardsHistoricalUsd": 0,
        "totalClaimedRewardsUsd": 0,
        "totalUserActionsCount": 0,
        "expectedYearlyStrkRewards": "0x64",
    })
    assert info.amount == 1000
    assert info.unpool_time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
