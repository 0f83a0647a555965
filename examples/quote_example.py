#!/usr/bin/env python3
"""
Fetch swap quotes from AVNU and show the slippage-adjusted bounds.
"""
import logging
import os

from avnu_sdk import AvnuClient, AvnuOptions, calculate_min_received_amount

ETH = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"
USDC = "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8"


def main():
    """
    Demonstrate quote acquisition.

    Set ``AVNU_PUBLIC_KEY`` to have every response authenticated, and
    ``AVNU_NETWORK=sepolia`` to use the test network.
    """
    logging.basicConfig(level=logging.INFO)
    slippage_bps = int(os.environ.get("SLIPPAGE_BPS", "50"))
    options = AvnuOptions(public_key=os.environ.get("AVNU_PUBLIC_KEY"))

    with AvnuClient(options=options) as client:
        quotes = client.fetch_quotes(ETH, USDC, sell_amount=10 ** 17, size=3)
        for quote in quotes:
            quote.validate_routes()
            min_received = calculate_min_received_amount(quote.buy_amount, slippage_bps)
            sources = ", ".join(f"{route.name} {route.percent:.0%}" for route in quote.routes)
            print(f"{quote.quote_id}: {quote.buy_amount} (min {min_received}) via {sources}")


if __name__ == "__main__":
    main()
