"""
Pytest fixtures for the AVNU SDK tests.
"""
import pytest
from unittest.mock import MagicMock

from starknet_py.hash.utils import message_signature, private_to_stark_key

from avnu_sdk.config import AvnuOptions, NetworkConfig
from avnu_sdk.gateway import RequestGateway, hash_response_body
from avnu_sdk.interfaces import PaymasterOptions

TEST_BASE_URL = "https://api.test.avnu.fi"
TEST_CHAIN_ID = "0x534e5f4d41494e"
TEST_ACCOUNT_ADDRESS = "0x0123456789abcdef"
TEST_PRIVATE_KEY = 0x3c1e9550e66958296d11b60f8e8e7a7ad990d07fa65d5f7652c4a6c87d4e3cc
ETH_ADDRESS = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"
USDC_ADDRESS = "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8"


def sign_body(body: bytes, private_key: int = TEST_PRIVATE_KEY, hex_scalars: bool = False) -> str:
    """Build the ``signature`` header the API would send for ``body``."""
    r, s = message_signature(hash_response_body(body), private_key)
    if hex_scalars:
        return f"{hex(r)},{hex(s)}"
    return f"{r},{s}"


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    monkeypatch.delenv("AVNU_BASE_URL", raising=False)
    monkeypatch.delenv("AVNU_NETWORK", raising=False)
    monkeypatch.delenv("AVNU_IMPULSE_BASE_URL", raising=False)
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def public_key():
    return private_to_stark_key(TEST_PRIVATE_KEY)


@pytest.fixture
def options():
    return AvnuOptions(base_url=TEST_BASE_URL)


@pytest.fixture
def signed_options(public_key):
    return AvnuOptions(base_url=TEST_BASE_URL, public_key=hex(public_key))


@pytest.fixture
def gateway():
    gateway = RequestGateway()
    yield gateway
    gateway.close()


@pytest.fixture
def quote_payload():
    return {
        "quoteId": "quote-1",
        "sellTokenAddress": ETH_ADDRESS,
        "sellAmount": "0xde0b6b3a7640000",
        "sellAmountInUsd": 3200.5,
        "buyTokenAddress": USDC_ADDRESS,
        "buyAmount": "0x1bc16d674ec80000",
        "buyAmountInUsd": 3190.1,
        "chainId": TEST_CHAIN_ID,
        "blockNumber": 812345,
        "expiry": 1700000000,
        "gasFees": "0x0",
        "routes": [
            {
                "name": "Ekubo",
                "address": "0x0444",
                "percent": 0.6,
                "sellTokenAddress": ETH_ADDRESS,
                "buyTokenAddress": USDC_ADDRESS,
                "routes": [],
            },
            {
                "name": "Nostra",
                "address": "0x0555",
                "percent": 0.4,
                "sellTokenAddress": ETH_ADDRESS,
                "buyTokenAddress": USDC_ADDRESS,
                "routes": [],
            },
        ],
    }


@pytest.fixture
def calls_payload():
    return {
        "chainId": TEST_CHAIN_ID,
        "calls": [
            {"contractAddress": ETH_ADDRESS, "entrypoint": "approve", "calldata": ["0x0111", "0x0de0b6b3a7640000", "0x00"]},
            {"contractAddress": "0x0222", "entrypoint": "multi_route_swap", "calldata": ["0x01"]},
        ],
    }


@pytest.fixture
def account():
    """Account double that executes directly and signs with an ``[r, s]`` pair."""
    account = MagicMock()
    account.address = TEST_ACCOUNT_ADDRESS
    account.get_chain_id.return_value = TEST_CHAIN_ID
    account.execute.return_value = {"transaction_hash": "0x0abc"}
    account.sign_message.return_value = [0x1234, 0x5678]
    return account


@pytest.fixture
def paymaster_provider():
    provider = MagicMock()
    provider.build_transaction.return_value = {"typed_data": {"primaryType": "OutsideExecution"}}
    provider.execute_transaction.return_value = {"transaction_hash": "0x0def"}
    return provider


@pytest.fixture
def paymaster(paymaster_provider):
    return PaymasterOptions(provider=paymaster_provider, params={"version": "0x1", "feeMode": {"mode": "sponsored"}})
