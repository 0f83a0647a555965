"""
Configuration for the AVNU SDK.

Settings are request-scoped: every call that reaches the network takes an
:class:`AvnuOptions`. Defaults for the base URL come from the environment and
the packaged ``networks.json``.
"""
import json
import logging
import os
import threading
from dataclasses import dataclass, fields, replace
from importlib import resources
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "mainnet"
DEFAULT_TIMEOUT = 30

ENV_BASE_URL = "AVNU_BASE_URL"
ENV_NETWORK = "AVNU_NETWORK"
ENV_IMPULSE_BASE_URL = "AVNU_IMPULSE_BASE_URL"

SWAP_API_VERSION = "v2"
DCA_API_VERSION = "v1"
STAKING_API_VERSION = "v1"
TOKENS_API_VERSION = "v1"
IMPULSE_API_VERSION = "v1"
PRICES_API_VERSION = "v3"


class NetworkConfig:
    """Access to the packaged network catalogue (``networks.json``)."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None
    _lock = threading.RLock()

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the network catalogue, caching it after the first read.

        Returns:
            Mapping of network name to its settings
        """
        with cls._lock:
            if cls._networks_cache is None:
                text = resources.files("avnu_sdk").joinpath("networks.json").read_text(encoding="utf-8")
                cls._networks_cache = json.loads(text)
                logger.debug(f"Loaded {len(cls._networks_cache)} networks from networks.json")
            return cls._networks_cache

    @classmethod
    def get_network(cls, name: str) -> Dict[str, Any]:
        """
        Get the settings for one network.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if name not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{name}'. Available networks: {available}")
        return networks[name]

    @classmethod
    def get_base_url(cls, name: str) -> str:
        return cls.get_network(name)["baseUrl"]

    @classmethod
    def get_impulse_base_url(cls, name: str) -> str:
        return cls.get_network(name)["impulseBaseUrl"]

    @classmethod
    def get_chain_id(cls, name: str) -> str:
        return cls.get_network(name)["chainId"]


@dataclass(frozen=True)
class AvnuOptions:
    """
    Per-call SDK options.

    Attributes:
        base_url: API base URL; resolved from the environment when omitted
        public_key: Trust anchor (Stark public key) used to authenticate
            responses. When set, every response must carry a valid signature.
        abort_signal: Event that cancels the call when set
        timeout: HTTP timeout in seconds
        impulse_base_url: Market data API base URL; resolved like ``base_url``
    """
    base_url: Optional[str] = None
    public_key: Optional[Union[str, int]] = None
    abort_signal: Optional[threading.Event] = None
    timeout: float = DEFAULT_TIMEOUT
    impulse_base_url: Optional[str] = None

    def with_overrides(self, **changes: Any) -> "AvnuOptions":
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    def merge(self, overrides: Optional["AvnuOptions"]) -> "AvnuOptions":
        """
        Layer per-call options over these defaults.

        Only the fields ``overrides`` actually sets (those differing from the
        field default) replace ours, so a trust anchor configured here stays in
        force when a caller only passes, say, an abort signal.

        Args:
            overrides: Per-call options, or None to keep these defaults

        Returns:
            The combined options
        """
        if overrides is None:
            return self
        changes = {
            field.name: getattr(overrides, field.name)
            for field in fields(overrides)
            if getattr(overrides, field.name) != field.default
        }
        return self.with_overrides(**changes)


def get_base_url(options: Optional[AvnuOptions] = None) -> str:
    """
    Resolve the API base URL.

    Order: ``options.base_url``, the ``AVNU_BASE_URL`` environment variable,
    then the network named by ``AVNU_NETWORK`` (``mainnet`` by default).
    """
    if options is not None and options.base_url:
        return options.base_url.rstrip("/")
    env_url = os.environ.get(ENV_BASE_URL)
    if env_url:
        return env_url.rstrip("/")
    network = os.environ.get(ENV_NETWORK, DEFAULT_NETWORK).lower()
    return NetworkConfig.get_base_url(network).rstrip("/")


def get_impulse_base_url(options: Optional[AvnuOptions] = None) -> str:
    """
    Resolve the market data (impulse) API base URL.

    Order: ``options.impulse_base_url``, ``AVNU_IMPULSE_BASE_URL``, then the
    network named by ``AVNU_NETWORK``.
    """
    if options is not None and options.impulse_base_url:
        return options.impulse_base_url.rstrip("/")
    env_url = os.environ.get(ENV_IMPULSE_BASE_URL)
    if env_url:
        return env_url.rstrip("/")
    network = os.environ.get(ENV_NETWORK, DEFAULT_NETWORK).lower()
    return NetworkConfig.get_impulse_base_url(network).rstrip("/")
