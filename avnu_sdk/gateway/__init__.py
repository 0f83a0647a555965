"""
Gateway module for the AVNU SDK.

This module provides the HTTP layer used by every service module: request
encoding, status handling, response authentication and schema validation.
"""
import logging
import threading
from typing import Optional

from .authenticator import (
    ResponseAuthenticator, hash_response_body, parse_signature_header,
    starknet_keccak, verify_response
)
from .client import RequestGateway, raise_for_status

__all__ = ['RequestGateway', 'ResponseAuthenticator', 'get_default_gateway',
           'hash_response_body', 'parse_signature_header', 'raise_for_status',
           'starknet_keccak', 'verify_response']

logger = logging.getLogger(__name__)

# Shared gateway for module-level functions called without one
_default_gateway: Optional[RequestGateway] = None
_gateway_lock = threading.RLock()


def get_default_gateway() -> RequestGateway:
    """
    Get or create the process-wide default gateway.

    Returns:
        RequestGateway instance
    """
    global _default_gateway
    with _gateway_lock:
        if _default_gateway is None:
            logger.debug("Creating default request gateway")
            _default_gateway = RequestGateway()
        return _default_gateway
