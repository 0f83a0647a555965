"""
Response authentication against the AVNU service key.

When a trust anchor (the service's Stark public key) is configured, the API
signs each response: the ``signature`` header holds ``r,s`` over
``pedersen_hash_on_elements([starknet_keccak(body)])``. The check runs on the
raw body bytes, before any JSON decoding.
"""
import logging
from typing import List, Optional, Union

from starknet_py.hash.utils import compute_hash_on_elements, verify_message_signature
from web3 import Web3

from ..exceptions import InvalidSignatureError, MissingSignatureError
from ..utils import parse_int

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "signature"
ASK_SIGNATURE_HEADER = "ask-signature"

MASK_250 = 2 ** 250 - 1

PublicKey = Union[int, str]


def starknet_keccak(data: bytes) -> int:
    """Keccak-256 truncated to 250 bits, as used for Starknet selectors."""
    return int.from_bytes(Web3.keccak(primitive=data), "big") & MASK_250


def hash_response_body(body: bytes) -> int:
    """
    Compute the message hash the service signs for a response body.

    Args:
        body: Exact response bytes as received

    Returns:
        Field element to verify the signature against
    """
    return compute_hash_on_elements([starknet_keccak(body)])


def parse_signature_header(header: str) -> List[int]:
    """
    Parse an ``r,s`` signature header (decimal or hex scalars).

    Raises:
        InvalidSignatureError: If the header is not exactly two integers
    """
    parts = [part.strip() for part in header.split(",")]
    if len(parts) != 2:
        raise InvalidSignatureError(f"Malformed server signature: expected 2 scalars, got {len(parts)}")
    try:
        return [parse_int(part) for part in parts]
    except ValueError as e:
        raise InvalidSignatureError(f"Malformed server signature: {e}") from e


def verify_response(body: bytes, signature_header: Optional[str], public_key: Optional[PublicKey]) -> bool:
    """
    Authenticate a raw response body.

    Verification is opt-in: without a trust anchor nothing is checked.

    Args:
        body: Raw response bytes, untouched
        signature_header: Value of the ``signature`` header, if present
        public_key: Trust anchor, as an int or hex string

    Returns:
        True if the body was verified, False if verification was skipped

    Raises:
        MissingSignatureError: If a trust anchor is set but no signature was sent
        InvalidSignatureError: If the signature does not match the body
    """
    if public_key is None or public_key == "":
        return False

    if not signature_header:
        logger.error("Response carries no server signature although a public key is configured")
        raise MissingSignatureError("No server signature")

    signature = parse_signature_header(signature_header)
    message_hash = hash_response_body(body)

    try:
        valid = verify_message_signature(message_hash, signature, parse_int(public_key))
    except Exception as e:
        logger.error(f"Server signature verification failed: {e}")
        raise InvalidSignatureError(f"Invalid server signature: {e}") from e

    if not valid:
        logger.error("Server signature does not match the response body")
        raise InvalidSignatureError("Invalid server signature")
    return True


class ResponseAuthenticator:
    """
    Verifies responses against one trust anchor.

    A thin, reusable wrapper around :func:`verify_response` for callers that
    keep the key alongside other per-request settings.
    """

    def __init__(self, public_key: Optional[PublicKey] = None):
        self.public_key = public_key

    @property
    def enabled(self) -> bool:
        return self.public_key is not None and self.public_key != ""

    def request_headers(self) -> dict:
        """Headers asking the server to sign its response."""
        return {ASK_SIGNATURE_HEADER: "true"} if self.enabled else {}

    def verify(self, body: bytes, signature_header: Optional[str]) -> bool:
        return verify_response(body, signature_header, self.public_key)
