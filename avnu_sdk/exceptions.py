"""
Exceptions for the AVNU SDK.
"""
from typing import Any, List, Optional, Sequence, Union


class AvnuError(Exception):
    """Base exception for all SDK errors."""
    pass


class IntegrityError(AvnuError):
    """Raised when a response cannot be authenticated against the trust anchor."""
    pass


class MissingSignatureError(IntegrityError):
    """Raised when a trust anchor is configured but the response carries no signature."""
    pass


class InvalidSignatureError(IntegrityError):
    """Raised when the response signature does not verify against the body."""
    pass


class RequestError(AvnuError):
    """
    Raised when the API answers with an error status.

    Attributes:
        status_code: HTTP status returned by the API
        messages: Messages from the ``{"messages": [...]}`` error body, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None, messages: Optional[Sequence[str]] = None):
        self.status_code = status_code
        self.messages: List[str] = list(messages or [])
        super().__init__(message)


class ContractError(RequestError):
    """
    Raised when the API reports an on-chain revert.

    Attributes:
        revert_error: Raw revert payload as returned by the API
    """

    def __init__(self, message: str, revert_error: str = "", status_code: Optional[int] = 500,
                 messages: Optional[Sequence[str]] = None):
        self.revert_error = revert_error
        super().__init__(message, status_code=status_code, messages=messages)


class ResponseValidationError(AvnuError):
    """Raised when a response payload does not match the expected schema."""
    pass


class ChainMismatchError(AvnuError):
    """Raised when a quote targets a different chain than the connected account."""

    def __init__(self, expected: Union[int, str], actual: Union[int, str]):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid chainId: expected {expected}, account is on {actual}")


class ConfigurationError(AvnuError, ValueError):
    """Raised when required execution parameters are missing or inconsistent."""
    pass


class RequestCancelledError(AvnuError):
    """Raised when the caller's abort signal is set around a network call."""
    pass


class PaymasterStateError(AvnuError):
    """Raised when a paymaster flow step is invoked out of order."""

    def __init__(self, message: str, state: Any = None):
        self.state = state
        super().__init__(message)
