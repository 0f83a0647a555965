"""
Numeric helpers for the AVNU wire format.

Amounts travel as big-endian hex strings (``0x``-prefixed, even number of
digits) and come back as hex or decimal strings.
"""
from typing import Any, Optional, Union

IntLike = Union[int, str]


def to_hex(value: IntLike) -> str:
    """
    Encode a non-negative integer as a minimal, even-length hex string.

    Args:
        value: Integer, or a hex/decimal string holding one

    Returns:
        Hex string such as ``0x01`` or ``0x0de0b6b3a7640000``

    Raises:
        ValueError: If the value is negative or cannot be parsed
    """
    number = parse_int(value)
    if number < 0:
        raise ValueError(f"Cannot hex-encode a negative value: {number}")
    digits = format(number, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


def parse_int(value: Any) -> int:
    """
    Parse an integer from the encodings the API uses.

    Accepts Python ints, ``0x`` hex strings and decimal strings.

    Raises:
        ValueError: If the value is not an integer encoding
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected an integer, got bool: {value}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Expected an integer, got an empty string")
        try:
            if text.lower().startswith(("0x", "-0x")):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            raise ValueError(f"Invalid integer encoding: {value!r}")
    raise ValueError(f"Expected int or str, got {type(value).__name__}")


def parse_optional_int(value: Any) -> Optional[int]:
    """Like :func:`parse_int` but passes ``None`` through."""
    if value is None:
        return None
    return parse_int(value)


def same_chain(left: IntLike, right: IntLike) -> bool:
    """
    Compare two chain identifiers regardless of encoding.

    Starknet chain ids show up both as hex strings (``0x534e5f4d41494e``)
    and as ints, so both sides are normalized before comparing.
    """
    try:
        return parse_int(left) == parse_int(right)
    except ValueError:
        return str(left) == str(right)
