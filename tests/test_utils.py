"""
Tests for the numeric wire helpers.
"""
import pytest

from avnu_sdk.utils import parse_int, parse_optional_int, same_chain, to_hex


class TestToHex:
    """Test to_hex encoding."""

    @pytest.mark.parametrize("value, expected", [
        (0, "0x00"),
        (1, "0x01"),
        (255, "0xff"),
        (256, "0x0100"),
        (10 ** 18, "0x0de0b6b3a7640000"),
    ])
    def test_minimal_even_length(self, value, expected):
        assert to_hex(value) == expected

    def test_accepts_encoded_strings(self):
        assert to_hex("0xf") == "0x0f"
        assert to_hex("16") == "0x10"

    def test_canonical_input_unchanged(self):
        assert to_hex("0x0de0b6b3a7640000") == "0x0de0b6b3a7640000"

    def test_negative_rejected(self):
        with pytest.raises(ValueError) as exc_info:
            to_hex(-1)
        assert "negative" in str(exc_info.value)


class TestParseInt:
    """Test parse_int decoding."""

    def test_hex_and_decimal(self):
        assert parse_int("0x1bc16d674ec80000") == 2 * 10 ** 18
        assert parse_int("0X10") == 16
        assert parse_int(" 42 ") == 42
        assert parse_int(7) == 7

    @pytest.mark.parametrize("value", ["", "0xzz", "1.5", None, 1.0, True])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_int(value)

    def test_optional(self):
        assert parse_optional_int(None) is None
        assert parse_optional_int("0x02") == 2


def test_same_chain_across_encodings():
    assert same_chain("0x534e5f4d41494e", 0x534e5f4d41494e)
    assert same_chain("0x534E5F4D41494E", "0x534e5f4d41494e")
    assert not same_chain("0x534e5f4d41494e", "0x534e5f5345504f4c4941")


def test_same_chain_falls_back_to_string_comparison():
    assert same_chain("SN_MAIN", "SN_MAIN")
    assert not same_chain("SN_MAIN", "0x534e5f4d41494e")
