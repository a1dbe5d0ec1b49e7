"""Tests for Decimal conversion and rounding helpers."""

from decimal import Decimal

import pytest

from insurance_analytics.decimal_utils import (
    ZERO,
    quantize_currency,
    safe_divide,
    sum_decimals,
    to_decimal,
)


class TestToDecimal:
    """Test conversion of raw cell values to Decimal."""

    def test_float_has_no_binary_artifacts(self):
        """Test that floats convert through their string form."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_spreadsheet_strings(self):
        """Test currency symbols and thousands separators are stripped."""
        assert to_decimal("$1,250.50") == Decimal("1250.50")
        assert to_decimal("  42 ") == Decimal("42")

    def test_none_and_blank_are_zero(self):
        """Test missing values become zero."""
        assert to_decimal(None) == ZERO
        assert to_decimal("") == ZERO

    def test_invalid_string_raises(self):
        """Test that unparseable text is rejected."""
        with pytest.raises(ValueError, match="Cannot convert"):
            to_decimal("twelve")

    def test_boolean_rejected(self):
        """Test that booleans are not silently treated as 0/1."""
        with pytest.raises(ValueError):
            to_decimal(True)


class TestRounding:
    """Test quantization and arithmetic helpers."""

    def test_round_half_up(self):
        """Test .5 cases round away from zero."""
        assert quantize_currency(Decimal("2.345")) == Decimal("2.35")
        assert quantize_currency(Decimal("2.344")) == Decimal("2.34")
        assert str(quantize_currency(75)) == "75.00"

    def test_sum_decimals(self):
        """Test exact summation of mixed inputs."""
        assert sum_decimals([0.1, 0.2, 0.3]) == Decimal("0.6")
        assert sum_decimals([]) == ZERO

    def test_safe_divide(self):
        """Test division with a zero guard."""
        assert safe_divide(100, 4) == Decimal("25")
        assert safe_divide(100, 0) is None
        assert safe_divide(100, "0.00", default=ZERO) == ZERO
