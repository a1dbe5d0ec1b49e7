"""Decimal utilities for monetary and percentage calculations.

Premiums, coverage amounts and claim amounts are carried as
``decimal.Decimal`` so that grouped sums and averages are exact and rounding
to two places behaves the way a database ``ROUND(x, 2)`` does, rather than
drifting with binary floating point.

Example:
    Convert a value read from a CSV cell and round an average::

        from insurance_analytics.decimal_utils import quantize_currency, to_decimal

        amount = to_decimal("1234.567")
        print(quantize_currency(amount))  # Decimal('1234.57')
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

# Standard precision for amounts and percentages (2 decimal places)
CURRENCY_PLACES = Decimal("0.01")

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

Numeric = Union[Decimal, float, int, str]


def to_decimal(value: Union[Numeric, None]) -> Decimal:
    """Convert a numeric value to Decimal.

    Floats are converted via their string representation to avoid binary
    floating point artifacts. Strings may carry thousands separators or a
    leading currency symbol, as exported by spreadsheets.

    Args:
        value: Numeric value to convert. None is converted to zero.

    Returns:
        Decimal representation of the value.

    Raises:
        ValueError: If the value cannot be parsed as a number.

    Example:
        >>> to_decimal(1234.56)
        Decimal('1234.56')
        >>> to_decimal("$1,250.00")
        Decimal('1250.00')
        >>> to_decimal(None)
        Decimal('0.00')
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert boolean {value!r} to Decimal")
    if isinstance(value, float):
        # Round to reasonable precision first to avoid artifacts like 0.1 -> 0.10000000000000001
        return Decimal(str(round(value, 10)))
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").lstrip("$")
        if not cleaned:
            return ZERO
        try:
            return Decimal(cleaned)
        except InvalidOperation:
            raise ValueError(f"Cannot convert {value!r} to Decimal") from None
    return Decimal(value)


def quantize_currency(value: Numeric) -> Decimal:
    """Quantize a value to 2 decimal places.

    Rounds using ROUND_HALF_UP (half away from zero), which matches SQL
    ``ROUND(x, 2)`` on exact numerics.

    Args:
        value: Numeric value to quantize.

    Returns:
        Decimal rounded to 2 decimal places.

    Example:
        >>> quantize_currency(Decimal("1234.565"))
        Decimal('1234.57')
    """
    if not isinstance(value, Decimal):
        value = to_decimal(value)
    return value.quantize(CURRENCY_PLACES, rounding=ROUND_HALF_UP)


def sum_decimals(values: Iterable[Numeric]) -> Decimal:
    """Sum values with Decimal precision.

    Args:
        values: Numeric values to sum.

    Returns:
        Exact sum of all values; ``Decimal('0.00')`` for an empty iterable.

    Example:
        >>> sum_decimals([0.1, 0.2, 0.3])
        Decimal('0.60')
    """
    return sum((to_decimal(v) for v in values), ZERO)


def safe_divide(
    numerator: Numeric,
    denominator: Numeric,
    default: Optional[Decimal] = None,
) -> Optional[Decimal]:
    """Divide two values, returning ``default`` if the denominator is zero.

    This is the ``x / NULLIF(y, 0)`` guard: with the default of ``None`` an
    undefined quotient surfaces as a missing value instead of an exception.

    Args:
        numerator: Value to divide.
        denominator: Value to divide by.
        default: Value to return if denominator is zero.

    Returns:
        Result of division, or default if denominator is zero.

    Example:
        >>> safe_divide(100, 4)
        Decimal('25')
        >>> safe_divide(100, 0) is None
        True
    """
    num = to_decimal(numerator)
    denom = to_decimal(denominator)

    if denom == ZERO:
        return default

    return num / denom
