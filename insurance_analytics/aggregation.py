"""Grouped reductions used by the report catalog.

Every helper takes an iterable of rows plus key/value accessor functions,
partitions the rows first and only then reduces each partition. Because a
reduction can only ever see a complete, pre-partitioned group, there is no
way to select a column that is not functionally dependent on the grouping
key.

Results are plain dictionaries whose iteration order is the order in which
keys were first seen, so callers decide the final ordering explicitly.
Averages, sums and percentages are ``Decimal`` values rounded half-up to two
places.

Examples:
    Average claim by claim type::

        averages = group_average(
            dataset.claims,
            key_fn=lambda c: c.claim_type,
            value_fn=lambda c: c.claim_amount,
        )

    Approval rate with a zero-safe denominator::

        rate = ratio(approved, total)  # None when total == 0
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple, TypeVar

from .decimal_utils import HUNDRED, ZERO, Numeric, quantize_currency, safe_divide, to_decimal
from .exceptions import EmptyGroupError, OutOfRangeError

RowT = TypeVar("RowT")
KeyT = TypeVar("KeyT", bound=Hashable)
ValueT = TypeVar("ValueT")

UNDER_18 = "Under 18"

#: Age bucket labels with inclusive lower and upper bounds (``None`` = open).
AGE_BUCKETS: Tuple[Tuple[str, int, Optional[int]], ...] = (
    ("18-25", 18, 25),
    ("26-35", 26, 35),
    ("36-45", 36, 45),
    ("46-60", 46, 60),
    ("60+", 61, None),
)

#: Display order of age groups, youngest first.
AGE_GROUP_ORDER: Tuple[str, ...] = (UNDER_18,) + tuple(label for label, _, _ in AGE_BUCKETS)


def partition(
    rows: Iterable[RowT],
    key_fn: Callable[[RowT], KeyT],
    value_fn: Callable[[RowT], ValueT],
) -> Dict[KeyT, List[ValueT]]:
    """Split rows into groups of extracted values.

    Args:
        rows: Rows to group.
        key_fn: Grouping key for a row.
        value_fn: Value kept for a row.

    Returns:
        Mapping of key to values, in first-seen key order. Every group is
        non-empty.
    """
    groups: Dict[KeyT, List[ValueT]] = {}
    for row in rows:
        groups.setdefault(key_fn(row), []).append(value_fn(row))
    return groups


def mean(values: Iterable[Numeric]) -> Decimal:
    """Arithmetic mean rounded to 2 decimals.

    Args:
        values: Numeric values.

    Returns:
        Rounded mean.

    Raises:
        EmptyGroupError: If ``values`` is empty.
    """
    decimals = [to_decimal(v) for v in values]
    if not decimals:
        raise EmptyGroupError("Cannot average an empty group")
    return quantize_currency(sum(decimals, ZERO) / len(decimals))


def group_average(
    rows: Iterable[RowT],
    key_fn: Callable[[RowT], KeyT],
    value_fn: Callable[[RowT], Numeric],
) -> Dict[KeyT, Decimal]:
    """Mean of ``value_fn`` per key, rounded to 2 decimals."""
    return {key: mean(values) for key, values in partition(rows, key_fn, value_fn).items()}


def group_sum(
    rows: Iterable[RowT],
    key_fn: Callable[[RowT], KeyT],
    value_fn: Callable[[RowT], Numeric],
) -> Dict[KeyT, Decimal]:
    """Exact sum of ``value_fn`` per key."""
    return {
        key: sum((to_decimal(v) for v in values), ZERO)
        for key, values in partition(rows, key_fn, value_fn).items()
    }


def group_count(
    rows: Iterable[RowT],
    key_fn: Callable[[RowT], KeyT],
    predicate: Optional[Callable[[RowT], bool]] = None,
) -> Dict[KeyT, int]:
    """Number of rows per key that satisfy ``predicate``.

    Every key present in ``rows`` appears in the result, with 0 when none of
    its rows satisfies the predicate (the ``SUM(CASE WHEN ...)`` form rather
    than ``WHERE ... GROUP BY``).

    Args:
        rows: Rows to count.
        key_fn: Grouping key for a row.
        predicate: Row filter; every row counts when omitted.

    Returns:
        Mapping of key to count, in first-seen key order.
    """
    counts: Dict[KeyT, int] = {}
    for row in rows:
        key = key_fn(row)
        hit = 1 if predicate is None or predicate(row) else 0
        counts[key] = counts.get(key, 0) + hit
    return counts


def ratio(numerator: Numeric, denominator: Numeric) -> Optional[Decimal]:
    """Percentage ``numerator / denominator * 100`` rounded to 2 decimals.

    Returns:
        The percentage, or ``None`` when the denominator is zero.
    """
    quotient = safe_divide(numerator, denominator)
    if quotient is None:
        return None
    return quantize_currency(quotient * HUNDRED)


def safe_quotient(numerator: Numeric, denominator: Numeric) -> Optional[Decimal]:
    """Plain quotient rounded to 2 decimals; ``None`` when the denominator is zero."""
    quotient = safe_divide(numerator, denominator)
    if quotient is None:
        return None
    return quantize_currency(quotient)


def top_n(
    rows: Iterable[RowT],
    key_fn: Callable[[RowT], KeyT],
    value_fn: Callable[[RowT], Numeric],
    n: int,
) -> List[Tuple[KeyT, Decimal]]:
    """The ``n`` keys with the greatest summed value.

    Ordering is by summed value descending, then by key ascending, so equal
    totals always come out in the same order.

    Args:
        rows: Rows to rank.
        key_fn: Ranking key for a row.
        value_fn: Value summed per key.
        n: Maximum number of keys returned.

    Returns:
        ``(key, total)`` pairs; fewer than ``n`` when fewer keys exist.

    Raises:
        ValueError: If ``n`` is negative.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    totals = group_sum(rows, key_fn, value_fn)
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:n]


def age_in_years(birth_date: date, as_of: date) -> int:
    """Whole years elapsed between ``birth_date`` and ``as_of``."""
    had_birthday = (as_of.month, as_of.day) >= (birth_date.month, birth_date.day)
    return as_of.year - birth_date.year - (0 if had_birthday else 1)


def date_bucket(birth_date: date, as_of: date, allow_minors: bool = True) -> str:
    """Age-group label for a birth date evaluated at ``as_of``.

    Buckets are 18-25, 26-35, 36-45, 46-60 and 60+ (61 and older).

    Args:
        birth_date: Date of birth.
        as_of: Date at which the age is evaluated.
        allow_minors: Label ages below 18 as "Under 18" instead of raising.

    Returns:
        Age-group label from :data:`AGE_GROUP_ORDER`.

    Raises:
        OutOfRangeError: If the birth date is after ``as_of``, or the age is
            below 18 and ``allow_minors`` is False.
    """
    if birth_date > as_of:
        raise OutOfRangeError(f"Birth date {birth_date} is after the as-of date {as_of}")
    age = age_in_years(birth_date, as_of)
    for label, lower, upper in AGE_BUCKETS:
        if age >= lower and (upper is None or age <= upper):
            return label
    if allow_minors:
        return UNDER_18
    raise OutOfRangeError(f"Age {age} is below the youngest age bucket (18)")


def within_window(day: date, as_of: date, days: int) -> bool:
    """Whether ``day`` falls in the ``days``-long window ending at ``as_of``.

    The window is ``[as_of - days, as_of]``, both ends inclusive, compared as
    calendar dates.
    """
    return as_of - timedelta(days=days) <= day <= as_of
