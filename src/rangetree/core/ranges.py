"""Primitives over intervals and coordinate points.

Everything here is a pure function of its arguments. Bound types follow the
usual reading: a closed bound includes its endpoint, an open bound excludes
it, so the default half-open ``[lower, upper)`` lies before ``upper``.
"""

from numbers import Integral
from typing import Any

from rangetree.core.models import BoundType, Interval, RangeEntry


def _lower_of(a: Interval, b: Interval) -> tuple[Any, BoundType]:
    if a.lower < b.lower:
        return a.lower, a.lower_type
    if b.lower < a.lower:
        return b.lower, b.lower_type
    if BoundType.CLOSED in (a.lower_type, b.lower_type):
        return a.lower, BoundType.CLOSED
    return a.lower, BoundType.OPEN


def _upper_of(a: Interval, b: Interval) -> tuple[Any, BoundType]:
    if a.upper > b.upper:
        return a.upper, a.upper_type
    if b.upper > a.upper:
        return b.upper, b.upper_type
    if BoundType.CLOSED in (a.upper_type, b.upper_type):
        return a.upper, BoundType.CLOSED
    return a.upper, BoundType.OPEN


def span(a: Interval, b: Interval) -> Interval:
    """Return the smallest interval covering both ``a`` and ``b``."""
    lower, lower_type = _lower_of(a, b)
    upper, upper_type = _upper_of(a, b)
    return Interval(
        lower=lower,
        upper=upper,
        lower_type=lower_type,
        upper_type=upper_type,
    )


def is_before(interval: Interval, point: Any) -> bool:
    """True if every point of ``interval`` is less than ``point``."""
    if interval.upper < point:
        return True
    return interval.upper == point and interval.upper_type == BoundType.OPEN


def is_after(interval: Interval, point: Any) -> bool:
    """True if every point of ``interval`` is greater than ``point``."""
    if interval.lower > point:
        return True
    return interval.lower == point and interval.lower_type == BoundType.OPEN


def overlaps(a: Interval, b: Interval) -> bool:
    """True if ``a`` and ``b`` share at least one point.

    Empty intervals overlap nothing, not even themselves.
    """
    if a.is_empty() or b.is_empty():
        return False

    # Intersection bounds: the tighter endpoint wins, open beats closed on ties.
    if a.lower > b.lower:
        lower, lower_type = a.lower, a.lower_type
    elif b.lower > a.lower:
        lower, lower_type = b.lower, b.lower_type
    else:
        lower = a.lower
        lower_type = (
            BoundType.OPEN
            if BoundType.OPEN in (a.lower_type, b.lower_type)
            else BoundType.CLOSED
        )

    if a.upper < b.upper:
        upper, upper_type = a.upper, a.upper_type
    elif b.upper < a.upper:
        upper, upper_type = b.upper, b.upper_type
    else:
        upper = a.upper
        upper_type = (
            BoundType.OPEN
            if BoundType.OPEN in (a.upper_type, b.upper_type)
            else BoundType.CLOSED
        )

    if lower < upper:
        return True
    return (
        lower == upper
        and lower_type == BoundType.CLOSED
        and upper_type == BoundType.CLOSED
    )


def center(interval: Interval) -> Any:
    """Return a coordinate inside ``interval`` to partition around.

    Integral coordinates use the floored midpoint; anything else supporting
    ``lower + (upper - lower) / 2`` (floats, Decimal, Fraction, datetime)
    uses the true midpoint. Integral spans too narrow to hold an integer,
    such as ``(0, 1]``, fall back to the true midpoint.
    """
    lower, upper = interval.lower, interval.upper
    if isinstance(lower, Integral) and isinstance(upper, Integral):
        point = lower + (upper - lower) // 2
        if interval.contains(point):
            return point
    try:
        point = lower + (upper - lower) / 2
    except TypeError as err:
        raise TypeError(
            f"cannot compute a center for {type(lower).__name__} coordinates; "
            "pass a center function explicitly"
        ) from err
    if interval.contains(point):
        return point
    # Adjacent floats: nothing representable lies strictly between them.
    if interval.lower_type == BoundType.CLOSED:
        return lower
    return upper


def lower_endpoint_key(entry: RangeEntry) -> tuple[Any, int]:
    """Sort key ascending by lower bound, closed before open on ties."""
    interval = entry.interval
    return (interval.lower, 0 if interval.lower_type == BoundType.CLOSED else 1)


def upper_endpoint_key(entry: RangeEntry) -> tuple[Any, int]:
    """Sort key by upper bound; reverse it for the descending order.

    Under ``reverse=True`` a closed upper bound sorts ahead of an open one
    at the same value.
    """
    interval = entry.interval
    return (interval.upper, 1 if interval.upper_type == BoundType.CLOSED else 0)


def sort_by_lower(entries: list[RangeEntry]) -> tuple[RangeEntry, ...]:
    return tuple(sorted(entries, key=lower_endpoint_key))


def sort_by_upper_descending(
    entries: list[RangeEntry],
) -> tuple[RangeEntry, ...]:
    return tuple(sorted(entries, key=upper_endpoint_key, reverse=True))
