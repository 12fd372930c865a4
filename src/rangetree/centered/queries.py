import random
from collections.abc import Sequence
from enum import Enum
from functools import reduce
from numbers import Integral

from pydantic import BaseModel, Field

from rangetree.core.models import Interval, RangeEntry
from rangetree.core.ranges import span
from rangetree.core.scan import LinearScanIndex


class QueryTag(str, Enum):
    TYPICAL = "typical"
    BOUNDARY = "boundary"
    COVERAGE = "coverage"
    ADVERSARIAL = "adversarial"


class RangeQuery(BaseModel):
    interval: Interval = Field(description="Query range")
    expected_count: int = Field(
        description="Number of entries a linear scan finds"
    )
    tag: QueryTag = Field(description="Query category for analysis")


def _sample_point(lo, hi, integral: bool, rng: random.Random):
    if integral:
        return rng.randint(lo, hi)
    return rng.uniform(lo, hi)


def _typical_ranges(
    covering: Interval,
    n: int,
    integral: bool,
    rng: random.Random,
) -> list[Interval]:
    lo, hi = covering.lower, covering.upper
    width = hi - lo
    pad = width // 10 if integral else width / 10
    ranges: list[Interval] = []
    for _ in range(n):
        a = _sample_point(lo - pad, hi + pad, integral, rng)
        b = _sample_point(lo - pad, hi + pad, integral, rng)
        ranges.append(Interval.closed_open(min(a, b), max(a, b)))
    return ranges


def _boundary_ranges(
    entries: Sequence[RangeEntry],
    n: int,
    rng: random.Random,
) -> list[Interval]:
    picked = rng.sample(list(entries), min(n, len(entries)))
    ranges: list[Interval] = []
    for entry in picked:
        interval = entry.interval
        ranges.append(Interval.singleton(interval.lower))
        ranges.append(Interval.singleton(interval.upper))
        # Abut the edges; whether they share a point depends on bound types.
        ranges.append(Interval.closed(interval.upper, interval.upper + 1))
        ranges.append(Interval.closed(interval.lower - 1, interval.lower))
    return ranges


def _adversarial_ranges(covering: Interval) -> list[Interval]:
    lo, hi = covering.lower, covering.upper
    return [
        Interval.closed_open(lo, lo),
        Interval.closed_open(hi, hi),
        Interval.closed_open(lo - 10, lo),
        Interval.open_closed(hi, hi + 10),
    ]


def generate_range_queries(
    entries: Sequence[RangeEntry],
    rng: random.Random | None = None,
    n_typical: int = 20,
    n_boundary: int = 5,
) -> list[RangeQuery]:
    """Generate tagged query ranges with their linear-scan answer counts.

    Coordinates must be numeric. Duplicate ranges are dropped, keeping the
    first tag seen.
    """
    if rng is None:
        rng = random.Random()
    if not entries:
        return []

    covering = reduce(span, (entry.interval for entry in entries))
    integral = isinstance(covering.lower, Integral) and isinstance(
        covering.upper, Integral
    )
    oracle = LinearScanIndex(entries)

    tagged: list[tuple[Interval, QueryTag]] = [
        (covering, QueryTag.COVERAGE),
        *(
            (interval, QueryTag.BOUNDARY)
            for interval in _boundary_ranges(entries, n_boundary, rng)
        ),
        *(
            (interval, QueryTag.TYPICAL)
            for interval in _typical_ranges(covering, n_typical, integral, rng)
        ),
        *(
            (interval, QueryTag.ADVERSARIAL)
            for interval in _adversarial_ranges(covering)
        ),
    ]

    queries: list[RangeQuery] = []
    seen: set[Interval] = set()
    for interval, tag in tagged:
        if interval in seen:
            continue
        seen.add(interval)
        queries.append(
            RangeQuery(
                interval=interval,
                expected_count=oracle.count(interval),
                tag=tag,
            )
        )
    return queries
