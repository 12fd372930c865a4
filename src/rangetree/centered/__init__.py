"""centered: immutable interval tree partitioned around center points."""

from rangetree.centered.queries import (
    QueryTag,
    RangeQuery,
    generate_range_queries,
)
from rangetree.centered.tree import (
    CenteredRangeTree,
    build,
    build_from_intervals,
)

__all__ = [
    "CenteredRangeTree",
    "QueryTag",
    "RangeQuery",
    "build",
    "build_from_intervals",
    "generate_range_queries",
]
