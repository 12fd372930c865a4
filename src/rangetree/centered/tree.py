import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from rangetree.core.index import RangeIndex, require
from rangetree.core.models import Interval, RangeEntry
from rangetree.core.ranges import (
    center as midpoint_center,
)
from rangetree.core.ranges import (
    is_after,
    is_before,
    lower_endpoint_key,
    overlaps,
    sort_by_lower,
    sort_by_upper_descending,
    upper_endpoint_key,
)

logger = logging.getLogger(__name__)

CenterFn = Callable[[Interval], Any]


class _Node:
    __slots__ = (
        "center",
        "left",
        "right",
        "by_lower",
        "by_upper",
        "holds_center",
    )

    def __init__(
        self,
        center: Any,
        overlap: list[RangeEntry],
        holds_center: bool = True,
    ) -> None:
        self.center = center
        self.left: _Node | None = None
        self.right: _Node | None = None
        self.by_lower = sort_by_lower(overlap)
        self.by_upper = sort_by_upper_descending(overlap)
        # False only for a leaf whose span has no representable interior
        # point; its entries are then checked one by one.
        self.holds_center = holds_center


def _covering(entries: list[RangeEntry]) -> Interval:
    """Smallest interval covering every entry, closed bounds winning ties."""
    first = min(entries, key=lower_endpoint_key).interval
    last = max(entries, key=upper_endpoint_key).interval
    return Interval(
        lower=first.lower,
        upper=last.upper,
        lower_type=first.lower_type,
        upper_type=last.upper_type,
    )


def _partition(
    entries: list[RangeEntry], center_fn: CenterFn
) -> tuple[_Node | None, list[RangeEntry], list[RangeEntry]]:
    """Split ``entries`` around a center into ``(node, before, after)``."""
    if not entries:
        return None, [], []
    covering = _covering(entries)
    if covering.is_empty():
        return None, [], []

    center = center_fn(covering)
    if not covering.contains(center):
        if center_fn is not midpoint_center:
            raise ValueError(
                f"center {center!r} lies outside the span {covering}"
            )
        # Open bounds on adjacent floats: nothing lies strictly between.
        stored = [entry for entry in entries if not entry.interval.is_empty()]
        return _Node(covering.lower, stored, holds_center=False), [], []

    before: list[RangeEntry] = []
    after: list[RangeEntry] = []
    overlap: list[RangeEntry] = []
    for entry in entries:
        if is_before(entry.interval, center):
            before.append(entry)
        elif is_after(entry.interval, center):
            after.append(entry)
        else:
            overlap.append(entry)
    return _Node(center, overlap), before, after


def _build_tree(
    entries: list[RangeEntry], center_fn: CenterFn
) -> _Node | None:
    root: _Node | None = None
    pending: list[tuple[list[RangeEntry], _Node | None, str]] = [
        (entries, None, "")
    ]
    while pending:
        group, parent, side = pending.pop()
        node, before, after = _partition(group, center_fn)
        if node is None:
            continue
        if parent is None:
            root = node
        else:
            setattr(parent, side, node)
        pending.append((before, node, "left"))
        pending.append((after, node, "right"))
    return root


def _shape(root: _Node | None) -> tuple[int, int]:
    """Return ``(node_count, depth)`` of the tree rooted at ``root``."""
    node_count = 0
    depth = 0
    pending = [(root, 1)] if root is not None else []
    while pending:
        node, level = pending.pop()
        node_count += 1
        depth = max(depth, level)
        for child in (node.left, node.right):
            if child is not None:
                pending.append((child, level + 1))
    return node_count, depth


class CenteredRangeTree(RangeIndex):
    """Immutable centered interval tree.

    Each node splits its entries around a center coordinate: entries wholly
    before it go left, wholly after it go right, and the rest stay in the
    node, kept twice, ascending by lower bound and descending by upper
    bound, so a query that misses the center can stop scanning early.

    Build with :meth:`build` or :meth:`from_intervals`. Once built nothing
    changes, so any number of threads may query concurrently.
    """

    def __init__(
        self,
        entries: Iterable[RangeEntry],
        center: CenterFn | None = None,
    ) -> None:
        require(entries, "entries")
        materialized = list(entries)
        for entry in materialized:
            if not isinstance(entry, RangeEntry):
                raise TypeError(
                    "entries must be RangeEntry instances, got "
                    f"{type(entry).__name__}"
                )
        center_fn = midpoint_center if center is None else center
        self._size = len(materialized)
        self._root = _build_tree(materialized, center_fn)

        if logger.isEnabledFor(logging.DEBUG):
            node_count, depth = _shape(self._root)
            logger.debug(
                "built centered range tree: %d entries, %d nodes, depth %d",
                self._size, node_count, depth,
            )

    @classmethod
    def build(
        cls,
        entries: Iterable[RangeEntry],
        center: CenterFn | None = None,
    ) -> "CenteredRangeTree":
        return cls(entries, center=center)

    @classmethod
    def from_intervals(
        cls,
        intervals: Sequence[Interval],
        values: Sequence[Any],
        center: CenterFn | None = None,
    ) -> "CenteredRangeTree":
        """Pair ``intervals[i]`` with ``values[i]`` and build a tree."""
        require(intervals, "intervals")
        require(values, "values")
        if len(intervals) != len(values):
            raise ValueError(
                "intervals and values must be equal size "
                f"({len(intervals)} != {len(values)})"
            )
        entries = [
            RangeEntry(interval=interval, value=value)
            for interval, value in zip(intervals, values, strict=True)
        ]
        return cls(entries, center=center)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size})"

    def node_count(self) -> int:
        return _shape(self._root)[0]

    def depth(self) -> int:
        return _shape(self._root)[1]

    def _intersect(self, query: Interval) -> Iterator[RangeEntry]:
        if self._root is None or query.is_empty():
            return iter(())
        return self._search(query, self._root)

    def _search(self, query: Interval, root: _Node) -> Iterator[RangeEntry]:
        visited: set[_Node] = set()
        pending = [root]
        while pending:
            node = pending.pop()
            if node in visited:
                continue
            visited.add(node)
            c = node.center
            query_before = is_before(query, c)
            query_after = is_after(query, c)

            if query_after:
                if node.right is not None:
                    pending.append(node.right)
                for entry in node.by_upper:
                    if overlaps(entry.interval, query):
                        yield entry
                    # Later entries end no further right, so none can match.
                    if is_after(query, entry.interval.upper):
                        break
            elif query_before:
                if node.left is not None:
                    pending.append(node.left)
                for entry in node.by_lower:
                    if overlaps(entry.interval, query):
                        yield entry
                    if is_before(query, entry.interval.lower):
                        break
            else:
                # The query holds the center and may reach into both
                # subtrees, which a single-branch descent would miss
                # (test_query_straddling_center_reaches_both_subtrees).
                for child in (node.left, node.right):
                    if child is not None:
                        pending.append(child)
                if node.holds_center:
                    yield from node.by_lower
                else:
                    for entry in node.by_lower:
                        if overlaps(entry.interval, query):
                            yield entry


def build(
    entries: Iterable[RangeEntry], center: CenterFn | None = None
) -> CenteredRangeTree:
    return CenteredRangeTree.build(entries, center=center)


def build_from_intervals(
    intervals: Sequence[Interval],
    values: Sequence[Any],
    center: CenterFn | None = None,
) -> CenteredRangeTree:
    return CenteredRangeTree.from_intervals(intervals, values, center=center)
