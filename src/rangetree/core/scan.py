from collections.abc import Iterable, Iterator

from rangetree.core.index import RangeIndex, require
from rangetree.core.models import Interval, RangeEntry
from rangetree.core.ranges import overlaps


class LinearScanIndex(RangeIndex):
    """Checks every entry on every query.

    Linear per query; used as the reference answer for the tree and for
    inputs too small to be worth partitioning.
    """

    def __init__(self, entries: Iterable[RangeEntry]) -> None:
        require(entries, "entries")
        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _intersect(self, query: Interval) -> Iterator[RangeEntry]:
        for entry in self._entries:
            if overlaps(entry.interval, query):
                yield entry
