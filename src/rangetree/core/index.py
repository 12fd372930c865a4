"""Query surface shared by every range index.

Subclasses provide ``__len__`` and ``_intersect``; the rest of the
operations are derived from those two.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar

from rangetree.core.models import Interval, RangeEntry

C = TypeVar("C")
V = TypeVar("V")


def require(value: Any, name: str) -> Any:
    if value is None:
        raise TypeError(f"{name} must not be None")
    return value


def require_interval(value: Any, name: str = "query") -> Interval:
    require(value, name)
    if not isinstance(value, Interval):
        raise TypeError(
            f"{name} must be an Interval, got {type(value).__name__}"
        )
    return value


class RangeIndex(ABC, Generic[C, V]):
    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def _intersect(self, query: Interval) -> Iterator[RangeEntry]:
        """Yield every stored entry overlapping a validated ``query``."""

    def intersect(self, query: Interval) -> Iterator[RangeEntry]:
        """Return an iterator over the entries overlapping ``query``.

        Arguments are checked before this returns, so a bad query fails at
        the call rather than at first iteration. Each call is independent.
        """
        require_interval(query)
        return self._intersect(query)

    def size(self) -> int:
        return len(self)

    def is_empty(self) -> bool:
        return self.size() == 0

    def query(self, point: C) -> Iterator[RangeEntry]:
        """Return the entries whose interval contains ``point``."""
        require(point, "point")
        return self.intersect(Interval.singleton(point))

    def count(self, query: Any) -> int:
        """Count entries at a point, or overlapping an ``Interval``.

        This walks the matches, so the cost grows with the result size.
        """
        if isinstance(query, Interval):
            matches = self.intersect(query)
        else:
            matches = self.query(query)
        return sum(1 for _ in matches)

    def contains(self, point: C) -> bool:
        require(point, "point")
        return self.intersects(Interval.singleton(point))

    def intersects(self, query: Interval | Iterable[Interval]) -> bool:
        """True if ``query``, or any interval in an iterable of them, hits.

        Stops at the first matching entry.
        """
        require(query, "query")
        if not isinstance(query, Interval):
            return self.intersects_any(query)
        for _ in self.intersect(query):
            return True
        return False

    def intersects_any(self, queries: Iterable[Interval]) -> bool:
        require(queries, "queries")
        for query in queries:
            if self.intersects(require_interval(query)):
                return True
        return False
