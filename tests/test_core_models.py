import pytest
from pydantic import ValidationError

from rangetree.core.models import BoundType, Interval, RangeEntry


class TestInterval:
    def test_defaults_to_half_open(self) -> None:
        interval = Interval(lower=10, upper=20)
        assert interval.lower_type == BoundType.CLOSED
        assert interval.upper_type == BoundType.OPEN
        assert interval == Interval.closed_open(10, 20)
        assert str(interval) == "[10, 20)"

    def test_factories_set_bound_types(self) -> None:
        assert str(Interval.closed(1, 2)) == "[1, 2]"
        assert str(Interval.open(1, 2)) == "(1, 2)"
        assert str(Interval.open_closed(1, 2)) == "(1, 2]"
        assert Interval.singleton(7) == Interval.closed(7, 7)

    def test_rejects_reversed_bounds(self) -> None:
        with pytest.raises(ValidationError, match="must be <= upper"):
            Interval.closed_open(5, 1)

    def test_rejects_open_interval_at_one_point(self) -> None:
        with pytest.raises(ValidationError):
            Interval.open(3, 3)

    def test_rejects_none_and_nan_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Interval(lower=None, upper=3)
        with pytest.raises(ValidationError):
            Interval(lower=float("nan"), upper=3.0)

    def test_is_frozen(self) -> None:
        interval = Interval.closed_open(1, 2)
        with pytest.raises(ValidationError):
            interval.lower = 0  # type: ignore[misc]

    def test_empty_intervals(self) -> None:
        assert Interval.closed_open(4, 4).is_empty()
        assert Interval.open_closed(4, 4).is_empty()
        assert not Interval.singleton(4).is_empty()
        assert not Interval.closed_open(4, 5).is_empty()

    def test_contains_respects_bound_types(self) -> None:
        half_open = Interval.closed_open(10, 20)
        assert half_open.contains(10)
        assert half_open.contains(19)
        assert not half_open.contains(20)
        assert not half_open.contains(9)

        open_closed = Interval.open_closed(10, 20)
        assert not open_closed.contains(10)
        assert open_closed.contains(20)

    def test_supports_non_numeric_coordinates(self) -> None:
        interval = Interval.closed_open("b", "d")
        assert interval.contains("c")
        assert not interval.contains("d")


class TestRangeEntry:
    def test_equality_and_hash_are_structural(self) -> None:
        a = RangeEntry(interval=Interval.closed_open(1, 5), value="x")
        b = RangeEntry(interval=Interval.closed_open(1, 5), value="x")
        c = RangeEntry(interval=Interval.closed_open(1, 5), value="y")
        d = RangeEntry(interval=Interval.closed(1, 5), value="x")

        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert a != d
        assert len({a, b, c, d}) == 3

    def test_value_is_opaque(self) -> None:
        payload = object()
        entry = RangeEntry(interval=Interval.singleton(3), value=payload)
        assert entry.value is payload

    def test_none_value_is_allowed(self) -> None:
        entry = RangeEntry(interval=Interval.singleton(3), value=None)
        assert entry.value is None

    def test_requires_an_interval(self) -> None:
        with pytest.raises(ValidationError):
            RangeEntry(interval=None, value="x")
