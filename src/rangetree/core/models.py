from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

C = TypeVar("C")
V = TypeVar("V")


class BoundType(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class Interval(BaseModel, Generic[C]):
    """Contiguous span of an ordered coordinate type.

    Bounds default to half-open, ``[lower, upper)``. An interval with
    ``lower == upper`` and exactly one closed bound is empty; ``[a, a]`` is
    the singleton containing ``a``.
    """

    model_config = ConfigDict(frozen=True)

    lower: C
    upper: C
    lower_type: BoundType = BoundType.CLOSED
    upper_type: BoundType = BoundType.OPEN

    @model_validator(mode="after")
    def validate_bounds(self) -> "Interval[C]":
        if self.lower is None or self.upper is None:
            raise ValueError("interval bounds must not be None")
        # Written as `not <=` so NaN bounds are rejected too.
        if not self.lower <= self.upper:
            raise ValueError(
                f"lower ({self.lower!r}) must be <= upper ({self.upper!r})"
            )
        if (
            self.lower == self.upper
            and self.lower_type == BoundType.OPEN
            and self.upper_type == BoundType.OPEN
        ):
            raise ValueError(f"open interval ({self.lower!r}, ...) is invalid")
        return self

    @classmethod
    def closed_open(cls, lower: C, upper: C) -> "Interval[C]":
        return cls(lower=lower, upper=upper)

    @classmethod
    def closed(cls, lower: C, upper: C) -> "Interval[C]":
        return cls(
            lower=lower,
            upper=upper,
            lower_type=BoundType.CLOSED,
            upper_type=BoundType.CLOSED,
        )

    @classmethod
    def open(cls, lower: C, upper: C) -> "Interval[C]":
        return cls(
            lower=lower,
            upper=upper,
            lower_type=BoundType.OPEN,
            upper_type=BoundType.OPEN,
        )

    @classmethod
    def open_closed(cls, lower: C, upper: C) -> "Interval[C]":
        return cls(
            lower=lower,
            upper=upper,
            lower_type=BoundType.OPEN,
            upper_type=BoundType.CLOSED,
        )

    @classmethod
    def singleton(cls, point: C) -> "Interval[C]":
        """Closed interval ``[point, point]`` holding exactly one point."""
        return cls.closed(point, point)

    def is_empty(self) -> bool:
        return self.lower == self.upper and not (
            self.lower_type == BoundType.CLOSED
            and self.upper_type == BoundType.CLOSED
        )

    def contains(self, point: C) -> bool:
        if point < self.lower or (
            point == self.lower and self.lower_type == BoundType.OPEN
        ):
            return False
        if point > self.upper or (
            point == self.upper and self.upper_type == BoundType.OPEN
        ):
            return False
        return True

    def __str__(self) -> str:
        left = "[" if self.lower_type == BoundType.CLOSED else "("
        right = "]" if self.upper_type == BoundType.CLOSED else ")"
        return f"{left}{self.lower}, {self.upper}{right}"


class RangeEntry(BaseModel, Generic[C, V]):
    """An interval paired with an opaque value.

    Equality and hashing are structural over both fields; hashing needs a
    hashable value.
    """

    model_config = ConfigDict(frozen=True)

    interval: Interval
    value: V
