import importlib.util
import random
from collections import Counter
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from rangetree.core.models import BoundType, Interval, RangeEntry

_BOUND_TYPES = (BoundType.CLOSED, BoundType.OPEN)


def entries_from(*spans: tuple[int, int]) -> list[RangeEntry]:
    """Half-open entries valued ``value0``, ``value1``, ... in order."""
    return [
        RangeEntry(interval=Interval.closed_open(lo, hi), value=f"value{i}")
        for i, (lo, hi) in enumerate(spans)
    ]


def values_of(entries: Iterable[RangeEntry]) -> Counter:
    return Counter(entry.value for entry in entries)


def random_interval(
    rng: random.Random,
    *,
    lo: int = -50,
    hi: int = 50,
    max_width: int = 20,
    mixed_bounds: bool = False,
    as_float: bool = False,
) -> Interval:
    start = rng.randint(lo, hi)
    width = rng.randint(0, max_width)
    lower: int | float = start
    upper: int | float = start + width
    if as_float:
        lower = lower + rng.random()
        upper = max(lower, upper + rng.random())
    lower_type = BoundType.CLOSED
    upper_type = BoundType.OPEN
    if mixed_bounds:
        lower_type = rng.choice(_BOUND_TYPES)
        upper_type = rng.choice(_BOUND_TYPES)
        if lower == upper and lower_type == upper_type == BoundType.OPEN:
            upper_type = BoundType.CLOSED
    return Interval(
        lower=lower,
        upper=upper,
        lower_type=lower_type,
        upper_type=upper_type,
    )


def random_entries(
    rng: random.Random,
    n: int,
    **interval_kwargs,
) -> list[RangeEntry]:
    return [
        RangeEntry(interval=random_interval(rng, **interval_kwargs), value=i)
        for i in range(n)
    ]


def load_script_module(script: Path, module_name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(module_name, script)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Failed to load script module from {script}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
