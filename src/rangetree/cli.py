import logging
import math
from collections.abc import Iterator
from pathlib import Path
from typing import Annotated, Any

import srsly
import typer
from pydantic import BaseModel, ValidationError

from rangetree.centered.tree import CenteredRangeTree
from rangetree.core.models import BoundType, Interval, RangeEntry

logger = logging.getLogger(__name__)

app = typer.Typer(help="Build interval trees over JSONL entries and query.")

Coordinate = int | float


class EntryRow(BaseModel):
    lower: Coordinate
    upper: Coordinate
    lower_type: BoundType = BoundType.CLOSED
    upper_type: BoundType = BoundType.OPEN
    value: Any = None

    def to_entry(self) -> RangeEntry:
        interval = Interval(
            lower=self.lower,
            upper=self.upper,
            lower_type=self.lower_type,
            upper_type=self.upper_type,
        )
        return RangeEntry(interval=interval, value=self.value)


class _RowError(Exception):
    def __init__(self, *, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(reason)


def _parse_coordinate(raw: str, value: str) -> Coordinate:
    raw = raw.strip()
    if not raw:
        raise typer.BadParameter(f"Invalid coordinate in '{value}'")
    # Integer-looking tokens stay ints so large values keep their precision.
    if "." not in raw and "e" not in raw.lower():
        try:
            return int(raw)
        except ValueError:
            pass
    try:
        parsed = float(raw)
    except ValueError as err:
        raise typer.BadParameter(
            f"Invalid coordinate '{raw}' in '{value}'"
        ) from err
    if not math.isfinite(parsed):
        raise typer.BadParameter(
            f"Invalid coordinate '{raw}' in '{value}': coordinates must be "
            "finite numbers (no nan/inf/-inf)"
        )
    return parsed


def _parse_range(
    value: str | None,
    lower_type: BoundType = BoundType.CLOSED,
    upper_type: BoundType = BoundType.OPEN,
) -> Interval | None:
    """Parse 'lo,hi' into an Interval. Raises typer.BadParameter."""
    if value is None:
        return None
    parts = value.split(",")
    if len(parts) != 2:
        raise typer.BadParameter(
            f"Invalid range '{value}': expected 'LO,HI' (e.g., '5,10')"
        )
    lo = _parse_coordinate(parts[0], value)
    hi = _parse_coordinate(parts[1], value)
    if lo > hi:
        raise typer.BadParameter(
            f"Invalid range '{value}': low must be <= high"
        )
    try:
        return Interval(
            lower=lo, upper=hi, lower_type=lower_type, upper_type=upper_type
        )
    except ValidationError as err:
        message = err.errors(include_url=False)[0]["msg"]
        raise typer.BadParameter(f"Invalid range '{value}': {message}") from err


def _parse_point(value: str | None) -> Coordinate | None:
    if value is None:
        return None
    return _parse_coordinate(value, value)


def _iter_rows(input_file: Path) -> Iterator[tuple[Any, RangeEntry]]:
    """Yield ``(raw_row, entry)`` for each non-blank JSONL line."""
    with input_file.open("r", encoding="utf-8") as input_handle:
        for line_number, line in enumerate(input_handle, start=1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                raw = srsly.json_loads(stripped)
            except ValueError as err:
                raise _RowError(
                    line_number=line_number,
                    reason=f"malformed JSON ({err})",
                ) from err
            try:
                entry = EntryRow.model_validate(raw).to_entry()
            except ValidationError as err:
                first_error = err.errors(include_url=False)[0]
                loc = ".".join(str(item) for item in first_error["loc"])
                message = first_error["msg"]
                where = f" at '{loc}'" if loc else ""
                raise _RowError(
                    line_number=line_number,
                    reason=f"invalid entry row{where}: {message}",
                ) from err
            yield raw, entry


def _load_tree(input_file: Path) -> CenteredRangeTree:
    return CenteredRangeTree.build(entry for _, entry in _iter_rows(input_file))


def _render_row_error(input_file: Path, error: _RowError) -> str:
    return (
        f"Error: invalid JSONL row in {input_file} at line "
        f"{error.line_number}: {error.reason}"
    )


def _entry_to_row(entry: RangeEntry) -> dict[str, Any]:
    interval = entry.interval
    return {
        "lower": interval.lower,
        "upper": interval.upper,
        "lower_type": interval.lower_type.value,
        "upper_type": interval.upper_type.value,
        "value": entry.value,
    }


def _write_rows(rows: list[Any], output: Path | None) -> None:
    if output is None:
        for row in rows:
            typer.echo(srsly.json_dumps(row))
        return
    srsly.write_jsonl(output, rows)


def _fail_on_file_error(path: Path, err: OSError) -> typer.Exit:
    typer.echo(
        f"Error: file operation failed for {path}: {err.strerror or err}",
        err=True,
    )
    return typer.Exit(1)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Interval tree queries over JSONL entry files."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@app.command()
def query(
    input_file: Annotated[Path, typer.Argument(help="Input entries JSONL")],
    range_: Annotated[
        str | None,
        typer.Option("--range", "-r", help="Query range 'LO,HI'"),
    ] = None,
    point: Annotated[
        str | None,
        typer.Option("--point", "-p", help="Query point"),
    ] = None,
    lower_type: Annotated[
        BoundType | None,
        typer.Option(
            "--lower-type", help="Range lower bound (default closed)"
        ),
    ] = None,
    upper_type: Annotated[
        BoundType | None,
        typer.Option("--upper-type", help="Range upper bound (default open)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output JSONL (default stdout)"),
    ] = None,
) -> None:
    """Write the entries intersecting a range or point."""
    query_range = _resolve_query(range_, point, lower_type, upper_type)
    try:
        tree = _load_tree(input_file)
        rows = [_entry_to_row(entry) for entry in tree.intersect(query_range)]
        _write_rows(rows, output)
    except _RowError as err:
        typer.echo(_render_row_error(input_file, err), err=True)
        raise typer.Exit(1) from err
    except OSError as err:
        raise _fail_on_file_error(
            Path(err.filename) if err.filename else input_file, err
        ) from err
    logger.debug("query %s matched %d entries", query_range, len(rows))


@app.command()
def count(
    input_file: Annotated[Path, typer.Argument(help="Input entries JSONL")],
    range_: Annotated[
        str | None,
        typer.Option("--range", "-r", help="Query range 'LO,HI'"),
    ] = None,
    point: Annotated[
        str | None,
        typer.Option("--point", "-p", help="Query point"),
    ] = None,
    lower_type: Annotated[
        BoundType | None,
        typer.Option(
            "--lower-type", help="Range lower bound (default closed)"
        ),
    ] = None,
    upper_type: Annotated[
        BoundType | None,
        typer.Option("--upper-type", help="Range upper bound (default open)"),
    ] = None,
) -> None:
    """Print how many entries intersect a range or point."""
    query_range = _resolve_query(range_, point, lower_type, upper_type)
    try:
        tree = _load_tree(input_file)
    except _RowError as err:
        typer.echo(_render_row_error(input_file, err), err=True)
        raise typer.Exit(1) from err
    except OSError as err:
        raise _fail_on_file_error(input_file, err) from err
    typer.echo(str(tree.count(query_range)))


@app.command(name="filter")
def filter_entries(
    input_file: Annotated[Path, typer.Argument(help="Input entries JSONL")],
    regions: Annotated[
        Path,
        typer.Option("--regions", help="Region entries JSONL to match against"),
    ],
    invert: Annotated[
        bool,
        typer.Option("--invert", help="Keep rows intersecting no region"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output JSONL (default stdout)"),
    ] = None,
) -> None:
    """Keep input rows that intersect any region, rows passed through as-is."""
    current = regions
    try:
        region_tree = _load_tree(regions)
        current = input_file
        kept = [
            raw
            for raw, entry in _iter_rows(input_file)
            if region_tree.intersects(entry.interval) != invert
        ]
        _write_rows(kept, output)
    except _RowError as err:
        typer.echo(_render_row_error(current, err), err=True)
        raise typer.Exit(1) from err
    except OSError as err:
        raise _fail_on_file_error(
            Path(err.filename) if err.filename else current, err
        ) from err
    logger.debug(
        "filter kept %d rows against %d regions", len(kept), len(region_tree)
    )


@app.command()
def info(
    input_file: Annotated[Path, typer.Argument(help="Input entries JSONL")],
) -> None:
    """Show entry and tree shape statistics for an entries file."""
    try:
        entries = [entry for _, entry in _iter_rows(input_file)]
    except _RowError as err:
        typer.echo(_render_row_error(input_file, err), err=True)
        raise typer.Exit(1) from err
    except OSError as err:
        raise _fail_on_file_error(input_file, err) from err

    tree = CenteredRangeTree.build(entries)
    empty = sum(1 for entry in entries if entry.interval.is_empty())
    typer.echo(f"{input_file}: {len(tree)} entries")
    typer.echo(f"  empty intervals: {empty}")
    if entries:
        lower = min(entry.interval.lower for entry in entries)
        upper = max(entry.interval.upper for entry in entries)
        typer.echo(f"  bounds: {lower} .. {upper}")
    typer.echo(f"  nodes: {tree.node_count()}")
    typer.echo(f"  depth: {tree.depth()}")


def _resolve_query(
    range_: str | None,
    point: str | None,
    lower_type: BoundType | None,
    upper_type: BoundType | None,
) -> Interval:
    if (range_ is None) == (point is None):
        raise typer.BadParameter("Provide exactly one of --range or --point")
    if point is not None:
        if lower_type is not None or upper_type is not None:
            raise typer.BadParameter(
                "--lower-type/--upper-type apply to --range only"
            )
        return Interval.singleton(_parse_point(point))
    return _parse_range(
        range_,
        BoundType.CLOSED if lower_type is None else lower_type,
        BoundType.OPEN if upper_type is None else upper_type,
    )
