#!/usr/bin/env python
"""Time centered range tree queries against a linear scan."""

import random
import time
from collections import Counter
from pathlib import Path
from typing import Any

import srsly
import typer

from rangetree.centered import QueryTag, build, generate_range_queries
from rangetree.core.models import Interval, RangeEntry
from rangetree.core.scan import LinearScanIndex

app = typer.Typer(help="Benchmark centered range tree queries.")

SIZES = (1_000, 10_000, 50_000)


def _random_entries(
    n: int, *, coordinate_max: int, max_width: int, rng: random.Random
) -> list[RangeEntry]:
    entries: list[RangeEntry] = []
    for i in range(n):
        start = rng.randint(0, coordinate_max)
        width = rng.randint(1, max_width)
        entries.append(
            RangeEntry(
                interval=Interval.closed_open(start, start + width), value=i
            )
        )
    return entries


def _time_queries(index, queries: list[Interval]) -> tuple[float, list[int]]:
    counts: list[int] = []
    started = time.perf_counter()
    for query in queries:
        counts.append(index.count(query))
    return time.perf_counter() - started, counts


def _run_size(
    n: int, *, n_queries: int, max_width: int, seed: int
) -> dict[str, Any]:
    rng = random.Random(seed + n)
    entries = _random_entries(
        n, coordinate_max=n * 10, max_width=max_width, rng=rng
    )

    started = time.perf_counter()
    tree = build(entries)
    build_seconds = time.perf_counter() - started
    scan = LinearScanIndex(entries)

    generated = generate_range_queries(entries, rng, n_typical=n_queries)
    queries = [query.interval for query in generated]
    tree_seconds, tree_counts = _time_queries(tree, queries)
    scan_seconds, scan_counts = _time_queries(scan, queries)

    mismatches = [
        str(query)
        for query, got, want in zip(
            queries, tree_counts, scan_counts, strict=True
        )
        if got != want
    ]
    tags = Counter(query.tag.value for query in generated)
    return {
        "entries": n,
        "queries": len(queries),
        "tags": {tag.value: tags.get(tag.value, 0) for tag in QueryTag},
        "nodes": tree.node_count(),
        "depth": tree.depth(),
        "build_seconds": build_seconds,
        "tree_seconds": tree_seconds,
        "scan_seconds": scan_seconds,
        "mismatches": mismatches,
    }


@app.command()
def main(
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional path for a JSON report",
    ),
    queries: int = typer.Option(
        200,
        "--queries",
        "-n",
        min=1,
        help="Random queries per tree size",
    ),
    max_width: int = typer.Option(
        50, min=1, help="Largest interval width to sample"
    ),
    seed: int = typer.Option(42, help="Base random seed"),
) -> None:
    """Build trees of several sizes and compare query time with a scan."""
    results = [
        _run_size(n, n_queries=queries, max_width=max_width, seed=seed)
        for n in SIZES
    ]

    for result in results:
        speedup = result["scan_seconds"] / max(result["tree_seconds"], 1e-9)
        typer.echo(
            f"n={result['entries']}: build={result['build_seconds']:.3f}s "
            f"tree={result['tree_seconds']:.3f}s "
            f"scan={result['scan_seconds']:.3f}s "
            f"speedup={speedup:.1f}x depth={result['depth']}"
        )

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        srsly.write_json(output, {"seed": seed, "results": results})
        typer.echo(f"Wrote benchmark report to {output}")

    failed = [result for result in results if result["mismatches"]]
    if failed:
        for result in failed:
            typer.echo(
                f"n={result['entries']}: {len(result['mismatches'])} "
                "queries disagree with the linear scan"
            )
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
