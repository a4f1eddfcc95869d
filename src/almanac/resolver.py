"""Seed resolution driver: per-seed locations and the minimum location."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from almanac.ranges import U64_MAX, AlmanacError, InvalidSeedError, Pipeline


log = logging.getLogger(__name__)

DEFAULT_WORKERS = 1


class EmptySeedsError(AlmanacError):
    """Raised when a minimum location is requested for zero seeds."""


def _validate_seeds(seeds: Sequence[int]) -> list[int]:
    rows = list(seeds)
    if not rows:
        raise EmptySeedsError("no seeds given; minimum location is undefined")
    for idx, seed in enumerate(rows):
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise InvalidSeedError(
                f"seed {idx} must be an int, got {type(seed).__name__}",
            )
        if not 0 <= seed <= U64_MAX:
            raise InvalidSeedError(f"seed {idx} out of u64 range: {seed}")
    return rows


def _chunk(rows: list[int], parts: int) -> list[list[int]]:
    size = -(-len(rows) // parts)
    return [rows[i:i + size] for i in range(0, len(rows), size)]


def _chunk_min(pipeline: Pipeline, seeds: list[int]) -> int:
    return min(pipeline.resolve(seed) for seed in seeds)


def resolve_locations(seeds: Sequence[int], pipeline: Pipeline) -> list[int]:
    """Resolve every seed through the pipeline, preserving seed order."""
    rows = _validate_seeds(seeds)
    return [pipeline.resolve(seed) for seed in rows]


def min_location(
    seeds: Sequence[int],
    pipeline: Pipeline,
    *,
    workers: int = DEFAULT_WORKERS,
) -> int:
    """Return the lowest location any seed resolves to.

    With ``workers > 1`` the seeds are split into contiguous chunks that are
    resolved on a thread pool; each chunk reports its own minimum and the
    chunk minima are reduced with ``min``.

    Raises:
        EmptySeedsError: ``seeds`` is empty.
        InvalidSeedError: a seed is outside the u64 range.
        ResolutionOverflowError: a translated value overflows u64.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    rows = _validate_seeds(seeds)
    if workers == 1 or len(rows) == 1:
        return _chunk_min(pipeline, rows)

    chunks = _chunk(rows, min(workers, len(rows)))
    log.debug("Resolving %d seeds in %d chunks", len(rows), len(chunks))
    with ThreadPoolExecutor(max_workers=len(chunks)) as pool:
        minima = list(pool.map(lambda chunk: _chunk_min(pipeline, chunk), chunks))
    return min(minima)


def build_report(
    seeds: Sequence[int],
    pipeline: Pipeline,
    *,
    workers: int = DEFAULT_WORKERS,
    include_trace: bool = False,
) -> dict[str, Any]:
    """Build a JSON-ready summary of a resolution run.

    Each seed is resolved once; with ``workers > 1`` the per-seed rows are
    computed on a thread pool and the minimum is taken from those rows.
    """

    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    rows = _validate_seeds(seeds)

    def _row(seed: int) -> dict[str, Any]:
        row: dict[str, Any] = {"seed": seed}
        if include_trace:
            trace = pipeline.trace(seed)
            row["location"] = trace[-1]
            row["trace"] = list(trace)
        else:
            row["location"] = pipeline.resolve(seed)
        return row

    if workers == 1 or len(rows) == 1:
        per_seed = [_row(seed) for seed in rows]
    else:
        log.debug("Building report rows for %d seeds on %d threads", len(rows), workers)
        with ThreadPoolExecutor(max_workers=min(workers, len(rows))) as pool:
            per_seed = list(pool.map(_row, rows))

    return {
        "stage_count": len(pipeline.stages),
        "stage_names": list(pipeline.stage_names),
        "seed_count": len(rows),
        "seeds": per_seed,
        "min_location": min(row["location"] for row in per_seed),
    }
