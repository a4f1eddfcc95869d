"""I/O utilities for almanac inputs and resolution reports.

orjson-backed JSON I/O plus loaders that turn text or JSON almanac files
into ``Almanac`` records.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from almanac.parser import Almanac, AlmanacParseError, StageDefinition, parse_almanac
from almanac.ranges import Triple


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON with sorted keys."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts) + b"\n")


def dumps_json(obj: Any) -> str:
    """Serialize to an indented JSON string for stdout."""
    return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")


def _as_u64_list(value: Any, where: str) -> list[int]:
    if not isinstance(value, list):
        raise AlmanacParseError(f"{where} must be a list")
    out: list[int] = []
    for idx, item in enumerate(value):
        if isinstance(item, bool) or not isinstance(item, int) or item < 0:
            raise AlmanacParseError(f"{where}[{idx}] must be a non-negative int, got {item!r}")
        out.append(item)
    return out


def almanac_from_dict(payload: Any) -> Almanac:
    """Build an ``Almanac`` from ``{"seeds": [...], "stages": [...]}``.

    Each stage is ``{"name": str, "ranges": [[destination, start, length], ...]}``;
    stage order is array order.
    """
    if not isinstance(payload, dict):
        raise AlmanacParseError("almanac JSON must be an object")
    seeds = _as_u64_list(payload.get("seeds"), "seeds")

    raw_stages = payload.get("stages", [])
    if not isinstance(raw_stages, list):
        raise AlmanacParseError("stages must be a list")
    stages: list[StageDefinition] = []
    for idx, raw in enumerate(raw_stages):
        if not isinstance(raw, dict):
            raise AlmanacParseError(f"stages[{idx}] must be an object")
        name = str(raw.get("name") or f"stage-{idx}")
        raw_ranges = raw.get("ranges")
        if not isinstance(raw_ranges, list):
            raise AlmanacParseError(f"stages[{idx}].ranges must be a list")
        rows: list[Triple] = []
        for row_idx, row in enumerate(raw_ranges):
            values = _as_u64_list(row, f"stages[{idx}].ranges[{row_idx}]")
            if len(values) < 3:
                raise AlmanacParseError(
                    f"stages[{idx}].ranges[{row_idx}] needs 3 values, got {len(values)}",
                )
            rows.append((values[0], values[1], values[2]))
        stages.append(StageDefinition(name=name, rows=tuple(rows)))

    return Almanac(seeds=tuple(seeds), stages=tuple(stages))


def load_almanac_json(path: Path) -> Almanac:
    """Load a JSON almanac file."""
    try:
        payload = load_json(path)
    except orjson.JSONDecodeError as exc:
        raise AlmanacParseError(f"invalid JSON in {path}: {exc}") from exc
    return almanac_from_dict(payload)


def load_almanac_text(path: Path, *, strict_order: bool = True) -> Almanac:
    """Load a text almanac file."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise AlmanacParseError(f"{path} is not valid UTF-8: {exc}") from exc
    return parse_almanac(text, strict_order=strict_order)
