"""Line-oriented parser for almanac text.

Input layout::

    seeds: 79 14 55 13

    seed-to-soil map:
    50 98 2
    52 50 48

    soil-to-fertilizer map:
    ...

The seeds line is followed by blank-line separated stage blocks. Each block
starts with an ``<source>-to-<target> map:`` header and lists one or more
``destination start length`` rows. Columns past the third are ignored.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from almanac.ranges import (
    U64_MAX,
    AlmanacError,
    InvalidRangeError,
    Pipeline,
    StageMap,
    Triple,
)


log = logging.getLogger(__name__)

STAGE_ORDER: tuple[str, ...] = (
    "seed-to-soil",
    "soil-to-fertilizer",
    "fertilizer-to-water",
    "water-to-light",
    "light-to-temperature",
    "temperature-to-humidity",
    "humidity-to-location",
)

_SEEDS_RE = re.compile(r"^seeds:(?P<body>.*)$")
_HEADER_RE = re.compile(r"^(?P<name>[a-z]+-to-[a-z]+) map:$")
_NUMBER_RE = re.compile(r"^[0-9]+$")
_MAX_DIGITS = len(str(U64_MAX))


class AlmanacParseError(AlmanacError):
    """Raised when almanac input is malformed. ``line`` is 1-based, 0 if unknown."""

    def __init__(self, message: str, *, line: int = 0) -> None:
        self.line = line
        where = f"line {line}: " if line else ""
        super().__init__(f"{where}{message}")


@dataclass(frozen=True, slots=True)
class StageDefinition:
    """Parsed stage block before range validation."""

    name: str
    rows: tuple[Triple, ...]
    line: int = 0


@dataclass(frozen=True, slots=True)
class Almanac:
    """Seeds plus ordered stage definitions, as delivered by a parser."""

    seeds: tuple[int, ...]
    stages: tuple[StageDefinition, ...]

    def pipeline(self) -> Pipeline:
        """Build the pipeline, reporting bad rows against their stage block."""
        built: list[StageMap] = []
        for stage in self.stages:
            try:
                built.append(StageMap.from_triples(stage.rows, name=stage.name))
            except InvalidRangeError as exc:
                raise AlmanacParseError(
                    f"invalid range in stage {stage.name!r}: {exc}",
                    line=stage.line,
                ) from exc
        return Pipeline(stages=tuple(built))


def _parse_numbers(tokens: list[str], line_no: int) -> list[int]:
    values: list[int] = []
    for token in tokens:
        if not _NUMBER_RE.match(token):
            raise AlmanacParseError(f"expected an unsigned integer, got {token!r}", line=line_no)
        # Length check first: int() refuses very long digit strings.
        if len(token.lstrip("0")) > _MAX_DIGITS or int(token) > U64_MAX:
            raise AlmanacParseError(f"number {token[:24]!r} exceeds u64", line=line_no)
        values.append(int(token))
    return values


def _split_blocks(lines: list[str]) -> list[list[tuple[int, str]]]:
    blocks: list[list[tuple[int, str]]] = []
    current: list[tuple[int, str]] = []
    for idx, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            if current:
                blocks.append(current)
                current = []
            continue
        current.append((idx, line))
    if current:
        blocks.append(current)
    return blocks


def _parse_seeds(block: list[tuple[int, str]]) -> tuple[int, ...]:
    line_no, line = block[0]
    match = _SEEDS_RE.match(line)
    if match is None:
        raise AlmanacParseError("expected 'seeds:' line", line=line_no)
    if len(block) > 1:
        raise AlmanacParseError("expected blank line after seeds", line=block[1][0])
    seeds = _parse_numbers(match.group("body").split(), line_no)
    if not seeds:
        raise AlmanacParseError("seeds line lists no seeds", line=line_no)
    return tuple(seeds)


def _parse_stage(block: list[tuple[int, str]]) -> StageDefinition:
    header_no, header = block[0]
    match = _HEADER_RE.match(header)
    if match is None:
        raise AlmanacParseError(f"expected '<a>-to-<b> map:' header, got {header!r}", line=header_no)
    name = match.group("name")
    if len(block) == 1:
        raise AlmanacParseError(f"stage {name!r} has no ranges", line=header_no)

    rows: list[Triple] = []
    for line_no, line in block[1:]:
        values = _parse_numbers(line.split(), line_no)
        if len(values) < 3:
            raise AlmanacParseError(
                f"range row needs 3 columns (destination start length), got {len(values)}",
                line=line_no,
            )
        rows.append((values[0], values[1], values[2]))
    return StageDefinition(name=name, rows=tuple(rows), line=header_no)


def _check_stage_order(stages: list[StageDefinition]) -> None:
    names = [stage.name for stage in stages]
    for idx, expected in enumerate(STAGE_ORDER):
        if idx >= len(stages):
            raise AlmanacParseError(f"missing stage {expected!r}")
        if names[idx] != expected:
            raise AlmanacParseError(
                f"expected stage {expected!r}, got {names[idx]!r}",
                line=stages[idx].line,
            )
    if len(stages) > len(STAGE_ORDER):
        extra = stages[len(STAGE_ORDER)]
        raise AlmanacParseError(f"unexpected stage {extra.name!r}", line=extra.line)


def _check_chain(stages: list[StageDefinition]) -> None:
    for prev, nxt in zip(stages, stages[1:]):
        prev_target = prev.name.split("-to-")[1]
        next_source = nxt.name.split("-to-")[0]
        if prev_target != next_source:
            raise AlmanacParseError(
                f"stage {nxt.name!r} does not continue from {prev.name!r}",
                line=nxt.line,
            )


def parse_almanac(text: str, *, strict_order: bool = True) -> Almanac:
    """Parse almanac text into seeds and stage definitions.

    With ``strict_order`` (default) exactly the seven ``STAGE_ORDER`` stages
    must appear in that order. Otherwise any chain of stages, including none, is
    accepted as long as each stage's source category is the previous stage's
    target.
    """

    normalized = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    blocks = _split_blocks(normalized.split("\n"))
    if not blocks:
        raise AlmanacParseError("empty almanac")

    seeds = _parse_seeds(blocks[0])
    stages = [_parse_stage(block) for block in blocks[1:]]
    if strict_order:
        _check_stage_order(stages)
    else:
        _check_chain(stages)

    log.debug("Parsed %d seeds and %d stages", len(seeds), len(stages))
    return Almanac(seeds=seeds, stages=tuple(stages))
