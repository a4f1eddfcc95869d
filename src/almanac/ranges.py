"""Range, stage map and pipeline types for almanac remapping.

A stage maps numeric source intervals onto destination intervals. Stages
compose left-to-right into a pipeline that carries one seed value to its
final location. All values are unsigned 64-bit integers.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeAlias


U64_MAX = 2**64 - 1

Triple: TypeAlias = tuple[int, int, int]


class AlmanacError(ValueError):
    """Base class for almanac construction, parsing and resolution errors."""


class InvalidRangeError(AlmanacError):
    """Raised when a stage definition cannot form a valid range."""


class ResolutionOverflowError(AlmanacError):
    """Raised when a translated value does not fit in an unsigned 64-bit int."""


class InvalidSeedError(AlmanacError):
    """Raised when a seed is not an unsigned 64-bit integer."""


def _check_u64(name: str, value: int, error: type[AlmanacError]) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= U64_MAX:
        raise error(f"{name} must be in [0, {U64_MAX}], got {value}")


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive source interval [start, end] translated onto destination."""

    start: int
    end: int
    destination: int

    def __post_init__(self) -> None:
        _check_u64("start", self.start, InvalidRangeError)
        _check_u64("end", self.end, InvalidRangeError)
        _check_u64("destination", self.destination, InvalidRangeError)
        if self.end < self.start:
            raise InvalidRangeError(
                f"end must be >= start, got {self.end} < {self.start}",
            )

    @classmethod
    def from_triple(cls, destination: int, start: int, length: int) -> Range:
        """Build a range from a ``(destination, start, length)`` row."""
        _check_u64("length", length, InvalidRangeError)
        if length < 1:
            raise InvalidRangeError(f"length must be >= 1, got {length}")
        _check_u64("start", start, InvalidRangeError)
        end = start + length - 1
        if end > U64_MAX:
            raise InvalidRangeError(
                f"start + length - 1 overflows u64 (start={start}, length={length})",
            )
        return cls(start=start, end=end, destination=destination)

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def contains(self, value: int) -> bool:
        return self.start <= value <= self.end

    def resolve(self, value: int) -> int | None:
        """Translate ``value`` if it lies in this range, else return None."""
        if not self.contains(value):
            return None
        translated = value - self.start + self.destination
        if translated > U64_MAX:
            raise ResolutionOverflowError(
                f"value {value} translates to {translated}, beyond u64 "
                f"(range start={self.start} destination={self.destination})",
            )
        return translated


@dataclass(frozen=True, slots=True)
class StageMap:
    """One conversion stage: ordered ranges with identity fallback.

    Ranges may overlap. Resolution scans them in stored order and the first
    containing range governs.
    """

    ranges: tuple[Range, ...]
    name: str = ""

    @classmethod
    def from_triples(
        cls,
        triples: Iterable[Sequence[int]],
        *,
        name: str = "",
    ) -> StageMap:
        ranges: list[Range] = []
        for idx, row in enumerate(triples):
            if len(row) < 3:
                raise InvalidRangeError(
                    f"stage {name or '?'} row {idx} needs 3 columns, got {len(row)}",
                )
            # Extra columns are ignored.
            destination, start, length = row[0], row[1], row[2]
            ranges.append(Range.from_triple(destination, start, length))
        return cls(ranges=tuple(ranges), name=name)

    def find_range(self, value: int) -> Range | None:
        for rng in self.ranges:
            if rng.contains(value):
                return rng
        return None

    def resolve(self, value: int) -> int:
        for rng in self.ranges:
            output = rng.resolve(value)
            if output is not None:
                return output
        return value


@dataclass(frozen=True, slots=True)
class Pipeline:
    """Fixed, ordered composition of stage maps."""

    stages: tuple[StageMap, ...] = ()

    @classmethod
    def from_stages(
        cls,
        stages: Iterable[Iterable[Sequence[int]]],
        *,
        names: Sequence[str] | None = None,
    ) -> Pipeline:
        """Build a pipeline from per-stage ``(destination, start, length)`` rows.

        ``names`` labels the stages positionally and must match their count.
        """
        stage_rows = list(stages)
        if names is not None and len(names) != len(stage_rows):
            raise InvalidRangeError(
                f"got {len(names)} stage names for {len(stage_rows)} stages",
            )
        built = tuple(
            StageMap.from_triples(rows, name=names[idx] if names is not None else "")
            for idx, rows in enumerate(stage_rows)
        )
        return cls(stages=built)

    @property
    def stage_names(self) -> tuple[str, ...]:
        return tuple(stage.name for stage in self.stages)

    def resolve(self, seed: int) -> int:
        _check_u64("seed", seed, InvalidSeedError)
        current = seed
        for stage in self.stages:
            current = stage.resolve(current)
        return current

    def trace(self, seed: int) -> tuple[int, ...]:
        """Return the seed followed by the value emitted by each stage."""
        _check_u64("seed", seed, InvalidSeedError)
        values = [seed]
        for stage in self.stages:
            values.append(stage.resolve(values[-1]))
        return tuple(values)
