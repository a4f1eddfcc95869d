"""Tests for the seed resolution driver."""

from __future__ import annotations

import pytest

from almanac.ranges import U64_MAX, Pipeline, ResolutionOverflowError
from almanac.resolver import (
    EmptySeedsError,
    InvalidSeedError,
    build_report,
    min_location,
    resolve_locations,
)


EXAMPLE_SEEDS = [79, 14, 55, 13]

EXAMPLE_STAGES: list[list[tuple[int, int, int]]] = [
    [(50, 98, 2), (52, 50, 48)],
    [(0, 15, 37), (37, 52, 2), (39, 0, 15)],
    [(49, 53, 8), (0, 11, 42), (42, 0, 7), (57, 7, 4)],
    [(88, 18, 7), (18, 25, 70)],
    [(45, 77, 23), (81, 45, 19), (68, 64, 13)],
    [(0, 69, 1), (1, 0, 69)],
    [(60, 56, 37), (56, 93, 4)],
]


@pytest.fixture
def example_pipeline() -> Pipeline:
    return Pipeline.from_stages(EXAMPLE_STAGES)


class TestResolveLocations:
    def test_canonical_locations(self, example_pipeline: Pipeline) -> None:
        assert resolve_locations(EXAMPLE_SEEDS, example_pipeline) == [82, 43, 86, 35]

    def test_seed_order_preserved(self, example_pipeline: Pipeline) -> None:
        assert resolve_locations([13, 79], example_pipeline) == [35, 82]

    def test_empty_pipeline(self) -> None:
        assert resolve_locations([3, 1, 2], Pipeline()) == [3, 1, 2]


class TestMinLocation:
    def test_canonical_minimum(self, example_pipeline: Pipeline) -> None:
        assert min_location(EXAMPLE_SEEDS, example_pipeline) == 35

    def test_single_seed(self, example_pipeline: Pipeline) -> None:
        assert min_location([79], example_pipeline) == 82

    def test_accepts_tuple_and_generator_input(self, example_pipeline: Pipeline) -> None:
        assert min_location(tuple(EXAMPLE_SEEDS), example_pipeline) == 35
        assert min_location(list(s for s in EXAMPLE_SEEDS), example_pipeline) == 35

    def test_empty_seeds_raise(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(EmptySeedsError):
            min_location([], example_pipeline)

    def test_empty_seeds_is_value_error(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(ValueError):
            min_location([], example_pipeline)

    def test_negative_seed_rejected(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(InvalidSeedError, match="out of u64 range"):
            min_location([1, -5], example_pipeline)

    def test_oversized_seed_rejected(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(InvalidSeedError):
            min_location([U64_MAX + 1], example_pipeline)

    def test_non_int_seed_rejected(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(InvalidSeedError, match="must be an int"):
            min_location(["79"], example_pipeline)  # type: ignore[list-item]

    def test_overflow_surfaces(self) -> None:
        pipeline = Pipeline.from_stages([[(U64_MAX, 0, 5)]])
        with pytest.raises(ResolutionOverflowError):
            min_location([0, 2], pipeline)

    @pytest.mark.parametrize("workers", [2, 3, 4, 16])
    def test_parallel_matches_sequential(self, example_pipeline: Pipeline, workers: int) -> None:
        seeds = list(range(0, 120))
        expected = min_location(seeds, example_pipeline)
        assert min_location(seeds, example_pipeline, workers=workers) == expected

    def test_parallel_canonical(self, example_pipeline: Pipeline) -> None:
        assert min_location(EXAMPLE_SEEDS, example_pipeline, workers=8) == 35

    def test_parallel_overflow_surfaces(self) -> None:
        pipeline = Pipeline.from_stages([[(U64_MAX, 0, 5)]])
        with pytest.raises(ResolutionOverflowError):
            min_location([10, 11, 12, 3], pipeline, workers=2)

    def test_invalid_worker_count(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(ValueError, match="workers"):
            min_location(EXAMPLE_SEEDS, example_pipeline, workers=0)


class TestBuildReport:
    def test_report_fields(self, example_pipeline: Pipeline) -> None:
        report = build_report(EXAMPLE_SEEDS, example_pipeline)
        assert report["stage_count"] == 7
        assert report["seed_count"] == 4
        assert report["min_location"] == 35
        assert [row["location"] for row in report["seeds"]] == [82, 43, 86, 35]
        assert all("trace" not in row for row in report["seeds"])

    def test_report_trace(self, example_pipeline: Pipeline) -> None:
        report = build_report([79], example_pipeline, include_trace=True)
        row = report["seeds"][0]
        assert row["trace"] == [79, 81, 81, 81, 74, 78, 78, 82]
        assert row["location"] == 82

    def test_report_stage_names(self) -> None:
        pipeline = Pipeline.from_stages([[(0, 5, 1)]], names=["seed-to-soil"])
        report = build_report([5], pipeline)
        assert report["stage_names"] == ["seed-to-soil"]
        assert report["min_location"] == 0

    def test_report_empty_seeds(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(EmptySeedsError):
            build_report([], example_pipeline)

    @pytest.mark.parametrize("workers", [2, 5])
    def test_parallel_report_matches_sequential(
        self, example_pipeline: Pipeline, workers: int,
    ) -> None:
        sequential = build_report(EXAMPLE_SEEDS, example_pipeline, include_trace=True)
        parallel = build_report(
            EXAMPLE_SEEDS, example_pipeline, workers=workers, include_trace=True,
        )
        assert parallel == sequential

    @pytest.mark.parametrize("workers", [1, 3])
    def test_report_resolves_each_seed_once(
        self, example_pipeline: Pipeline, monkeypatch: pytest.MonkeyPatch, workers: int,
    ) -> None:
        calls: list[int] = []
        original = Pipeline.resolve

        def counting_resolve(self: Pipeline, seed: int) -> int:
            calls.append(seed)
            return original(self, seed)

        monkeypatch.setattr(Pipeline, "resolve", counting_resolve)
        report = build_report(EXAMPLE_SEEDS, example_pipeline, workers=workers)
        assert report["min_location"] == 35
        assert sorted(calls) == sorted(EXAMPLE_SEEDS)

    def test_report_invalid_worker_count(self, example_pipeline: Pipeline) -> None:
        with pytest.raises(ValueError, match="workers"):
            build_report(EXAMPLE_SEEDS, example_pipeline, workers=0)
