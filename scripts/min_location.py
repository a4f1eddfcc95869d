#!/usr/bin/env python3
"""Resolve almanac seeds through their stage maps and report the lowest location.

Usage::

    python3 scripts/min_location.py input.txt
    python3 scripts/min_location.py almanac.json --format json --workers 4
    python3 scripts/min_location.py input.txt --trace --json --report-out out/report.json

The minimum location (or the JSON report with ``--json``) goes to stdout;
log messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from almanac.io_utils import dumps_json, load_almanac_json, load_almanac_text, save_json
from almanac.parser import Almanac
from almanac.ranges import AlmanacError
from almanac.resolver import DEFAULT_WORKERS, build_report

log = logging.getLogger("min_location")


def load_input(path: Path, fmt: str, *, strict_order: bool = True) -> Almanac:
    if fmt == "auto":
        fmt = "json" if path.suffix.lower() == ".json" else "text"
    if fmt == "json":
        return load_almanac_json(path)
    return load_almanac_text(path, strict_order=strict_order)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve almanac seeds to locations and report the minimum",
    )
    parser.add_argument("input", type=Path, help="Almanac file (text or JSON)")
    parser.add_argument(
        "--format", choices=("auto", "text", "json"), default="auto",
        help="Input format (default: by file extension)",
    )
    parser.add_argument(
        "--workers", type=int, default=DEFAULT_WORKERS,
        help=f"Resolver threads (default: {DEFAULT_WORKERS})",
    )
    parser.add_argument(
        "--any-stages", action="store_true",
        help="Accept any chained stage sequence instead of the seven standard stages",
    )
    parser.add_argument("--trace", action="store_true", help="Include per-stage values")
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")
    parser.add_argument("--report-out", type=Path, default=None)
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    if args.workers < 1:
        parser.error("--workers must be >= 1")

    t0 = time.monotonic()
    try:
        almanac = load_input(args.input, args.format, strict_order=not args.any_stages)
        pipeline = almanac.pipeline()
        log.info(
            "Loaded %d seeds and %d stages from %s",
            len(almanac.seeds), len(pipeline.stages), args.input,
        )
        report = build_report(
            almanac.seeds,
            pipeline,
            workers=args.workers,
            include_trace=args.trace,
        )
    except OSError as exc:
        log.error("Cannot read %s: %s", args.input, exc)
        return 1
    except AlmanacError as exc:
        log.error("Resolution failed: %s", exc)
        return 1

    log.info("Resolved in %.3fs", time.monotonic() - t0)

    if args.report_out is not None:
        try:
            save_json(report, args.report_out)
        except OSError as exc:
            log.error("Cannot write report to %s: %s", args.report_out, exc)
            return 1
        log.info("Report written to %s", args.report_out)

    if args.json:
        print(dumps_json(report))
    else:
        print(report["min_location"])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
