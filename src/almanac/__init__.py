"""Almanac seed-to-location resolution: range stages composed into a pipeline."""

from almanac.io_utils import (
    almanac_from_dict,
    load_almanac_json,
    load_almanac_text,
)
from almanac.parser import (
    STAGE_ORDER,
    Almanac,
    AlmanacParseError,
    StageDefinition,
    parse_almanac,
)
from almanac.ranges import (
    U64_MAX,
    AlmanacError,
    InvalidRangeError,
    InvalidSeedError,
    Pipeline,
    Range,
    ResolutionOverflowError,
    StageMap,
)
from almanac.resolver import (
    EmptySeedsError,
    build_report,
    min_location,
    resolve_locations,
)

__all__ = [
    "Almanac",
    "AlmanacError",
    "AlmanacParseError",
    "EmptySeedsError",
    "InvalidRangeError",
    "InvalidSeedError",
    "Pipeline",
    "Range",
    "ResolutionOverflowError",
    "STAGE_ORDER",
    "StageDefinition",
    "StageMap",
    "U64_MAX",
    "almanac_from_dict",
    "build_report",
    "load_almanac_json",
    "load_almanac_text",
    "min_location",
    "parse_almanac",
    "resolve_locations",
]
