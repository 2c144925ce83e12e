"""Encoding and decoding of inline position/range markers."""

from .extractor import extract_offsets
from .generator import render
from .grammar import (
    DEFAULT_GRAMMAR,
    POINT,
    RANGE_CLOSE,
    RANGE_OPEN,
    MarkedTextGrammar,
    parse_marked,
    parse_points,
)
from .roles import (
    EmptyMarker,
    MarkerRole,
    RangeMarker,
    ReverseRangeMarker,
    extract_ranges,
    marker_role,
)

__all__ = [
    "DEFAULT_GRAMMAR",
    "EmptyMarker",
    "MarkedTextGrammar",
    "MarkerRole",
    "POINT",
    "RANGE_CLOSE",
    "RANGE_OPEN",
    "RangeMarker",
    "ReverseRangeMarker",
    "extract_offsets",
    "extract_ranges",
    "marker_role",
    "parse_marked",
    "parse_points",
    "render",
]
