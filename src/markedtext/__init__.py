"""Inline cursor and selection markers for readable text fixtures.

Typical use in a test::

    from markedtext import parse_marked, render

    text, ranges = parse_marked("one «ˇtwo» three", indicate_cursors=True)
    assert text == "one two three"
    assert render(text, ranges, indicate_cursors=True) == "one «ˇtwo» three"
"""

from .codec import (
    DEFAULT_GRAMMAR,
    POINT,
    RANGE_CLOSE,
    RANGE_OPEN,
    EmptyMarker,
    MarkedTextGrammar,
    MarkerRole,
    RangeMarker,
    ReverseRangeMarker,
    extract_offsets,
    extract_ranges,
    marker_role,
    parse_marked,
    parse_points,
    render,
)
from .core import MarkedRange, MarkedTextError

__all__ = [
    "DEFAULT_GRAMMAR",
    "EmptyMarker",
    "MarkedRange",
    "MarkedTextError",
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
