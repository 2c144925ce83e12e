"""Parser for the three-symbol cursor/selection notation.

``«`` opens a range, ``»`` closes it and ``ˇ`` marks a cursor. A cursor
outside any range is a caret; a cursor inside a range must sit on one of its
boundaries and tells which end the selection head is on::

    one «ˇtwo» «threeˇ» fiveˇ

decodes to ``one two three five`` with ranges ``7..4``, ``8..13`` and
``18..18``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.errors import MarkedTextError
from ..core.ranges import MarkedRange

LOGGER = logging.getLogger(__name__)

RANGE_OPEN = "«"
RANGE_CLOSE = "»"
POINT = "ˇ"


@dataclass(slots=True, frozen=True)
class MarkedTextGrammar:
    """Characters used by the cursor/selection notation."""

    open: str = RANGE_OPEN
    close: str = RANGE_CLOSE
    point: str = POINT

    def __post_init__(self) -> None:
        for label, value in (("open", self.open), ("close", self.close), ("point", self.point)):
            if not isinstance(value, str) or len(value) != 1:
                raise ValueError(f"Grammar {label} marker must be a single character, got {value!r}")
        if len({self.open, self.close, self.point}) != 3:
            raise ValueError("Grammar markers must be distinct characters")

    @property
    def markers(self) -> frozenset[str]:
        return frozenset((self.open, self.close, self.point))


DEFAULT_GRAMMAR = MarkedTextGrammar()


def parse_marked(
    text: str,
    indicate_cursors: bool = False,
    *,
    grammar: MarkedTextGrammar = DEFAULT_GRAMMAR,
) -> tuple[str, list[MarkedRange]]:
    """Strip grammar markers from ``text`` and decode the ranges they describe.

    Ranges are returned in the order they were closed; carets in the order
    their point marker appears. With ``indicate_cursors`` every range must
    carry a point marker on one of its boundaries.

    Raises:
        MarkedTextError: if the markers are nested, unbalanced, or a point
            marker is duplicated, misplaced or missing.
    """

    pieces: list[str] = []
    ranges: list[MarkedRange] = []
    stripped_len = 0
    pending_start: int | None = None
    pending_start_index = 0
    pending_point: int | None = None
    pending_point_index = 0

    for index, char in enumerate(text):
        if char == grammar.point:
            if pending_start is None:
                ranges.append(MarkedRange.caret(stripped_len))
            elif pending_point is None:
                pending_point = stripped_len
                pending_point_index = index
            else:
                raise MarkedTextError(
                    f"duplicate point marker {char!r} at index {index}",
                    reason="duplicate_point",
                    index=index,
                    marker=char,
                )
        elif char == grammar.open:
            if pending_start is not None:
                raise MarkedTextError(
                    f"unexpected range start marker {char!r} at index {index}",
                    reason="nested_open",
                    index=index,
                    marker=char,
                )
            pending_start = stripped_len
            pending_start_index = index
        elif char == grammar.close:
            if pending_start is None:
                raise MarkedTextError(
                    f"unexpected range end marker {char!r} at index {index}",
                    reason="unmatched_close",
                    index=index,
                    marker=char,
                )
            start, end = pending_start, stripped_len
            pending_start = None
            reversed_range = False
            if pending_point is not None:
                point, pending_point = pending_point, None
                if point == start:
                    reversed_range = True
                elif point != end:
                    raise MarkedTextError(
                        f"unexpected {grammar.point!r} marker at index {pending_point_index} in the middle of a range",
                        reason="misplaced_point",
                        index=pending_point_index,
                        marker=grammar.point,
                    )
            elif indicate_cursors:
                raise MarkedTextError(
                    f"missing {grammar.point!r} marker to indicate range direction at index {index}",
                    reason="missing_direction",
                    index=index,
                    marker=char,
                )
            ranges.append(MarkedRange(end, start) if reversed_range else MarkedRange(start, end))
        else:
            pieces.append(char)
            stripped_len += 1

    if pending_start is not None:
        raise MarkedTextError(
            f"range opened at index {pending_start_index} is never closed",
            reason="unclosed_range",
            index=pending_start_index,
            marker=grammar.open,
        )

    LOGGER.debug("Decoded %d range(s) from marked text", len(ranges))
    return "".join(pieces), ranges


def parse_points(
    text: str,
    *,
    grammar: MarkedTextGrammar = DEFAULT_GRAMMAR,
) -> tuple[str, list[int]]:
    """Decode a fixture that only contains carets into plain offsets."""

    stripped, ranges = parse_marked(text, False, grammar=grammar)
    offsets: list[int] = []
    for marked in ranges:
        if not marked.is_caret:
            raise MarkedTextError(
                f"expected only point markers, found range {marked.start}..{marked.end}",
                reason="non_degenerate_range",
            )
        offsets.append(marked.start)
    return stripped, offsets


__all__ = [
    "DEFAULT_GRAMMAR",
    "MarkedTextGrammar",
    "POINT",
    "RANGE_CLOSE",
    "RANGE_OPEN",
    "parse_marked",
    "parse_points",
]
