"""Render ranges back into the cursor/selection notation."""

from __future__ import annotations

from typing import Any, Iterable

from ..core.ranges import MarkedRange
from .grammar import DEFAULT_GRAMMAR, MarkedTextGrammar


def render(
    text: str,
    ranges: Iterable[MarkedRange | Any],
    indicate_cursors: bool = False,
    *,
    grammar: MarkedTextGrammar = DEFAULT_GRAMMAR,
) -> str:
    """Insert grammar markers into ``text`` for every range.

    Offsets refer to ``text`` before any insertion; ranges are applied last to
    first so earlier offsets stay valid. Overlapping ranges are not detected
    and produce output that may not parse again.
    """

    marked_text = text
    for marked in reversed([MarkedRange.from_value(value) for value in ranges]):
        start, end = marked.start, marked.end
        if start == end:
            marked_text = _insert(marked_text, start, grammar.point)
        elif not indicate_cursors:
            marked_text = _insert(marked_text, marked.upper, grammar.close)
            marked_text = _insert(marked_text, marked.lower, grammar.open)
        elif start < end:
            marked_text = _insert(marked_text, end, grammar.point + grammar.close)
            marked_text = _insert(marked_text, start, grammar.open)
        else:
            marked_text = _insert(marked_text, start, grammar.close)
            marked_text = _insert(marked_text, end, grammar.open + grammar.point)
    return marked_text


def _insert(text: str, offset: int, fragment: str) -> str:
    return text[:offset] + fragment + text[offset:]


__all__ = ["render"]
