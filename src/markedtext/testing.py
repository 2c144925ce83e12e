"""Assertion helpers for tests that describe cursors and selections as marked text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .codec.generator import render
from .codec.grammar import DEFAULT_GRAMMAR, MarkedTextGrammar, parse_marked
from .core.ranges import MarkedRange


@dataclass(slots=True)
class MarkedFixture:
    """Decoded fixture: stripped text plus the ranges its markers described."""

    text: str
    ranges: list[MarkedRange] = field(default_factory=list)
    grammar: MarkedTextGrammar = DEFAULT_GRAMMAR
    indicate_cursors: bool = False

    @property
    def carets(self) -> list[int]:
        """Return the offsets of all zero-width ranges."""

        return [marked.start for marked in self.ranges if marked.is_caret]

    def render(self, indicate_cursors: bool | None = None) -> str:
        """Render the fixture, by default in the mode it was parsed with."""

        if indicate_cursors is None:
            indicate_cursors = self.indicate_cursors
        return render(self.text, self.ranges, indicate_cursors, grammar=self.grammar)


def marked_fixture(
    marked: str,
    *,
    indicate_cursors: bool = False,
    grammar: MarkedTextGrammar = DEFAULT_GRAMMAR,
) -> MarkedFixture:
    """Parse ``marked`` into a :class:`MarkedFixture`."""

    text, ranges = parse_marked(marked, indicate_cursors, grammar=grammar)
    return MarkedFixture(text=text, ranges=ranges, grammar=grammar, indicate_cursors=indicate_cursors)


def assert_marked_text(
    text: str,
    ranges: Iterable[MarkedRange | Any],
    expected: str,
    *,
    indicate_cursors: bool = True,
    grammar: MarkedTextGrammar = DEFAULT_GRAMMAR,
) -> None:
    """Assert that ``ranges`` over ``text`` render to the ``expected`` marked string.

    Failures report both sides in marked form.
    """

    actual = render(text, ranges, indicate_cursors, grammar=grammar)
    if actual != expected:
        raise AssertionError(
            "marked text mismatch\n"
            f"  expected: {expected!r}\n"
            f"  actual:   {actual!r}"
        )


__all__ = ["MarkedFixture", "assert_marked_text", "marked_fixture"]
