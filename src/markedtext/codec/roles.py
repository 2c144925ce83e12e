"""Role-based decoding of caller-chosen marker characters into ranges."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Union

from ..core.errors import MarkedTextError
from ..core.ranges import MarkedRange
from .extractor import extract_offsets

LOGGER = logging.getLogger(__name__)


def _require_char(value: Any, label: str) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{label} must be a single character, got {value!r}")
    return value


@dataclass(slots=True, frozen=True)
class EmptyMarker:
    """A single character marking a zero-width position."""

    char: str

    def __post_init__(self) -> None:
        _require_char(self.char, "EmptyMarker char")

    def markers(self) -> tuple[str, ...]:
        return (self.char,)


@dataclass(slots=True, frozen=True)
class RangeMarker:
    """A ``left``/``right`` pair marking forward ranges."""

    left: str
    right: str

    def __post_init__(self) -> None:
        _require_char(self.left, "RangeMarker left")
        _require_char(self.right, "RangeMarker right")

    def markers(self) -> tuple[str, ...]:
        return (self.left, self.right)


@dataclass(slots=True, frozen=True)
class ReverseRangeMarker:
    """A ``left``/``right`` pair whose ranges are emitted end-to-start."""

    left: str
    right: str

    def __post_init__(self) -> None:
        _require_char(self.left, "ReverseRangeMarker left")
        _require_char(self.right, "ReverseRangeMarker right")

    def markers(self) -> tuple[str, ...]:
        return (self.left, self.right)


MarkerRole = Union[EmptyMarker, RangeMarker, ReverseRangeMarker]
_ROLE_TYPES = (EmptyMarker, RangeMarker, ReverseRangeMarker)


def marker_role(value: Any) -> MarkerRole:
    """Coerce ``value`` into a marker role.

    A single character becomes an :class:`EmptyMarker` and a two-item tuple a
    :class:`RangeMarker`.
    """

    if isinstance(value, _ROLE_TYPES):
        return value
    if isinstance(value, str):
        return EmptyMarker(value)
    if isinstance(value, tuple) and len(value) == 2:
        return RangeMarker(value[0], value[1])
    raise TypeError(f"Unsupported marker role: {value!r}")


def extract_ranges(
    text: str,
    roles: Iterable[MarkerRole | str | tuple[str, str]],
) -> tuple[str, dict[MarkerRole, list[MarkedRange]]]:
    """Strip every role's markers from ``text`` and resolve them into ranges.

    Offsets are consumed per role, so a role listed twice gets an empty list
    the second time. Marker occurrences no role claims are dropped.
    """

    resolved = [marker_role(role) for role in roles]
    all_markers = {char for role in resolved for char in role.markers()}
    stripped, offsets = extract_offsets(text, all_markers)

    ranges_by_role: dict[MarkerRole, list[MarkedRange]] = {}
    for role in resolved:
        if isinstance(role, EmptyMarker):
            found = offsets.pop(role.char, [])
            ranges = [MarkedRange.caret(offset) for offset in found]
        elif isinstance(role, RangeMarker):
            pairs = _pair_offsets(role, offsets)
            ranges = [MarkedRange(start, end) for start, end in pairs]
        else:
            pairs = _pair_offsets(role, offsets)
            ranges = [MarkedRange(end, start) for start, end in pairs]
        ranges_by_role[role] = ranges

    if offsets:
        LOGGER.debug("Unclaimed marker offsets left after decoding: %s", sorted(offsets))
    return stripped, ranges_by_role


def _pair_offsets(
    role: RangeMarker | ReverseRangeMarker,
    offsets: dict[str, list[int]],
) -> list[tuple[int, int]]:
    starts = offsets.pop(role.left, [])
    ends = offsets.pop(role.right, [])
    if len(starts) != len(ends):
        raise MarkedTextError(
            f"marked ranges are unbalanced: {len(starts)} {role.left!r} vs {len(ends)} {role.right!r}",
            reason="unbalanced_markers",
            marker=role.left if len(starts) > len(ends) else role.right,
        )
    pairs: list[tuple[int, int]] = []
    for start, end in zip(starts, ends):
        if end < start:
            raise MarkedTextError(
                f"marked ranges must be disjoint: {role.right!r} at {end} precedes {role.left!r} at {start}",
                reason="misordered_range",
                marker=role.right,
            )
        pairs.append((start, end))
    return pairs


__all__ = [
    "EmptyMarker",
    "MarkerRole",
    "RangeMarker",
    "ReverseRangeMarker",
    "extract_ranges",
    "marker_role",
]
