"""Structured helpers for representing directional text spans."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(slots=True, frozen=True)
class MarkedRange(Sequence[int]):
    """Half-open span over stripped text that remembers its direction.

    Unlike an editor selection, the bounds are never swapped: ``start > end``
    describes a selection whose cursor sits at the lower offset.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", self._coerce_index(self.start, "start"))
        object.__setattr__(self, "end", self._coerce_index(self.end, "end"))

    @staticmethod
    def _coerce_index(value: Any, label: str) -> int:
        if isinstance(value, bool):
            raise TypeError(f"MarkedRange {label} must be an integer")
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"MarkedRange {label} must be an integer") from exc
        if number < 0:
            raise ValueError(f"MarkedRange {label} must not be negative")
        return number

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> int | tuple[int, ...]:
        if isinstance(index, slice):
            return self.to_tuple()[index]
        if index in (0, -2):
            return self.start
        if index in (1, -1):
            return self.end
        raise IndexError("MarkedRange index out of range")

    def __iter__(self) -> Iterator[int]:
        yield self.start
        yield self.end

    def __repr__(self) -> str:
        return f"MarkedRange({self.start}..{self.end})"

    @property
    def is_caret(self) -> bool:
        """Return ``True`` when the range collapses to a single position."""

        return self.start == self.end

    @property
    def is_reversed(self) -> bool:
        return self.start > self.end

    @property
    def lower(self) -> int:
        return min(self.start, self.end)

    @property
    def upper(self) -> int:
        return max(self.start, self.end)

    @property
    def length(self) -> int:
        """Return the width of the span regardless of direction."""

        return self.upper - self.lower

    @property
    def head(self) -> int:
        """Offset of the cursor end."""

        return self.end

    @property
    def tail(self) -> int:
        """Offset of the anchor end."""

        return self.start

    def normalized(self) -> MarkedRange:
        """Return the forward-oriented equivalent of this range."""

        if self.is_reversed:
            return MarkedRange(self.end, self.start)
        return self

    def reversed(self) -> MarkedRange:
        return MarkedRange(self.end, self.start)

    def to_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_list(self) -> list[int]:
        """Return the range as a JSON-friendly list."""

        return [self.start, self.end]

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def caret(cls, offset: int) -> MarkedRange:
        """Return a zero-width range at ``offset``."""

        return cls(offset, offset)

    @classmethod
    def from_value(cls, value: Any) -> MarkedRange:
        """Coerce ``value`` into a :class:`MarkedRange`.

        Accepts ranges, ``{"start", "end"}`` mappings, two-item sequences,
        ``range`` objects with step 1 and bare integers (treated as carets).
        """

        if isinstance(value, MarkedRange):
            return value
        if value is None:
            raise ValueError("MarkedRange value is required")
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.caret(value)
        if isinstance(value, range):
            if value.step != 1:
                raise ValueError("MarkedRange cannot be built from a stepped range")
            return cls(value.start, value.stop)
        if isinstance(value, Mapping):
            start = value.get("start")
            end = value.get("end")
            if start is None or end is None:
                raise ValueError("MarkedRange mappings require start and end keys")
            return cls(start, end)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) != 2:
                raise ValueError("MarkedRange sequences must have exactly two entries")
            return cls(seq[0], seq[1])
        raise TypeError("Unsupported MarkedRange input")


__all__ = ["MarkedRange"]
