"""Conversions between codepoint offsets and encoded code-unit offsets.

The codec indexes stripped text by Python ``str`` position (one unit per
codepoint). Consumers that address text as UTF-8 bytes or UTF-16 code units
can translate offsets and ranges with these helpers.
"""

from __future__ import annotations

from typing import Iterable, Literal

from ..core.ranges import MarkedRange

OffsetEncoding = Literal["utf-32", "utf-16", "utf-8"]
OFFSET_ENCODINGS: tuple[str, ...] = ("utf-32", "utf-16", "utf-8")
_ALIASES = {
    "utf-32": "utf-32",
    "utf32": "utf-32",
    "codepoint": "utf-32",
    "codepoints": "utf-32",
    "utf-16": "utf-16",
    "utf16": "utf-16",
    "utf-8": "utf-8",
    "utf8": "utf-8",
}


def normalize_encoding(encoding: str) -> str:
    """Return the canonical name for ``encoding``."""

    if not isinstance(encoding, str):
        raise ValueError(f"Offset encoding must be a string, got {encoding!r}")
    key = encoding.strip().lower()
    try:
        return _ALIASES[key]
    except KeyError:
        raise ValueError(
            f"Unsupported offset encoding {encoding!r}; expected one of {', '.join(OFFSET_ENCODINGS)}"
        ) from None


def _unit_width(char: str, encoding: str) -> int:
    code = ord(char)
    if encoding == "utf-8":
        if code < 0x80:
            return 1
        if code < 0x800:
            return 2
        if code < 0x10000:
            return 3
        return 4
    if encoding == "utf-16":
        return 2 if code >= 0x10000 else 1
    return 1


def to_encoded_offset(text: str, offset: int, encoding: str = "utf-8") -> int:
    """Translate a codepoint ``offset`` in ``text`` into code units."""

    canonical = normalize_encoding(encoding)
    if offset < 0 or offset > len(text):
        raise ValueError(f"Offset {offset} is outside text of length {len(text)}")
    if canonical == "utf-32":
        return offset
    return sum(_unit_width(char, canonical) for char in text[:offset])


def from_encoded_offset(text: str, offset: int, encoding: str = "utf-8") -> int:
    """Translate a code-unit ``offset`` back into a codepoint offset.

    Raises ``ValueError`` if the offset splits a character or lies outside the
    text.
    """

    canonical = normalize_encoding(encoding)
    if offset < 0:
        raise ValueError(f"Offset {offset} must not be negative")
    if canonical == "utf-32":
        if offset > len(text):
            raise ValueError(f"Offset {offset} is outside text of length {len(text)}")
        return offset
    units = 0
    for index, char in enumerate(text):
        if units == offset:
            return index
        units += _unit_width(char, canonical)
        if units > offset:
            raise ValueError(f"Offset {offset} falls inside the character at index {index}")
    if units == offset:
        return len(text)
    raise ValueError(f"Offset {offset} is outside text of {units} {canonical} units")


def encode_ranges(
    text: str,
    ranges: Iterable[MarkedRange],
    encoding: str = "utf-8",
) -> list[MarkedRange]:
    """Translate each range's bounds into ``encoding`` code units, keeping direction."""

    return [
        MarkedRange(
            to_encoded_offset(text, marked.start, encoding),
            to_encoded_offset(text, marked.end, encoding),
        )
        for marked in ranges
    ]


def decode_ranges(
    text: str,
    ranges: Iterable[MarkedRange],
    encoding: str = "utf-8",
) -> list[MarkedRange]:
    """Inverse of :func:`encode_ranges`."""

    return [
        MarkedRange(
            from_encoded_offset(text, marked.start, encoding),
            from_encoded_offset(text, marked.end, encoding),
        )
        for marked in ranges
    ]


__all__ = [
    "OFFSET_ENCODINGS",
    "OffsetEncoding",
    "decode_ranges",
    "encode_ranges",
    "from_encoded_offset",
    "normalize_encoding",
    "to_encoded_offset",
]
