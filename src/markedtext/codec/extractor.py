"""Strip single-character markers and record where they appeared."""

from __future__ import annotations

import logging
from typing import Iterable

LOGGER = logging.getLogger(__name__)


def extract_offsets(text: str, markers: Iterable[str]) -> tuple[str, dict[str, list[int]]]:
    """Remove every character of ``markers`` from ``text``.

    Returns the stripped text and, for each marker that occurred, the offsets
    into the *stripped* text at which it was found, in discovery order.
    """

    marker_set = _marker_set(markers)
    offsets: dict[str, list[int]] = {}
    if not marker_set:
        return text, offsets

    pieces: list[str] = []
    stripped_len = 0
    for char in text:
        if char in marker_set:
            offsets.setdefault(char, []).append(stripped_len)
        else:
            pieces.append(char)
            stripped_len += 1

    if offsets:
        LOGGER.debug(
            "Extracted %d marker occurrence(s) across %d marker(s)",
            sum(len(found) for found in offsets.values()),
            len(offsets),
        )
    return "".join(pieces), offsets


def _marker_set(markers: Iterable[str]) -> frozenset[str]:
    if isinstance(markers, str):
        # a bare string is a collection of marker characters
        return frozenset(markers)
    normalized: set[str] = set()
    for marker in markers:
        if not isinstance(marker, str) or len(marker) != 1:
            raise ValueError(f"Markers must be single characters, got {marker!r}")
        normalized.add(marker)
    return frozenset(normalized)


__all__ = ["extract_offsets"]
