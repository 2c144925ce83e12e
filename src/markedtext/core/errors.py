"""Exceptions raised while decoding marked text."""

from __future__ import annotations

from typing import Any


class MarkedTextError(ValueError):
    """Raised when an annotated fixture string is malformed.

    ``reason`` identifies the violated rule (``nested_open``,
    ``unmatched_close``, ``duplicate_point``, ``misplaced_point``,
    ``missing_direction``, ``unclosed_range``, ``unbalanced_markers``,
    ``misordered_range`` or ``non_degenerate_range``).
    """

    def __init__(
        self,
        message: str,
        *,
        reason: str,
        index: int | None = None,
        marker: str | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.index = index
        self.marker = marker

    def details(self) -> dict[str, Any]:
        return {
            "reason": self.reason,
            "message": str(self),
            "index": self.index,
            "marker": self.marker,
        }


__all__ = ["MarkedTextError"]
