"""Core value types shared by the codec, helpers and CLI."""

from .errors import MarkedTextError
from .ranges import MarkedRange

__all__ = ["MarkedRange", "MarkedTextError"]
