"""Cross-cutting helpers shared by the feature slices."""

from .durations import parse_duration
from .errors import (
    CommandNotFound,
    DejaError,
    NotFound,
    ParseError,
    PermissionDenied,
    Unreadable,
    Unwritable,
)

__all__ = [
    "CommandNotFound",
    "DejaError",
    "NotFound",
    "ParseError",
    "PermissionDenied",
    "Unreadable",
    "Unwritable",
    "parse_duration",
]
