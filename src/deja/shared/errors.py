"""Where: src/deja/shared/errors.py
What: Error taxonomy shared by every layer of the cache.
Why: Give the CLI boundary one type to catch and a stable message to print.
"""

from __future__ import annotations

from pathlib import Path


class DejaError(Exception):
    """Base class for anticipated failures rendered as one-line messages."""

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __str__(self) -> str:
        return self.message


class NotFound(DejaError):
    """A watch path or a cache entry does not exist."""

    @classmethod
    def watch_path(cls, path: Path | str) -> "NotFound":
        return cls(f"watch path '{path}' not found")

    @classmethod
    def entry(cls, key: str) -> "NotFound":
        return cls(f"no cache entry for {key}")


class Unwritable(DejaError):
    """The cache root cannot be created or written."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"unable to write to cache {path}")
        self.path: Path = Path(path)


class Unreadable(DejaError):
    """An entry or a watched file exists but cannot be read or decoded."""

    def __init__(self, path: Path | str, *, what: str = "cache entry") -> None:
        super().__init__(f"unable to read {what} {path}")
        self.path: Path = Path(path)


class ParseError(DejaError):
    """A duration, exit code spec or config value is malformed."""


class CommandNotFound(DejaError):
    """The target executable cannot be resolved."""

    def __init__(self, name: str) -> None:
        super().__init__(f"command not found: {name}")
        self.name: str = name


class PermissionDenied(DejaError):
    """The target executable exists but cannot be run by the caller."""

    def __init__(self, name: str) -> None:
        super().__init__(f"permission denied running command: {name}")
        self.name: str = name


__all__ = [
    "CommandNotFound",
    "DejaError",
    "NotFound",
    "ParseError",
    "PermissionDenied",
    "Unreadable",
    "Unwritable",
]
