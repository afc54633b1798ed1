"""Data structures describing persisted cache entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class Stream(StrEnum):
    """Standard stream a chunk of output was produced on."""

    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass(slots=True, frozen=True)
class OutputChunk:
    """Bytes read from one stream, kept in production order."""

    stream: Stream
    data: bytes


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """Recorded behaviour of a command: its output and exit status.

    ``expires_at`` is fixed when the entry is written and never recomputed.
    Timestamps are seconds since the epoch.
    """

    created_at: float
    exit_code: int
    output: tuple[OutputChunk, ...] = ()
    expires_at: float | None = None

    def stream_bytes(self, stream: Stream) -> bytes:
        """Concatenate every chunk produced on ``stream``."""

        return b"".join(chunk.data for chunk in self.output if chunk.stream is stream)


@dataclass(slots=True, frozen=True)
class CacheStoreConfig:
    """Location and permission policy of the on-disk store."""

    root: Path
    shared: bool = False

    @property
    def directory_mode(self) -> int:
        return 0o770 if self.shared else 0o700

    @property
    def file_mode(self) -> int:
        return 0o660 if self.shared else 0o600


__all__ = ["CacheEntry", "CacheStoreConfig", "OutputChunk", "Stream"]
