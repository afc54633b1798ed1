"""Re-emit a stored entry's output and report its exit status."""

from __future__ import annotations

from typing import BinaryIO, final

from deja.features.store import CacheEntry, Stream

from .streams import terminal_stream


@final
class Replayer:
    """Write recorded chunks back to their streams in stored order."""

    def __init__(self, *, stdout: BinaryIO | None = None, stderr: BinaryIO | None = None) -> None:
        self._stdout: BinaryIO | None = stdout
        self._stderr: BinaryIO | None = stderr

    def replay(self, entry: CacheEntry) -> int:
        """Replay ``entry`` unmodified and return the exit code to terminate with."""

        for chunk in entry.output:
            explicit = self._stdout if chunk.stream is Stream.STDOUT else self._stderr
            target = explicit if explicit is not None else terminal_stream(chunk.stream)
            _ = target.write(chunk.data)
            target.flush()
        return entry.exit_code


__all__ = ["Replayer"]
