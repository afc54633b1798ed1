"""Test doubles shared across the deja test-suite."""

from __future__ import annotations

from dataclasses import dataclass, field

from deja.features.execution import CaptureResult
from deja.features.scope import Invocation
from deja.features.store import OutputChunk, Stream


@dataclass
class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    now: float = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeCapture:
    """Stand-in for ``ExecutionCapture`` returning scripted results in turn.

    The last result is repeated once the script runs out.
    """

    results: list[CaptureResult] = field(default_factory=list)
    calls: list[Invocation] = field(default_factory=list)

    def run(self, invocation: Invocation) -> CaptureResult:
        self.calls.append(invocation)
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


def capture_result(
    stdout: bytes = b"",
    stderr: bytes = b"",
    exit_code: int = 0,
    *,
    interrupted: bool = False,
) -> CaptureResult:
    """Create a ``CaptureResult`` with one chunk per non-empty stream."""

    chunks: list[OutputChunk] = []
    if stdout:
        chunks.append(OutputChunk(Stream.STDOUT, stdout))
    if stderr:
        chunks.append(OutputChunk(Stream.STDERR, stderr))
    return CaptureResult(exit_code=exit_code, output=tuple(chunks), interrupted=interrupted)
