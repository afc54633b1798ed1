"""Where: src/deja/features/execution/usecases/capture.py
What: Run the target command, echo its output live and record it in arrival order.
Why: A recorded entry must replay exactly what the user saw on the first run.
"""

from __future__ import annotations

import queue
import signal
import subprocess
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import IO, BinaryIO, final

from deja.config.settings import CAPTURE_READ_SIZE
from deja.features.scope import Invocation
from deja.features.store import OutputChunk, Stream
from deja.platform.logging import logger
from deja.shared.errors import CommandNotFound, DejaError, PermissionDenied

from .streams import terminal_stream


@dataclass(slots=True, frozen=True)
class CaptureResult:
    """Exit status and tagged output of one completed run.

    ``interrupted`` is set when the child was terminated by a signal; such
    results are never recorded.
    """

    exit_code: int
    output: tuple[OutputChunk, ...]
    interrupted: bool = False


# (stream, data); ``None`` data marks the end of that stream
_Message = tuple[Stream, bytes | None]


@final
class ExecutionCapture:
    """Spawn commands and capture both output streams concurrently.

    One reader thread per child pipe pushes chunks into a single queue; the
    calling thread is the only consumer, so chunks are forwarded and appended
    in the order the capturing process observed them.
    """

    def __init__(
        self,
        *,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
        read_size: int = CAPTURE_READ_SIZE,
    ) -> None:
        self._stdout: BinaryIO | None = stdout
        self._stderr: BinaryIO | None = stderr
        self._read_size: int = read_size

    def run(self, invocation: Invocation) -> CaptureResult:
        """Execute ``invocation`` to completion.

        If forwarding output fails, for instance because stdout was closed,
        the child is terminated before the error propagates.

        Raises:
            CommandNotFound: If the program cannot be resolved.
            PermissionDenied: If the program is not executable by the caller.
        """
        process = self._spawn(invocation)
        assert process.stdout is not None and process.stderr is not None

        sink: queue.Queue[_Message] = queue.Queue()
        chunks: list[OutputChunk] = []

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="deja-capture") as executor:
            readers: list[Future[None]] = [
                executor.submit(self._pump, Stream.STDOUT, process.stdout, sink),
                executor.submit(self._pump, Stream.STDERR, process.stderr, sink),
            ]
            try:
                self._drain(sink, chunks, expected_streams=len(readers))
                returncode = process.wait()
            except BaseException as exc:
                # readers only stop once the child closes its pipes
                if process.poll() is None:
                    if isinstance(exc, KeyboardInterrupt):
                        process.send_signal(signal.SIGINT)
                    else:
                        process.terminate()
                    _ = process.wait()
                logger.debug(
                    "Capture of %s aborted (%s), nothing recorded",
                    invocation.program,
                    type(exc).__name__,
                )
                raise
            for reader in readers:
                reader.result()

        interrupted = returncode < 0
        exit_code = 128 - returncode if interrupted else returncode
        logger.debug(
            "Captured %s: exit=%d chunks=%d interrupted=%s",
            invocation.program,
            exit_code,
            len(chunks),
            interrupted,
        )
        return CaptureResult(exit_code=exit_code, output=tuple(chunks), interrupted=interrupted)

    @staticmethod
    def _spawn(invocation: Invocation) -> subprocess.Popen[bytes]:
        try:
            return subprocess.Popen(
                invocation.argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=invocation.cwd,
                env=dict(invocation.environ),
            )
        except FileNotFoundError as exc:
            raise CommandNotFound(invocation.program) from exc
        except PermissionError as exc:
            raise PermissionDenied(invocation.program) from exc
        except OSError as exc:
            raise DejaError(f"error running command: {invocation.program}") from exc

    def _pump(self, stream: Stream, pipe: IO[bytes], sink: queue.Queue[_Message]) -> None:
        """Forward everything readable from ``pipe`` into ``sink``."""

        try:
            while True:
                data = pipe.read1(self._read_size)  # pyright: ignore[reportAttributeAccessIssue]
                if not data:
                    break
                sink.put((stream, data))
        finally:
            pipe.close()
            sink.put((stream, None))

    def _drain(
        self,
        sink: queue.Queue[_Message],
        chunks: list[OutputChunk],
        *,
        expected_streams: int,
    ) -> None:
        """Echo and record chunks until every reader signalled end of stream."""

        finished = 0
        while finished < expected_streams:
            stream, data = sink.get()
            if data is None:
                finished += 1
                continue
            target = self._target(stream)
            _ = target.write(data)
            target.flush()
            chunks.append(OutputChunk(stream=stream, data=data))

    def _target(self, stream: Stream) -> BinaryIO:
        explicit = self._stdout if stream is Stream.STDOUT else self._stderr
        return explicit if explicit is not None else terminal_stream(stream)


__all__ = ["CaptureResult", "ExecutionCapture"]
