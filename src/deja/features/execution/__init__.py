# Path: `src/deja/features/execution/__init__.py`
# Summary: Export exit policies, command capture and replay.
# Why: Provide a stable import surface for the application layer and tests.

from .domain.exit_policy import DEFAULT_EXIT_POLICY, ExitCodeRange, ExitPolicy
from .usecases.capture import CaptureResult, ExecutionCapture
from .usecases.replay import Replayer

__all__ = [
    "DEFAULT_EXIT_POLICY",
    "CaptureResult",
    "ExecutionCapture",
    "ExitCodeRange",
    "ExitPolicy",
    "Replayer",
]
