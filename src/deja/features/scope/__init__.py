# Path: `src/deja/features/scope/__init__.py`
# Summary: Export key derivation models and use cases.
# Why: Provide a stable import surface for the application layer and tests.

from .domain.models import (
    CacheKey,
    Invocation,
    ResolvedEnv,
    ResolvedPath,
    ResolvedWatches,
    WatchSpec,
)
from .usecases.key_builder import KeyBuilder
from .usecases.watch_resolver import WatchResolver, calculate_directory_hash, calculate_file_hash

__all__ = [
    "CacheKey",
    "Invocation",
    "KeyBuilder",
    "ResolvedEnv",
    "ResolvedPath",
    "ResolvedWatches",
    "WatchResolver",
    "WatchSpec",
    "calculate_directory_hash",
    "calculate_file_hash",
]
