"""Where: src/deja/features/scope/domain/models.py
What: Value objects describing what a cache key is derived from.
Why: Keep the key a pure function of explicit inputs, never ambient state.
"""

from __future__ import annotations

import getpass
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType


@dataclass(slots=True, frozen=True)
class Invocation:
    """Identity of a single command invocation."""

    program: str
    args: tuple[str, ...]
    cwd: Path
    user: str
    environ: Mapping[str, str] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def capture(
        cls,
        program: str,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        user: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Invocation":
        """Snapshot the current process context around ``program``."""

        snapshot = dict(environ if environ is not None else os.environ)
        return cls(
            program=program,
            args=tuple(args),
            cwd=cwd if cwd is not None else Path.cwd(),
            user=user if user is not None else getpass.getuser(),
            environ=MappingProxyType(snapshot),
        )

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


@dataclass(slots=True, frozen=True)
class WatchSpec:
    """Extra conditions folded into the key, in declaration order."""

    exclude_pwd: bool = False
    exclude_user: bool = False
    watch_paths: tuple[Path, ...] = ()
    watch_scopes: tuple[str, ...] = ()
    watch_env: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class ResolvedPath:
    """A watch path together with the digest of its current content."""

    declared: Path
    resolved: Path
    digest: bytes

    @property
    def hex(self) -> str:
        return self.digest.hex()


@dataclass(slots=True, frozen=True)
class ResolvedEnv:
    """A watched variable; ``value`` is ``None`` when the variable is unset."""

    name: str
    value: str | None

    @property
    def is_set(self) -> bool:
        return self.value is not None


@dataclass(slots=True, frozen=True)
class ResolvedWatches:
    """Current values of every watch declaration, in declaration order."""

    paths: tuple[ResolvedPath, ...] = ()
    scopes: tuple[str, ...] = ()
    env: tuple[ResolvedEnv, ...] = ()


@dataclass(slots=True, frozen=True)
class CacheKey:
    """Fixed-length digest identifying one cache entry."""

    digest: bytes

    @property
    def hex(self) -> str:
        return self.digest.hex()

    def __str__(self) -> str:
        return self.hex


__all__ = [
    "CacheKey",
    "Invocation",
    "ResolvedEnv",
    "ResolvedPath",
    "ResolvedWatches",
    "WatchSpec",
]
