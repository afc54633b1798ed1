"""Application service deciding, per subcommand, whether to replay or run."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import final

from deja.config.settings import DEFAULT_CACHE_MISS_EXIT_CODE
from deja.features.execution import DEFAULT_EXIT_POLICY, ExecutionCapture, ExitPolicy, Replayer
from deja.features.scope import (
    CacheKey,
    Invocation,
    KeyBuilder,
    ResolvedWatches,
    WatchResolver,
    WatchSpec,
)
from deja.features.store import CacheEntry, CacheStore, Freshness, evaluate
from deja.platform.logging import logger


class Subcommand(StrEnum):
    """Closed set of actions the controller knows how to perform."""

    RUN = "run"
    TEST = "test"
    READ = "read"
    FORCE = "force"
    REMOVE = "remove"
    EXPLAIN = "explain"
    HASH = "hash"


@dataclass(slots=True, frozen=True)
class SessionRequest:
    """Everything one invocation of the tool asks for."""

    subcommand: Subcommand
    invocation: Invocation
    watch: WatchSpec = field(default_factory=WatchSpec)
    cache_for: float | None = None
    look_back: float | None = None
    exit_policy: ExitPolicy = DEFAULT_EXIT_POLICY
    cache_miss_exit_code: int = DEFAULT_CACHE_MISS_EXIT_CODE


@dataclass(slots=True)
class SessionContext:
    """Collaborators and clock handed to the controller explicitly."""

    store: CacheStore
    clock: Callable[[], float] = time.time
    capture: ExecutionCapture = field(default_factory=ExecutionCapture)
    replayer: Replayer = field(default_factory=Replayer)
    resolver: WatchResolver = field(default_factory=WatchResolver)
    key_builder: KeyBuilder = field(default_factory=KeyBuilder)


@dataclass(slots=True, frozen=True)
class Explanation:
    """Key constituents and lookup outcome reported by ``explain``."""

    invocation: Invocation
    watch: WatchSpec
    resolved: ResolvedWatches
    key: CacheKey
    freshness: Freshness
    entry: CacheEntry | None
    now: float
    look_back: float | None


@dataclass(slots=True, frozen=True)
class SessionOutcome:
    """Exit code to terminate with, plus data the UI may render."""

    exit_code: int
    key: CacheKey
    explanation: Explanation | None = None


@final
class SessionController:
    """Orchestrate watch resolution, lookup, replay and recording."""

    def __init__(self, context: SessionContext) -> None:
        self._context: SessionContext = context

    def execute(self, request: SessionRequest) -> SessionOutcome:
        """Perform ``request.subcommand`` and return the exit code to use.

        Watch resolution runs first, so a missing watch path aborts before
        the store is touched or anything is executed.
        """
        context = self._context
        resolved = context.resolver.resolve(request.invocation, request.watch)
        key = context.key_builder.build(request.invocation, request.watch, resolved)
        subcommand = request.subcommand

        if subcommand is Subcommand.HASH:
            return SessionOutcome(exit_code=0, key=key)

        if subcommand is Subcommand.FORCE:
            return SessionOutcome(exit_code=self._record(request, key), key=key)

        if subcommand is Subcommand.REMOVE:
            context.store.remove(key)
            logger.info("Removed %s", key.hex, extra={"cache_event": "cache.remove", "cache_key": key.hex})
            return SessionOutcome(exit_code=0, key=key)

        entry = context.store.read(key)
        now = context.clock()
        freshness = evaluate(entry, now, request.look_back)

        if subcommand is Subcommand.EXPLAIN:
            explanation = Explanation(
                invocation=request.invocation,
                watch=request.watch,
                resolved=resolved,
                key=key,
                freshness=freshness,
                entry=entry,
                now=now,
                look_back=request.look_back,
            )
            return SessionOutcome(exit_code=0, key=key, explanation=explanation)

        if subcommand is Subcommand.TEST:
            return SessionOutcome(exit_code=0 if freshness is Freshness.FRESH else 1, key=key)

        if freshness is Freshness.FRESH:
            assert entry is not None
            logger.info(
                "Replaying %s",
                key.hex,
                extra={"cache_event": "cache.hit", "cache_key": key.hex, "exit_code": entry.exit_code},
            )
            return SessionOutcome(exit_code=context.replayer.replay(entry), key=key)

        logger.info(
            "Cache miss for %s (%s)",
            key.hex,
            freshness.value,
            extra={"cache_event": "cache.miss", "cache_key": key.hex, "reason": freshness.value},
        )
        if subcommand is Subcommand.READ:
            return SessionOutcome(exit_code=request.cache_miss_exit_code, key=key)

        return SessionOutcome(exit_code=self._record(request, key), key=key)

    def _record(self, request: SessionRequest, key: CacheKey) -> int:
        """Run the command and store the result when the exit policy accepts it."""

        context = self._context
        result = context.capture.run(request.invocation)

        if result.interrupted:
            logger.info(
                "Not recording %s",
                key.hex,
                extra={
                    "cache_event": "cache.skip",
                    "cache_key": key.hex,
                    "exit_code": result.exit_code,
                    "reason": "terminated by signal",
                },
            )
            return result.exit_code

        if not request.exit_policy.match(result.exit_code):
            logger.info(
                "Not recording %s",
                key.hex,
                extra={
                    "cache_event": "cache.skip",
                    "cache_key": key.hex,
                    "exit_code": result.exit_code,
                    "reason": f"exit code not in {request.exit_policy}",
                },
            )
            return result.exit_code

        created_at = context.clock()
        entry = CacheEntry(
            created_at=created_at,
            expires_at=None if request.cache_for is None else created_at + request.cache_for,
            exit_code=result.exit_code,
            output=result.output,
        )
        context.store.write(key, entry)
        logger.info(
            "Recorded %s",
            key.hex,
            extra={
                "cache_event": "cache.record",
                "cache_key": key.hex,
                "exit_code": result.exit_code,
                "chunk_count": len(result.output),
            },
        )
        return result.exit_code


__all__ = [
    "Explanation",
    "SessionContext",
    "SessionController",
    "SessionOutcome",
    "SessionRequest",
    "Subcommand",
]
