"""Summary: Derive the cache key from an invocation and its resolved watches.
Why: The key must be reproducible across runs and sensitive to every input and its order.
"""

from __future__ import annotations

import hashlib

from deja.config.settings import ENTRY_FORMAT_VERSION
from deja.platform.logging import logger

from ..domain.models import CacheKey, Invocation, ResolvedWatches, WatchSpec

_ABSENT: bytes = b"\x00"
_PRESENT: bytes = b"\x01"


def _encode(value: str) -> bytes:
    # argv and environ carry undecodable bytes as surrogates
    return value.encode("utf-8", "surrogateescape")


class _Digest:
    """Length-prefixed, tagged framing over a SHA-256 stream."""

    def __init__(self) -> None:
        self._hash = hashlib.sha256()

    def field(self, tag: str, value: bytes | None) -> None:
        self._hash.update(_encode(tag))
        if value is None:
            self._hash.update(_ABSENT)
            return
        self._hash.update(_PRESENT)
        self._hash.update(len(value).to_bytes(8, "big"))
        self._hash.update(value)

    def count(self, tag: str, size: int) -> None:
        self.field(tag, size.to_bytes(8, "big"))

    def finish(self) -> CacheKey:
        return CacheKey(digest=self._hash.digest())


class KeyBuilder:
    """Combine invocation identity and watch values into a ``CacheKey``."""

    def __init__(self, *, format_version: str = ENTRY_FORMAT_VERSION) -> None:
        self._format_version: str = format_version

    def build(
        self,
        invocation: Invocation,
        spec: WatchSpec,
        resolved: ResolvedWatches,
    ) -> CacheKey:
        """Return the key for ``invocation`` under ``spec``.

        Excluded pwd/user, unset variables and empty values are framed
        distinctly, so none of them can collide with each other or with a
        concrete value.
        """
        digest = _Digest()
        digest.field("format", _encode(self._format_version))
        digest.field("program", _encode(invocation.program))

        digest.count("args", len(invocation.args))
        for arg in invocation.args:
            digest.field("arg", _encode(arg))

        digest.field("pwd", None if spec.exclude_pwd else bytes(invocation.cwd))
        digest.field("user", None if spec.exclude_user else _encode(invocation.user))

        digest.count("paths", len(resolved.paths))
        for path in resolved.paths:
            digest.field("path", path.digest)

        digest.count("scopes", len(resolved.scopes))
        for scope in resolved.scopes:
            digest.field("scope", _encode(scope))

        digest.count("env", len(resolved.env))
        for entry in resolved.env:
            digest.field("env.name", _encode(entry.name))
            digest.field("env.value", None if entry.value is None else _encode(entry.value))

        key = digest.finish()
        logger.debug("Derived cache key %s for %s", key.hex, invocation.argv)
        return key


__all__ = ["KeyBuilder"]
