"""Ports for the entry store."""

from __future__ import annotations

from typing import Protocol

from deja.features.scope import CacheKey

from ..domain.models import CacheEntry


class CacheStore(Protocol):
    """Keyed map from ``CacheKey`` to ``CacheEntry`` with atomic replace."""

    def write(self, key: CacheKey, entry: CacheEntry) -> None:
        """Store ``entry`` under ``key``, replacing any previous entry wholesale."""

        ...

    def read(self, key: CacheKey) -> CacheEntry | None:
        """Return the stored entry, or ``None`` on a genuine miss."""

        ...

    def remove(self, key: CacheKey) -> None:
        """Delete the entry for ``key`` regardless of its freshness."""

        ...
