"""Read-time freshness evaluation for stored entries."""

from __future__ import annotations

from enum import StrEnum

from .models import CacheEntry


class Freshness(StrEnum):
    """Outcome of looking an entry up at read time."""

    FRESH = "fresh"
    STALE = "stale"  # older than the caller's look-back
    EXPIRED = "expired"  # past the expiry fixed at write time
    MISSING = "missing"


def evaluate(entry: CacheEntry | None, now: float, look_back: float | None = None) -> Freshness:
    """Classify ``entry`` at time ``now``.

    Expiry is checked before look-back, so an entry that is both expired and
    too old reports ``EXPIRED``.
    """
    if entry is None:
        return Freshness.MISSING
    if entry.expires_at is not None and now >= entry.expires_at:
        return Freshness.EXPIRED
    if look_back is not None and now - entry.created_at > look_back:
        return Freshness.STALE
    return Freshness.FRESH


def is_fresh(entry: CacheEntry, now: float, look_back: float | None = None) -> bool:
    """Return whether ``entry`` may be replayed at ``now``."""

    return evaluate(entry, now, look_back) is Freshness.FRESH


__all__ = ["Freshness", "evaluate", "is_fresh"]
