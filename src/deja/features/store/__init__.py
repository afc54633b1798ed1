# Path: `src/deja/features/store/__init__.py`
# Summary: Export entry models, freshness evaluation and the disk store.
# Why: Provide a stable import surface for the application layer and tests.

from .adapters.disk_store import DiskCacheStore, decode_entry, encode_entry
from .domain.freshness import Freshness, evaluate, is_fresh
from .domain.models import CacheEntry, CacheStoreConfig, OutputChunk, Stream
from .usecases.ports import CacheStore

__all__ = [
    "CacheEntry",
    "CacheStore",
    "CacheStoreConfig",
    "DiskCacheStore",
    "Freshness",
    "OutputChunk",
    "Stream",
    "decode_entry",
    "encode_entry",
    "evaluate",
    "is_fresh",
]
