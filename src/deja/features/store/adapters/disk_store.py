"""Where: src/deja/features/store/adapters/disk_store.py
What: Persist cache entries as JSON documents under the cache root.
Why: Entries must survive across processes and never be observed half-written.
"""

from __future__ import annotations

import base64
import binascii
import json
import os
import tempfile
from pathlib import Path
from typing import Any, final

from deja.config.settings import ENTRY_FORMAT_VERSION
from deja.features.scope import CacheKey
from deja.platform.filesystem import ensure_directory
from deja.platform.logging import logger
from deja.shared.errors import NotFound, Unreadable, Unwritable

from ..domain.models import CacheEntry, CacheStoreConfig, OutputChunk, Stream


def encode_entry(entry: CacheEntry) -> bytes:
    """Serialize ``entry``; chunk bytes are base64 encoded."""

    document: dict[str, Any] = {
        "format": ENTRY_FORMAT_VERSION,
        "created_at": entry.created_at,
        "expires_at": entry.expires_at,
        "exit_code": entry.exit_code,
        "output": [
            {"stream": chunk.stream.value, "data": base64.b64encode(chunk.data).decode("ascii")}
            for chunk in entry.output
        ],
    }
    return json.dumps(document, separators=(",", ":")).encode("utf-8")


def decode_entry(raw: bytes) -> CacheEntry:
    """Rebuild a ``CacheEntry`` from ``encode_entry`` output.

    Raises:
        ValueError: If the document is malformed or from another format version.
    """
    try:
        document = json.loads(raw)
        if document["format"] != ENTRY_FORMAT_VERSION:
            raise ValueError(f"unsupported entry format {document['format']!r}")

        expires_at = document["expires_at"]
        exit_code = document["exit_code"]
        if not isinstance(exit_code, int) or isinstance(exit_code, bool):
            raise ValueError("exit_code must be an integer")

        output = tuple(
            OutputChunk(
                stream=Stream(item["stream"]),
                data=base64.b64decode(item["data"], validate=True),
            )
            for item in document["output"]
        )
        return CacheEntry(
            created_at=float(document["created_at"]),
            expires_at=None if expires_at is None else float(expires_at),
            exit_code=exit_code,
            output=output,
        )
    except (KeyError, TypeError, binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"malformed cache entry: {exc}") from exc


@final
class DiskCacheStore:
    """File-per-entry store under ``config.root``.

    Entries live at ``<root>/<first two hex digits>/<hex key>.json``. Writes
    go to a temporary file in the same directory followed by ``os.replace``,
    so readers see either the old entry or the new one. Concurrent writers of
    the same key are not serialized: the last rename wins.
    """

    def __init__(self, config: CacheStoreConfig) -> None:
        self.config: CacheStoreConfig = config

    def entry_path(self, key: CacheKey) -> Path:
        return self.config.root / key.hex[:2] / f"{key.hex}.json"

    def write(self, key: CacheKey, entry: CacheEntry) -> None:
        root = self.config.root
        path = self.entry_path(key)
        logger.debug("Cache write: %s -> %s", key.hex, path)

        try:
            _ = ensure_directory(root, mode=self.config.directory_mode)
            _ = ensure_directory(path.parent, mode=self.config.directory_mode)
        except OSError as exc:
            raise Unwritable(root) from exc

        payload = encode_entry(entry)
        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{key.hex}.", suffix=".tmp", dir=path.parent
            )
        except OSError as exc:
            raise Unwritable(root) from exc

        try:
            with os.fdopen(fd, "wb") as handle:
                os.fchmod(handle.fileno(), self.config.file_mode)
                _ = handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, path)
        except OSError as exc:
            try:
                os.unlink(temp_name)
            except FileNotFoundError:
                pass
            raise Unwritable(root) from exc

    def read(self, key: CacheKey) -> CacheEntry | None:
        path = self.entry_path(key)
        logger.debug("Looking for cache entry at %s", path)

        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise Unreadable(path) from exc

        try:
            return decode_entry(raw)
        except ValueError as exc:
            logger.debug("Cache entry %s is corrupt: %s", path, exc)
            raise Unreadable(path) from exc

    def remove(self, key: CacheKey) -> None:
        path = self.entry_path(key)
        logger.debug("Cache remove: %s -> %s", key.hex, path)

        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFound.entry(key.hex) from exc
        except OSError as exc:
            raise Unwritable(path) from exc


__all__ = ["DiskCacheStore", "decode_entry", "encode_entry"]
