"""Watch resolution.

Where: src/deja/features/scope/usecases/watch_resolver.py
What: Compute the current value of every watch-path, watch-scope and watch-env.
Why: Key derivation needs concrete, order-independent content digests.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from deja.config.settings import FILE_HASH_CHUNK_SIZE
from deja.platform.logging import logger
from deja.shared.errors import NotFound, Unreadable

from ..domain.models import Invocation, ResolvedEnv, ResolvedPath, ResolvedWatches, WatchSpec


def calculate_file_hash(file_path: Path, chunk_size: int = FILE_HASH_CHUNK_SIZE) -> bytes:
    """Return the SHA-256 digest of a file's raw bytes."""

    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as handle:
        for byte_block in iter(lambda: handle.read(chunk_size), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.digest()


def calculate_directory_hash(directory: Path, chunk_size: int = FILE_HASH_CHUNK_SIZE) -> bytes:
    """Return a digest over every file below ``directory``.

    Entries are sorted by their POSIX relative path before hashing, so the
    result never depends on the order the filesystem enumerates them in.

    Symlinks to files contribute the content they point at. Symlinks to
    directories are not followed: like dangling symlinks they contribute
    their link target only, so retargeting such a link changes the digest
    but editing files inside the linked directory does not.
    """
    entries: list[tuple[str, Path]] = []
    for root, dirnames, filenames in os.walk(directory):
        root_path = Path(root)
        linked_dirs = [name for name in dirnames if (root_path / name).is_symlink()]
        for name in (*filenames, *linked_dirs):
            candidate = root_path / name
            entries.append((candidate.relative_to(directory).as_posix(), candidate))

    entries.sort(key=lambda item: item[0])

    combined = hashlib.sha256(b"dir\x00")
    for relative, candidate in entries:
        if candidate.is_file():
            digest = calculate_file_hash(candidate, chunk_size)
        else:
            digest = hashlib.sha256(b"link\x00" + os.fsencode(os.readlink(candidate))).digest()
        encoded = relative.encode("utf-8", "surrogateescape")
        combined.update(len(encoded).to_bytes(8, "big"))
        combined.update(encoded)
        combined.update(digest)
    return combined.digest()


class WatchResolver:
    """Resolve watch declarations against an invocation's context."""

    def __init__(self, *, chunk_size: int = FILE_HASH_CHUNK_SIZE) -> None:
        self._chunk_size: int = chunk_size

    def resolve(self, invocation: Invocation, spec: WatchSpec) -> ResolvedWatches:
        """Resolve every declaration in ``spec``.

        Raises:
            NotFound: If a watch path does not exist.
            Unreadable: If a watch path exists but cannot be read.
        """
        return ResolvedWatches(
            paths=tuple(self.resolve_path(path, cwd=invocation.cwd) for path in spec.watch_paths),
            scopes=tuple(spec.watch_scopes),
            env=tuple(
                ResolvedEnv(name=name, value=invocation.environ.get(name))
                for name in spec.watch_env
            ),
        )

    def resolve_path(self, declared: Path, *, cwd: Path) -> ResolvedPath:
        """Hash a single watch path, relative paths being taken from ``cwd``."""

        candidate = declared if declared.is_absolute() else cwd / declared
        try:
            resolved = candidate.resolve(strict=True)
        except FileNotFoundError as exc:
            raise NotFound.watch_path(declared) from exc
        except OSError as exc:
            raise Unreadable(declared, what="watch path") from exc

        try:
            if resolved.is_dir():
                digest = calculate_directory_hash(resolved, self._chunk_size)
            else:
                digest = calculate_file_hash(resolved, self._chunk_size)
        except FileNotFoundError as exc:
            raise NotFound.watch_path(declared) from exc
        except OSError as exc:
            raise Unreadable(declared, what="watch path") from exc

        logger.debug("Watch path %s resolved to %s (%s)", declared, resolved, digest.hex())
        return ResolvedPath(declared=declared, resolved=resolved, digest=digest)


__all__ = ["WatchResolver", "calculate_directory_hash", "calculate_file_hash"]
