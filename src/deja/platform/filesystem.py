"""Filesystem helpers reused across multiple layers."""

from __future__ import annotations

import os
from pathlib import Path


def ensure_directory(directory: Path, *, mode: int = 0o700, parents: bool = False) -> bool:
    """Ensure ``directory`` exists as a folder.

    Newly created directories get exactly ``mode`` regardless of the process
    umask; directories that already exist keep their permissions.

    Args:
        directory: Folder to create.
        mode: Permission bits applied to directories created by this call.
        parents: Also create missing ancestors (with the same mode).

    Returns:
        bool: ``True`` when the directory was created by this call.

    Raises:
        NotADirectoryError: If the path exists but is not a directory.
        OSError: If creation fails (missing parent, permission denied, ...).
    """
    if directory.exists():
        if not directory.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {directory}")
        return False

    if parents and not directory.parent.exists():
        _ = ensure_directory(directory.parent, mode=mode, parents=True)

    try:
        directory.mkdir(mode=mode)
    except FileExistsError:
        # Lost a race with another process creating the same folder.
        if not directory.is_dir():
            raise
        return False
    os.chmod(directory, mode)
    return True


__all__ = ["ensure_directory"]
