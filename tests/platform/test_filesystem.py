"""Tests for filesystem helpers."""

import os
import stat
from pathlib import Path

import pytest

from deja.platform.filesystem import ensure_directory


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


def test_creates_directory_with_exact_mode(tmp_path: Path) -> None:
    target = tmp_path / "new"
    previous = os.umask(0o077)
    try:
        assert ensure_directory(target, mode=0o770) is True
    finally:
        _ = os.umask(previous)

    assert _mode(target) == 0o770


def test_existing_directory_is_left_alone(tmp_path: Path) -> None:
    target = tmp_path / "existing"
    target.mkdir()
    target.chmod(0o755)

    assert ensure_directory(target, mode=0o700) is False
    assert _mode(target) == 0o755


def test_missing_parent_requires_parents_flag(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"

    with pytest.raises(FileNotFoundError):
        _ = ensure_directory(target)

    assert ensure_directory(target, parents=True) is True
    assert _mode(tmp_path / "a") == 0o700
    assert _mode(target) == 0o700


def test_file_in_the_way(tmp_path: Path) -> None:
    target = tmp_path / "file"
    _ = target.write_text("x")

    with pytest.raises(NotADirectoryError):
        _ = ensure_directory(target)
