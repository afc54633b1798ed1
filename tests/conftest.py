"""Shared pytest fixtures for the deja test-suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from deja.features.scope import Invocation
from support import FakeClock


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Keep the user's configuration, cache and DEJA_* variables out of every test."""

    home = tmp_path_factory.mktemp("home")
    for name in list(os.environ):
        if name.startswith("DEJA_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    return home


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """A cache root whose parent exists but which is not created yet."""

    return tmp_path / "cache"


@pytest.fixture
def python_invocation(tmp_path: Path) -> Callable[..., Invocation]:
    """Build invocations running ``sys.executable -c <script>`` in ``tmp_path``."""

    def _build(script: str, *, cwd: Path | None = None, user: str = "tester") -> Invocation:
        return Invocation.capture(
            sys.executable,
            ["-c", script],
            cwd=cwd or tmp_path,
            user=user,
        )

    return _build
