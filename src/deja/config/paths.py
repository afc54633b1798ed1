"""Shared path utilities for configuration and cache locations.

This module centralizes how the application discovers locations for
config, cache and log files.

Policy (XDG by default):
- Config: ``$XDG_CONFIG_HOME/deja/config.toml`` unless overridden by
  ``DEJA_CONFIG``.
- Cache: ``$XDG_CACHE_HOME/deja`` unless overridden by ``DEJA_CACHE``.
- Logs: no file logging unless ``DEJA_LOG_FILE`` or the config file names one.
"""

from __future__ import annotations

import os
from pathlib import Path
from collections.abc import Mapping
from typing import Callable, Final


ENV_CONFIG_FILE: Final[str] = "DEJA_CONFIG"
ENV_CACHE_DIR: Final[str] = "DEJA_CACHE"
ENV_LOG_FILE: Final[str] = "DEJA_LOG_FILE"


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Resolve a configuration path honoring explicit and environment overrides."""

    if explicit_path is not None:
        return Path(explicit_path).expanduser().resolve()

    mapping = env if env is not None else os.environ
    if env_var:
        candidate = mapping.get(env_var) or ""
        candidate = candidate.strip()
        if candidate:
            return Path(candidate).expanduser().resolve()

    default_path = default_factory()
    return default_path.expanduser().resolve()


def _xdg_home(variable: str, fallback: str, env: Mapping[str, str] | None = None) -> Path:
    """Return an XDG base directory, falling back to ``~/<fallback>``.

    Relative values are ignored as the XDG spec requires absolute paths.
    """
    mapping = env if env is not None else os.environ
    raw = (mapping.get(variable) or "").strip()
    if raw and Path(raw).is_absolute():
        return Path(raw)
    return Path.home() / fallback


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the path to the optional TOML config file."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=ENV_CONFIG_FILE,
        default_factory=lambda: _xdg_home("XDG_CONFIG_HOME", ".config", env) / "deja" / "config.toml",
    )


def default_cache_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the platform cache directory used when no root is configured."""

    return (_xdg_home("XDG_CACHE_HOME", ".cache", env) / "deja").expanduser().resolve()


def default_log_file(env: Mapping[str, str] | None = None) -> Path | None:
    """Get the log file requested through the environment, if any."""

    mapping = env if env is not None else os.environ
    raw = (mapping.get(ENV_LOG_FILE) or "").strip()
    if not raw:
        return None
    return Path(raw).expanduser().resolve()


__all__ = [
    "ENV_CACHE_DIR",
    "ENV_CONFIG_FILE",
    "ENV_LOG_FILE",
    "default_cache_dir",
    "default_config_path",
    "default_log_file",
    "resolve_overridable_path",
]
