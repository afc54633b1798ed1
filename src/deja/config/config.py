"""Configuration management for deja."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from deja.config.paths import default_config_path
from deja.platform.logging import logger
from deja.shared.errors import ParseError


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion.

    Args:
        default: Default value for the field.

    Returns:
        Field with proper metadata for path handling.
    """
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Optional user configuration read from ``config.toml``."""

    # Root directory for cache entries
    cache_dir: Path | None = _path_field()

    # Create entries readable and writable by the owning group
    share_cache: bool = False

    # Log file path
    log_file: Path | None = _path_field()

    # Exit code policy applied when recording, e.g. "0,10-12"
    record_exit_codes: str | None = None

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects using field metadata.

        Only fields flagged with ``metadata={"path": True}`` by
        ``_path_field`` are converted; empty strings become ``None``.
        """
        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value).expanduser() if value.strip() else None)

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Config":
        """Load configuration from file.

        Args:
            config_file: Explicit file to read. Defaults to ``default_config_path()``.

        Returns:
            Config: Loaded configuration, or defaults when the file is absent.

        Raises:
            ParseError: If the file is not valid TOML or a value has the wrong type.
        """
        target = config_file or default_config_path()

        if not target.is_file():
            logger.debug("No configuration file at %s, using defaults", target)
            return cls()

        try:
            with open(target, "rb") as f:
                config_dict = tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError) as e:
            raise ParseError(f"invalid configuration file {target}: {e}") from e

        known = {f.name for f in fields(cls)}
        for key in sorted(set(config_dict) - known):
            logger.warning("Ignoring unknown configuration key '%s' in %s", key, target)

        values = {key: value for key, value in config_dict.items() if key in known}
        if "share_cache" in values and not isinstance(values["share_cache"], bool):
            raise ParseError(f"invalid configuration file {target}: share_cache must be a boolean")
        for key in ("cache_dir", "log_file", "record_exit_codes"):
            if key in values and not isinstance(values[key], str):
                raise ParseError(f"invalid configuration file {target}: {key} must be a string")

        logger.debug("Configuration loaded from %s", target)
        return cls(**values)


__all__ = ["Config"]
