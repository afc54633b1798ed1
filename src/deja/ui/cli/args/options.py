"""Command line argument options."""

from dataclasses import dataclass
from pathlib import Path
from typing import final

from deja.application.services.session_service import Subcommand
from deja.features.execution import ExitPolicy


@final
@dataclass(slots=True)
class CacheArgs:
    """Fully resolved arguments shared by every cache subcommand.

    Values already merge CLI flags, environment variables and the config file.
    """

    command: Subcommand
    program: str
    arguments: list[str]
    watch_paths: list[Path]
    watch_scopes: list[str]
    watch_env: list[str]
    exclude_pwd: bool
    exclude_user: bool
    cache_for: float | None
    look_back: float | None
    exit_policy: ExitPolicy
    cache_root: Path
    share_cache: bool
    cache_miss_exit_code: int
    debug: bool


__all__ = ["CacheArgs"]
