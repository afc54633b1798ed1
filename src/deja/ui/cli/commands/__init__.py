"""Command execution package for CLI."""

from deja.ui.cli.commands.cache_command import CacheCommand

__all__ = ["CacheCommand"]
