"""Command line interface package."""

from deja.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
