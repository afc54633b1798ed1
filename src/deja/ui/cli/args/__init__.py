"""Command line argument handling package."""

from deja.ui.cli.args.parser import ArgumentParser
from deja.ui.cli.args.options import CacheArgs

__all__ = ["ArgumentParser", "CacheArgs"]
