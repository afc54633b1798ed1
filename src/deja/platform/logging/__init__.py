"""Logging facade exports.

Where: platform/logging/__init__.py
What: Re-export configured logger, setup helper, and the Rich cache event handler.
Why: Provide a single canonical import path for every layer.
"""

from __future__ import annotations

from .config import LOGGER_NAME, logger, setup_logger
from .handlers import CacheEventRichHandler

__all__ = [
    "CacheEventRichHandler",
    "LOGGER_NAME",
    "logger",
    "setup_logger",
]
