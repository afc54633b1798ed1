"""Rich console handler for deja diagnostics.

Where: platform/logging/handlers.py
What: Render plain log records and structured cache events on stderr.
Why: Keep diagnostics readable without ever touching the replayed stdout.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable, Group
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text
from rich.traceback import Traceback


class CacheEventRichHandler(RichHandler):
    """Rich handler that styles records tagged with a ``cache_event`` extra."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "cache.hit": ("↺", "green"),
        "cache.miss": ("∅", "yellow"),
        "cache.record": ("●", "cyan"),
        "cache.skip": ("○", "magenta"),
        "cache.remove": ("✕", "red"),
    }
    _EVENT_LABELS: ClassVar[dict[str, str]] = {
        "cache.hit": "Replaying",
        "cache.miss": "Cache miss",
        "cache.record": "Recorded",
        "cache.skip": "Not recording",
        "cache.remove": "Removed",
    }
    _KEY_PREFIX_LENGTH: ClassVar[int] = 12

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize the handler with compact, markup-free settings.

        Args:
            *args: Positional arguments to pass to RichHandler.
            **kwargs: Keyword arguments to pass to RichHandler.
        """
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    def _render_cache_event(self, record: logging.LogRecord) -> Text | None:
        """Render a structured cache event, or ``None`` for ordinary records."""

        event = getattr(record, "cache_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("·", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        _ = body.append(self._EVENT_LABELS.get(event, event))

        key = getattr(record, "cache_key", None)
        if isinstance(key, str) and key:
            _ = body.append(" ")
            _ = body.append(key[: self._KEY_PREFIX_LENGTH], style=Style(color="white"))

        details: list[str] = []
        status = getattr(record, "exit_code", None)
        if isinstance(status, int):
            details.append(f"exit={status}")
        chunks = getattr(record, "chunk_count", None)
        if isinstance(chunks, int):
            details.append(f"chunks={chunks}")
        reason = getattr(record, "reason", None)
        if isinstance(reason, str) and reason:
            details.append(reason)
        if details:
            _ = body.append(" (" + ", ".join(details) + ")")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for cache events."""

        event_text = self._render_cache_event(record)
        if event_text is not None:
            return event_text

        return super().render_message(record, message)

    @override
    def render(
        self,
        *,
        record: logging.LogRecord,
        traceback: Traceback | None,
        message_renderable: ConsoleRenderable,
    ) -> ConsoleRenderable:
        """Return the message without the log table.

        Time, level and path columns are always hidden, and the table would
        wrap long messages at the console width.
        """
        if traceback is None:
            return message_renderable
        return Group(message_renderable, traceback)


__all__ = ["CacheEventRichHandler"]
