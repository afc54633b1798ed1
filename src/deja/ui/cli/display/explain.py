"""src/deja/ui/cli/display/explain.py
What: Render cache keys and ``explain`` diagnostics on stdout.
Why: Keep console output formatting out of the session controller.
"""

from __future__ import annotations

from typing import final

from rich.console import Console
from rich.style import Style
from rich.text import Text

from deja.application.services.session_service import Explanation
from deja.features.scope import CacheKey
from deja.features.store import Freshness

UNSET_MARKER = "<unset>"

_FRESHNESS_STYLES: dict[Freshness, Style] = {
    Freshness.FRESH: Style(color="green", bold=True),
    Freshness.STALE: Style(color="yellow", bold=True),
    Freshness.EXPIRED: Style(color="red", bold=True),
    Freshness.MISSING: Style(color="magenta", bold=True),
}


def describe_freshness(explanation: Explanation) -> str:
    """One-line summary of the lookup outcome."""

    key = explanation.key.hex
    entry = explanation.entry
    if explanation.freshness is Freshness.FRESH:
        return f"Fresh: entry for {key} available in cache"
    if explanation.freshness is Freshness.EXPIRED:
        assert entry is not None and entry.expires_at is not None
        ago = int(explanation.now - entry.expires_at)
        return f"Expired: entry in cache expired {ago} seconds ago"
    if explanation.freshness is Freshness.STALE:
        assert entry is not None and explanation.look_back is not None
        age = int(explanation.now - entry.created_at)
        limit = int(explanation.look_back)
        return f"Stale: entry in cache created {age} seconds ago (look-back {limit} seconds)"
    return f"Missing: no entry found in cache for {key}"


@final
class ExplainDisplay:
    """Print key constituents and lookup outcomes."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(soft_wrap=True, highlight=False)

    def show_key(self, key: CacheKey) -> None:
        self.console.print(Text(key.hex))

    def show_explanation(self, explanation: Explanation) -> None:
        """Print the values folded into the key, then the lookup outcome."""

        invocation = explanation.invocation
        watch = explanation.watch
        resolved = explanation.resolved

        self._field("cmd", " ".join(invocation.argv))
        if not watch.exclude_user:
            self._field("user", invocation.user)
        if not watch.exclude_pwd:
            self._field("pwd", str(invocation.cwd))
        if resolved.scopes:
            self._field("scope", " ".join(f'"{scope}"' for scope in resolved.scopes))
        if resolved.paths:
            self.console.print(Text("paths:", style=Style(bold=True)))
            for path in resolved.paths:
                self._field(f"  {path.declared}", path.hex)
        if resolved.env:
            self.console.print(Text("env:", style=Style(bold=True)))
            for variable in resolved.env:
                value = variable.value if variable.value is not None else UNSET_MARKER
                self._field(f"  {variable.name}", value)
        self._field("key", explanation.key.hex)

        style = _FRESHNESS_STYLES[explanation.freshness]
        self.console.print(Text(describe_freshness(explanation), style=style))

    def _field(self, label: str, value: str) -> None:
        text = Text()
        _ = text.append(f"{label}:", style=Style(bold=True))
        _ = text.append(f" {value}")
        self.console.print(text)


__all__ = ["ExplainDisplay", "UNSET_MARKER", "describe_freshness"]
