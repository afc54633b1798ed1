"""Duration parsing for ``--cache-for`` and ``--look-back`` values."""

from __future__ import annotations

import re
from typing import Final

from deja.shared.errors import ParseError

_UNIT_SECONDS: Final[dict[str, int]] = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
}
_TERM_PATTERN: Final[re.Pattern[str]] = re.compile(r"([0-9]+)([smhd])")
_DURATION_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:[0-9]+[smhd])+")


def parse_duration(value: str) -> float:
    """Convert ``15s``, ``30m``, ``3h``, ``4d`` or compounds like ``1h30m`` to seconds.

    Raises:
        ParseError: If ``value`` is empty, unit-less or uses an unknown unit.
    """

    token = value.strip()
    if not _DURATION_PATTERN.fullmatch(token):
        raise ParseError(
            f"invalid duration '{value}', use values like 15s, 30m, 3h, 4d"
        )

    return float(
        sum(int(amount) * _UNIT_SECONDS[unit] for amount, unit in _TERM_PATTERN.findall(token))
    )


__all__ = ["parse_duration"]
