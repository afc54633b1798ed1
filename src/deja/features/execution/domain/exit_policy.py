"""Exit status acceptance rules deciding which results are recorded."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from deja.shared.errors import ParseError


@dataclass(slots=True, frozen=True)
class ExitCodeRange:
    """Inclusive range of statuses; ``end`` is ``None`` for ``a+``."""

    start: int
    end: int | None

    def __contains__(self, status: object) -> bool:
        if not isinstance(status, int):
            return False
        if status < self.start:
            return False
        return self.end is None or status <= self.end

    def __str__(self) -> str:
        if self.end is None:
            return f"{self.start}+"
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"


def _parse_code(token: str, raw: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise ParseError(f"invalid exit code spec '{raw}'")
    return int(token)


@dataclass(slots=True, frozen=True)
class ExitPolicy:
    """Set of exit statuses eligible for caching."""

    ranges: tuple[ExitCodeRange, ...]

    @classmethod
    def parse(cls, spec: str) -> "ExitPolicy":
        """Parse ``0,10-12,100+`` style specifications.

        Each comma separated token is a literal, an inclusive range ``a-b``
        or an open range ``a+``.

        Raises:
            ParseError: On empty tokens, non-numeric bounds or ``a > b``.
        """
        ranges: list[ExitCodeRange] = []
        for raw in spec.split(","):
            token = raw.strip()
            if token.endswith("+"):
                ranges.append(ExitCodeRange(_parse_code(token[:-1], token), None))
            elif "-" in token:
                low, _, high = token.partition("-")
                start = _parse_code(low.strip(), token)
                end = _parse_code(high.strip(), token)
                if start > end:
                    raise ParseError(f"invalid exit code spec '{token}'")
                ranges.append(ExitCodeRange(start, end))
            else:
                code = _parse_code(token, raw.strip())
                ranges.append(ExitCodeRange(code, code))
        return cls(ranges=tuple(ranges))

    def match(self, status: int) -> bool:
        """Return whether ``status`` should be recorded."""

        return any(status in candidate for candidate in self.ranges)

    def __str__(self) -> str:
        return ",".join(str(candidate) for candidate in self.ranges)


DEFAULT_EXIT_POLICY: Final[ExitPolicy] = ExitPolicy(ranges=(ExitCodeRange(0, 0),))


__all__ = ["DEFAULT_EXIT_POLICY", "ExitCodeRange", "ExitPolicy"]
