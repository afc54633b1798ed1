"""Resolve the binary terminal streams output is forwarded to."""

from __future__ import annotations

import sys
from typing import BinaryIO

from deja.features.store import Stream


def terminal_stream(stream: Stream) -> BinaryIO:
    """Return the binary layer of the current ``sys.stdout``/``sys.stderr``.

    Pending text written through the text layer is flushed first so it is
    not reordered behind raw bytes.
    """
    text = sys.stdout if stream is Stream.STDOUT else sys.stderr
    text.flush()
    return text.buffer


__all__ = ["terminal_stream"]
