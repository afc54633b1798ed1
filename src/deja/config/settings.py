"""Where: src/deja/config/settings.py
What: Runtime constants shared by the cache features and the CLI.
Why: Keep tunables and environment variable names in one place.
"""

from __future__ import annotations

from typing import Final

# Hashing ---------------------------------------------------------------------

# Read size used when hashing watched files.
FILE_HASH_CHUNK_SIZE: Final[int] = 64 * 1024

# Folded into every cache key and stored in every entry. Bump when the key
# derivation or the entry layout changes so old entries are never replayed.
ENTRY_FORMAT_VERSION: Final[str] = "deja-1"


# Capture ---------------------------------------------------------------------

# Maximum bytes read from a child stream per chunk.
CAPTURE_READ_SIZE: Final[int] = 64 * 1024


# Policy defaults -------------------------------------------------------------

DEFAULT_RECORD_EXIT_CODES: Final[str] = "0"
DEFAULT_CACHE_MISS_EXIT_CODE: Final[int] = 1


# Environment -----------------------------------------------------------------

ENV_WATCH_SCOPE: Final[str] = "DEJA_WATCH_SCOPE"
ENV_IGNORE_PWD: Final[str] = "DEJA_IGNORE_PWD"
ENV_IGNORE_USER: Final[str] = "DEJA_IGNORE_USER"
ENV_LOOK_BACK: Final[str] = "DEJA_LOOK_BACK"
ENV_CACHE_FOR: Final[str] = "DEJA_CACHE_FOR"
ENV_RECORD_EXIT_CODES: Final[str] = "DEJA_RECORD_EXIT_CODES"

TRUTHY_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


__all__ = [
    "CAPTURE_READ_SIZE",
    "DEFAULT_CACHE_MISS_EXIT_CODE",
    "DEFAULT_RECORD_EXIT_CODES",
    "ENTRY_FORMAT_VERSION",
    "ENV_CACHE_FOR",
    "ENV_IGNORE_PWD",
    "ENV_IGNORE_USER",
    "ENV_LOOK_BACK",
    "ENV_RECORD_EXIT_CODES",
    "ENV_WATCH_SCOPE",
    "FILE_HASH_CHUNK_SIZE",
    "TRUTHY_VALUES",
]
