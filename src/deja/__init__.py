"""deja - memoize the output and exit status of commands."""

__version__ = "0.1.0"
