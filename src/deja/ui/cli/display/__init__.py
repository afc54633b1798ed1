"""Console renderers for the CLI."""

from .explain import ExplainDisplay, describe_freshness

__all__ = ["ExplainDisplay", "describe_freshness"]
