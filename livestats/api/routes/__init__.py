"""API route modules."""

from . import proxy, stats

__all__ = ["proxy", "stats"]
