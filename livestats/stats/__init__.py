"""Stats module - normalizers, aggregator and refresh scheduler."""

from .normalizers import (
    normalize_subreddit,
    normalize_engagement,
    normalize_app_details,
    normalize_ownership,
    parse_owners_range,
)
from .aggregator import StatsAggregator
from .scheduler import RefreshScheduler

__all__ = [
    "normalize_subreddit",
    "normalize_engagement",
    "normalize_app_details",
    "normalize_ownership",
    "parse_owners_range",
    "StatsAggregator",
    "RefreshScheduler",
]
