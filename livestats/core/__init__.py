"""Core module - configuration, logging and models."""

from .config import settings, Settings
from .logger import setup_logger, get_logger
from .models import (
    AggregatedStats,
    RedditStat,
    SteamStat,
    EngagementStat,
    StatsCache,
    UpstreamFailure,
    FallbackEnvelope,
)

__all__ = [
    "settings",
    "Settings",
    "setup_logger",
    "get_logger",
    "AggregatedStats",
    "RedditStat",
    "SteamStat",
    "EngagementStat",
    "StatsCache",
    "UpstreamFailure",
    "FallbackEnvelope",
]
