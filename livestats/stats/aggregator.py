"""
Stats Aggregator - fetch, normalize, merge and cache.

Runs the three upstream branches concurrently. A failing branch is
replaced with its cached value (or defaults) and never blocks the others.
"""

import asyncio
from typing import Any

from ..core.config import Settings, settings as default_settings
from ..core.logger import get_logger
from ..core.models import (
    AggregatedStats,
    EngagementStat,
    RedditStat,
    StatsCache,
    SteamStat,
    utcnow,
)
from ..upstream.client import UpstreamClient
from .normalizers import (
    app_details_available,
    normalize_app_details,
    normalize_engagement,
    normalize_ownership,
    normalize_subreddit,
)

logger = get_logger(__name__)


class StatsAggregator:
    """
    Owns the stats cache and produces AggregatedStats snapshots.
    The upstream client is expected to point at the proxy routes.

    Every branch prefers its cached value over the defaults on failure.
    Only one cycle runs at a time; callers arriving during a cycle wait
    for it and share its result.
    """

    def __init__(self, client: UpstreamClient, settings: Settings | None = None):
        """
        Initialize aggregator.

        Args:
            client: Upstream client bound to the proxy base URL
            settings: Service settings (module settings if not provided)
        """
        self.client = client
        self.settings = settings or default_settings
        self.cache = StatsCache()

        # Cycle coordination
        self._lock = asyncio.Lock()
        self._generation = 0
        self._last: AggregatedStats | None = None

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    async def fetch_reddit_stats(self) -> RedditStat:
        """Fetch subreddit member counts."""
        raw = await self.client.fetch_json(
            f"/api/reddit/subreddit/{self.settings.subreddit}"
        )
        return normalize_subreddit(raw, fallback=self.cache.reddit)

    async def fetch_reddit_views(self) -> EngagementStat:
        """Estimate community views from top posts."""
        limit = self.settings.posts_limit
        raw = await self.client.fetch_json(
            f"/api/reddit/posts/{self.settings.subreddit}",
            params={"timeframe": self.settings.posts_timeframe, "limit": limit},
        )
        return normalize_engagement(raw, limit=limit, fallback=self.cache.views)

    async def estimate_steam_wishlists(self, app_id: str) -> int:
        """
        Estimate wishlists from SteamSpy's owners range.
        Steam itself does not expose wishlist counts.
        """
        raw = await self.client.fetch_json(f"/api/steamspy/appdetails/{app_id}")
        return normalize_ownership(raw)

    async def fetch_steam_stats(self) -> SteamStat:
        """Fetch store details, then the wishlist estimate if the app exists."""
        app_id = self.settings.steam_app_id
        raw = await self.client.fetch_json(f"/api/steam/appdetails/{app_id}")

        if not app_details_available(raw, app_id):
            return normalize_app_details(raw, app_id, fallback=self.cache.steam)

        wishlists = await self.estimate_steam_wishlists(app_id)
        return normalize_app_details(raw, app_id, wishlists=wishlists)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def _settle(self, outcome: Any, branch: str, default: Any) -> Any:
        """Map a gathered outcome to its value, or the cached/default value."""
        if isinstance(outcome, BaseException):
            logger.warning(f"{branch} branch failed: {outcome!r}")
            return default
        return outcome

    def _defaults(self) -> AggregatedStats:
        return AggregatedStats(
            reddit=RedditStat(),
            steam=SteamStat(),
            views=EngagementStat(),
            last_updated=utcnow(),
        )

    async def fetch_all_stats(self) -> AggregatedStats:
        """
        Run one aggregation cycle, or join the one already running.

        Returns:
            Fresh snapshot; the cached one or all defaults if aggregation fails
        """
        generation = self._generation
        async with self._lock:
            if self._generation != generation and self._last is not None:
                return self._last

            stats = await self._run_cycle()
            self._generation += 1
            self._last = stats
            return stats

    async def _run_cycle(self) -> AggregatedStats:
        try:
            reddit, steam, views = await asyncio.gather(
                self.fetch_reddit_stats(),
                self.fetch_steam_stats(),
                self.fetch_reddit_views(),
                return_exceptions=True,
            )

            stats = AggregatedStats(
                reddit=self._settle(reddit, "reddit", self.cache.reddit or RedditStat()),
                steam=self._settle(steam, "steam", self.cache.steam or SteamStat()),
                views=self._settle(views, "views", self.cache.views or EngagementStat()),
                last_updated=utcnow(),
            )

            self.cache.store(stats)
            logger.info(
                f"Stats updated: members={stats.reddit.members} "
                f"wishlists={stats.steam.wishlists} "
                f"views={stats.views.estimated_views_thousands}K"
            )
            return stats

        except Exception:
            logger.exception("Failed to aggregate statistics")
            cached = self.cache.snapshot()
            return cached if cached is not None else self._defaults()

    async def refresh(self) -> AggregatedStats:
        """Manual on-demand refresh."""
        return await self.fetch_all_stats()

    def get_cached_stats(self) -> AggregatedStats | None:
        """Most recent snapshot, or None before the first cycle."""
        return self.cache.snapshot()
