"""
Pydantic models for the live statistics service.
Defines the upstream payload schemas, the normalized stat records,
the aggregated snapshot and its in-memory cache.
"""

from datetime import datetime, timezone
from typing import Any
from pydantic import BaseModel, Field, StrictBool


# ==============================================================================
# Defaults
# ==============================================================================

DEFAULT_REDDIT_MEMBERS = 50
DEFAULT_STEAM_WISHLISTS = 200
DEFAULT_VIEWS_THOUSANDS = 178


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# ==============================================================================
# Upstream Signals
# ==============================================================================

class UpstreamFailure(BaseModel):
    """Typed failure signal returned (never raised) by the upstream client."""
    status: int | None = None  # None for transport errors
    message: str
    url: str = ""


class FallbackEnvelope(BaseModel):
    """In-band failure body returned by the proxy routes with HTTP 200."""
    error: str
    fallback: Any = None


# ==============================================================================
# Upstream Schemas (parse-with-defaults)
# ==============================================================================

class SubredditData(BaseModel):
    """Subset of Reddit's about.json `data` object."""
    subscribers: int | None = None
    active_user_count: int | None = None
    created_utc: float | None = None
    public_description: str | None = None


class SubredditAbout(BaseModel):
    """Reddit /r/{name}/about.json."""
    data: SubredditData


class PostData(BaseModel):
    """Subset of a Reddit post's `data` object."""
    ups: int | None = 0
    num_comments: int | None = 0


class Post(BaseModel):
    data: PostData


class ListingData(BaseModel):
    children: list[Post] = Field(default_factory=list)


class TopPostsListing(BaseModel):
    """Reddit /r/{name}/top.json."""
    data: ListingData


class AppDetailsData(BaseModel):
    """Subset of Steam Store appdetails `data` object."""
    name: str | None = None
    type: str | None = None
    price_overview: dict[str, Any] | None = None
    platforms: dict[str, bool] | None = None


class AppDetailsEntry(BaseModel):
    """One `{appid: {...}}` entry of Steam Store appdetails."""
    success: StrictBool = False
    data: AppDetailsData | None = None


class SteamSpyDetails(BaseModel):
    """Subset of SteamSpy appdetails."""
    owners: str | None = None


# ==============================================================================
# Normalized Stats
# ==============================================================================

class RedditStat(BaseModel):
    """Subreddit community size."""
    members: int = Field(default=DEFAULT_REDDIT_MEMBERS, ge=0)
    active_users: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    description: str | None = None


class SteamStat(BaseModel):
    """Steam store presence. Followers are not retrievable upstream."""
    name: str | None = None
    type: str | None = None
    wishlists: int = Field(default=DEFAULT_STEAM_WISHLISTS, ge=0)
    followers: int = 0
    price_info: dict[str, Any] | None = None
    platforms: dict[str, bool] | None = None


class EngagementStat(BaseModel):
    """Rough view estimate derived from top post engagement."""
    estimated_views_thousands: int = Field(default=DEFAULT_VIEWS_THOUSANDS, ge=0)
    total_upvotes: int = Field(default=0, ge=0)
    total_comments: int = Field(default=0, ge=0)
    total_posts: int = Field(default=0, ge=0)


class AggregatedStats(BaseModel):
    """Merged snapshot handed to the presentation layer."""
    reddit: RedditStat = Field(default_factory=RedditStat)
    steam: SteamStat = Field(default_factory=SteamStat)
    views: EngagementStat = Field(default_factory=EngagementStat)
    last_updated: datetime = Field(default_factory=utcnow)


# ==============================================================================
# Cache
# ==============================================================================

class StatsCache(BaseModel):
    """
    Process-local holder of the most recent aggregation.
    Owned by a single aggregator; never persisted.
    """
    reddit: RedditStat | None = None
    steam: SteamStat | None = None
    views: EngagementStat | None = None
    last_updated: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return self.last_updated is None

    def store(self, stats: AggregatedStats) -> None:
        """Overwrite the cache with a fresh snapshot."""
        self.reddit = stats.reddit
        self.steam = stats.steam
        self.views = stats.views
        self.last_updated = stats.last_updated

    def snapshot(self) -> AggregatedStats | None:
        """Return the cached snapshot, or None if nothing was stored yet."""
        if self.is_empty:
            return None
        return AggregatedStats(
            reddit=self.reddit or RedditStat(),
            steam=self.steam or SteamStat(),
            views=self.views or EngagementStat(),
            last_updated=self.last_updated,
        )

    def clear(self) -> None:
        """Drop all cached data."""
        self.reddit = None
        self.steam = None
        self.views = None
        self.last_updated = None
