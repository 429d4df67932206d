"""
Stat Normalizers - raw upstream JSON to typed stat records.

Every normalizer is total: failure signals, fallback envelopes and schema
violations all map to a documented default (or the caller's fallback
value) and are logged as warnings. Nothing here raises.
"""

import re
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from ..core.logger import get_logger
from ..core.models import (
    DEFAULT_REDDIT_MEMBERS,
    DEFAULT_STEAM_WISHLISTS,
    DEFAULT_VIEWS_THOUSANDS,
    AppDetailsEntry,
    EngagementStat,
    RedditStat,
    SteamSpyDetails,
    SteamStat,
    SubredditAbout,
    TopPostsListing,
    UpstreamFailure,
)
from ..upstream.client import is_fallback_envelope

logger = get_logger(__name__)

# Rough engagement weights: views per upvote / per comment
VIEWS_PER_UPVOTE = 15
VIEWS_PER_COMMENT = 5

_NUMBER_TOKEN = re.compile(r"\d[\d,]*")


def _unusable(raw: Any, source: str) -> bool:
    """Check for failure signals and fallback envelopes, logging either."""
    if isinstance(raw, UpstreamFailure):
        logger.warning(f"{source}: upstream failure ({raw.message}), using defaults")
        return True
    if is_fallback_envelope(raw):
        logger.warning(f"{source}: proxy fallback ({raw.get('error')}), using defaults")
        return True
    return False


def normalize_subreddit(raw: Any, fallback: RedditStat | None = None) -> RedditStat:
    """
    Normalize Reddit about.json into a RedditStat.

    Args:
        raw: Upstream body or failure signal
        fallback: Value to use instead of the defaults (e.g. cached)

    Returns:
        RedditStat
    """
    default = fallback or RedditStat(members=DEFAULT_REDDIT_MEMBERS, active_users=0)
    if _unusable(raw, "reddit subreddit"):
        return default

    try:
        about = SubredditAbout.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"reddit subreddit: malformed payload, using defaults: {e.error_count()} errors")
        return default

    data = about.data
    created_at = None
    if data.created_utc is not None:
        try:
            created_at = datetime.fromtimestamp(data.created_utc, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"reddit subreddit: bad created_utc {data.created_utc!r}")

    return RedditStat(
        members=max(data.subscribers or data.active_user_count or DEFAULT_REDDIT_MEMBERS, 0),
        active_users=max(data.active_user_count or 0, 0),
        created_at=created_at,
        description=data.public_description,
    )


def normalize_engagement(
    raw: Any,
    limit: int = 100,
    fallback: EngagementStat | None = None
) -> EngagementStat:
    """
    Estimate community views from top post engagement.

    views (thousands) = (upvotes * 15 + comments * 5) // 1000,
    replaced by the default when it comes out as zero.
    """
    default = fallback or EngagementStat()
    if _unusable(raw, "reddit posts"):
        return default

    try:
        listing = TopPostsListing.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"reddit posts: malformed payload, using defaults: {e.error_count()} errors")
        return default

    posts = listing.data.children[:max(limit, 0)]
    total_upvotes = sum(max(p.data.ups or 0, 0) for p in posts)
    total_comments = sum(max(p.data.num_comments or 0, 0) for p in posts)

    estimated = (total_upvotes * VIEWS_PER_UPVOTE + total_comments * VIEWS_PER_COMMENT) // 1000

    return EngagementStat(
        estimated_views_thousands=estimated or DEFAULT_VIEWS_THOUSANDS,
        total_upvotes=total_upvotes,
        total_comments=total_comments,
        total_posts=len(posts),
    )


def parse_owners_range(owners: str | None) -> int:
    """
    Parse a SteamSpy owners range like "0 .. 20,000" to its average.

    Returns:
        Floor of the mean of all numeric tokens, or 0 if there are none
    """
    if not owners:
        return 0

    numbers = [int(token.replace(",", "")) for token in _NUMBER_TOKEN.findall(owners)]
    if not numbers:
        return 0
    return sum(numbers) // len(numbers)


def normalize_ownership(raw: Any) -> int:
    """Turn a SteamSpy response into a wishlist estimate."""
    if _unusable(raw, "steamspy"):
        return DEFAULT_STEAM_WISHLISTS

    try:
        details = SteamSpyDetails.model_validate(raw)
    except ValidationError:
        logger.warning("steamspy: malformed payload, using defaults")
        return DEFAULT_STEAM_WISHLISTS

    if not details.owners:
        return DEFAULT_STEAM_WISHLISTS
    return parse_owners_range(details.owners)


def _app_entry(raw: Any, app_id: str) -> AppDetailsEntry | None:
    if not isinstance(raw, dict) or is_fallback_envelope(raw):
        return None
    try:
        entry = AppDetailsEntry.model_validate(raw.get(str(app_id)))
    except ValidationError:
        return None
    return entry if entry.success else None


def app_details_available(raw: Any, app_id: str) -> bool:
    """True when Steam reported `success: true` for this app."""
    return _app_entry(raw, app_id) is not None


def normalize_app_details(
    raw: Any,
    app_id: str,
    wishlists: int = DEFAULT_STEAM_WISHLISTS,
    fallback: SteamStat | None = None
) -> SteamStat:
    """
    Normalize Steam Store appdetails into a SteamStat.

    Args:
        raw: Upstream body or failure signal
        app_id: App the response was requested for
        wishlists: Estimate from the ownership normalizer
        fallback: Value to use instead of the defaults (e.g. cached)

    Returns:
        SteamStat (followers always 0)
    """
    default = fallback or SteamStat(wishlists=DEFAULT_STEAM_WISHLISTS, followers=0)
    if _unusable(raw, "steam appdetails"):
        return default

    entry = _app_entry(raw, app_id)
    if entry is None:
        logger.warning(f"steam appdetails: no successful entry for app {app_id}, using defaults")
        return default

    data = entry.data
    return SteamStat(
        name=data.name if data else None,
        type=data.type if data else None,
        wishlists=max(wishlists, 0),
        followers=0,
        price_info=data.price_overview if data else None,
        platforms=data.platforms if data else None,
    )
