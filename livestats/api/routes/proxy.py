"""
Proxy API - same-origin passthrough for the third-party JSON APIs.

Every route answers HTTP 200. On upstream failure the body is a fallback
envelope ``{"error": ..., "fallback": ...}`` instead of upstream data.
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...core.config import Settings
from ...core.logger import get_logger
from ...core.models import FallbackEnvelope, UpstreamFailure
from ...upstream.client import UpstreamClient
from ..params import extract_app_id, extract_posts_subreddit, extract_subreddit

logger = get_logger(__name__)

router = APIRouter()


def _upstream(req: Request) -> UpstreamClient:
    return req.app.state.upstream


def _settings(req: Request) -> Settings:
    return req.app.state.settings


async def _passthrough(
    req: Request,
    url: str,
    params: dict[str, Any] | None,
    error: str,
    fallback: Any
) -> JSONResponse:
    """Forward one GET upstream; return its body or the fallback envelope."""
    result = await _upstream(req).fetch_json(url, params=params)

    if isinstance(result, UpstreamFailure):
        logger.warning(f"{error}: {result.message} ({result.url})")
        envelope = FallbackEnvelope(error=error, fallback=fallback)
        return JSONResponse(content=envelope.model_dump())

    return JSONResponse(content=result)


@router.get("/reddit/subreddit")
@router.get("/reddit/subreddit/{subreddit}")
async def reddit_subreddit(req: Request) -> JSONResponse:
    """Reddit /r/{name}/about.json."""
    settings = _settings(req)
    name = extract_subreddit(req, settings.subreddit)
    logger.info(f"Fetching Reddit data for subreddit: {name}")

    return await _passthrough(
        req,
        f"{settings.reddit_base_url}/r/{name}/about.json",
        None,
        "Failed to fetch Reddit data",
        {"data": {"subscribers": 50, "active_user_count": 0}},
    )


@router.get("/reddit/posts")
@router.get("/reddit/posts/{subreddit}")
async def reddit_posts(req: Request) -> JSONResponse:
    """Reddit /r/{name}/top.json with timeframe and limit passthrough."""
    settings = _settings(req)
    name = extract_posts_subreddit(req, settings.subreddit)
    timeframe = req.query_params.get("timeframe") or settings.posts_timeframe
    limit = req.query_params.get("limit") or str(settings.posts_limit)

    return await _passthrough(
        req,
        f"{settings.reddit_base_url}/r/{name}/top.json",
        {"t": timeframe, "limit": limit},
        "Failed to fetch Reddit posts",
        {"data": {"children": []}},
    )


@router.get("/steam/appdetails")
@router.get("/steam/appdetails/{appid}")
async def steam_appdetails(req: Request) -> JSONResponse:
    """Steam Store appdetails."""
    settings = _settings(req)
    app_id = extract_app_id(req, settings.steam_app_id)

    return await _passthrough(
        req,
        f"{settings.steam_store_base_url}/api/appdetails",
        {"appids": app_id},
        "Failed to fetch Steam data",
        {"success": False},
    )


@router.get("/steamspy/appdetails")
@router.get("/steamspy/appdetails/{appid}")
async def steamspy_appdetails(req: Request) -> JSONResponse:
    """SteamSpy appdetails (ownership estimate)."""
    settings = _settings(req)
    app_id = extract_app_id(req, settings.steam_app_id)

    return await _passthrough(
        req,
        f"{settings.steamspy_base_url}/api.php",
        {"request": "appdetails", "appid": app_id},
        "Failed to fetch SteamSpy data",
        {},
    )
