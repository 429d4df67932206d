# livestats test fixtures
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from livestats.core.config import Settings  # noqa: E402


APP_ID = "3984710"

ABOUT_OK: dict[str, Any] = {
    "kind": "t5",
    "data": {
        "subscribers": 1234,
        "active_user_count": 12,
        "created_utc": 1700000000.0,
        "public_description": "OS Engine community",
    },
}

TOP_OK: dict[str, Any] = {
    "kind": "Listing",
    "data": {
        "children": [
            {"kind": "t3", "data": {"ups": 100, "num_comments": 10}},
            {"kind": "t3", "data": {"ups": 50, "num_comments": 5}},
        ]
    },
}

APPDETAILS_OK: dict[str, Any] = {
    APP_ID: {
        "success": True,
        "data": {
            "name": "OS Engine",
            "type": "game",
            "price_overview": {"currency": "USD", "final": 999},
            "platforms": {"windows": True, "mac": False, "linux": True},
        },
    }
}

STEAMSPY_OK: dict[str, Any] = {"appid": int(APP_ID), "owners": "0 .. 20,000"}


Reply = tuple[int, Any] | Exception | Callable[[httpx.Request], httpx.Response]


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "subreddit": "osengine",
        "steam_app_id": APP_ID,
        "auto_update": False,
        "proxy_base_url": "",
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def mock_transport(routes: dict[str, Reply], seen: list[httpx.Request] | None = None) -> httpx.MockTransport:
    """Transport answering by URL path; unknown paths get a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        reply = routes.get(request.url.path)
        if reply is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        status, body = reply
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def proxy_routes(
    subreddit: Reply = (200, ABOUT_OK),
    posts: Reply = (200, TOP_OK),
    appdetails: Reply = (200, APPDETAILS_OK),
    steamspy: Reply = (200, STEAMSPY_OK),
) -> dict[str, Reply]:
    """Responses keyed by the proxy route paths the aggregator calls."""
    return {
        "/api/reddit/subreddit/osengine": subreddit,
        "/api/reddit/posts/osengine": posts,
        f"/api/steam/appdetails/{APP_ID}": appdetails,
        f"/api/steamspy/appdetails/{APP_ID}": steamspy,
    }


def upstream_routes(
    subreddit: Reply = (200, ABOUT_OK),
    posts: Reply = (200, TOP_OK),
    appdetails: Reply = (200, APPDETAILS_OK),
    steamspy: Reply = (200, STEAMSPY_OK),
) -> dict[str, Reply]:
    """Responses keyed by the real upstream API paths the proxy calls."""
    return {
        "/r/osengine/about.json": subreddit,
        "/r/osengine/top.json": posts,
        "/api/appdetails": appdetails,
        "/api.php": steamspy,
    }


@pytest.fixture()
def settings() -> Settings:
    return make_settings()
