# livestats test scripts
from __future__ import annotations

from fastapi import Request

from livestats.api.params import (
    extract_app_id,
    extract_param,
    extract_posts_subreddit,
    extract_subreddit,
)


def make_request(
    path: str,
    query: str = "",
    headers: dict[str, str] | None = None,
    path_params: dict[str, str] | None = None,
) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "root_path": "",
        "query_string": query.encode(),
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "path_params": path_params or {},
    }
    return Request(scope)


def test_path_parameter_wins() -> None:
    req = make_request(
        "/api/reddit/subreddit/fromPath",
        query="subreddit=fromquery",
        path_params={"subreddit": "fromparam"},
    )
    assert extract_subreddit(req, "osengine") == "fromparam"


def test_request_path_used_without_path_parameter() -> None:
    req = make_request("/.netlify/functions/x/subreddit/GameDev", query="subreddit=fromquery")
    assert extract_subreddit(req, "osengine") == "gamedev"


def test_query_string_used_for_bare_route() -> None:
    req = make_request("/api/reddit/subreddit", query="subreddit=%20Python%20")
    assert extract_subreddit(req, "osengine") == "python"


def test_forwarded_headers_in_order() -> None:
    req = make_request(
        "/api/reddit/posts",
        headers={
            "x-forwarded-uri": "/api/reddit/posts/indiedev?timeframe=week",
            "x-forwarded-path": "/api/reddit/posts/other",
        },
    )
    assert extract_posts_subreddit(req, "osengine") == "indiedev"

    req = make_request("/api/reddit/posts", headers={"x-forwarded-path": "/api/reddit/posts/other"})
    assert extract_posts_subreddit(req, "osengine") == "other"


def test_default_when_no_source_has_value() -> None:
    assert extract_subreddit(make_request("/api/reddit/subreddit"), "osengine") == "osengine"
    assert extract_app_id(make_request("/api/steam/appdetails"), "3984710") == "3984710"


def test_invalid_values_fall_back_to_default() -> None:
    req = make_request("/api/reddit/subreddit/bad-name!")
    assert extract_subreddit(req, "osengine") == "osengine"

    req = make_request("/api/steam/appdetails", query="appid=12ab")
    assert extract_app_id(req, "3984710") == "3984710"


def test_app_id_from_path() -> None:
    req = make_request("/api/steamspy/appdetails/570")
    assert extract_app_id(req, "3984710") == "570"


def test_blank_values_are_skipped() -> None:
    req = make_request("/api/steam/appdetails", query="appid=%20%20&x=1", headers={"x-forwarded-uri": "/appdetails/440"})
    assert extract_param(req, "appid", "appdetails", "3984710") == "440"
