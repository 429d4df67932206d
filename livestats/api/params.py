"""
Path parameter extraction for the proxy routes.

Rewrites and function runtimes put the parameter in different places, so
a value is resolved from the first source that has one, in this order:

1. Route path parameter
2. Request path, ``/<segment>/<value>``
3. Query string, ``?<name>=<value>``
4. ``x-forwarded-uri`` then ``x-forwarded-path`` header
5. Configured default
"""

import re

from fastapi import Request

from ..core.logger import get_logger

logger = get_logger(__name__)

FORWARDED_HEADERS = ("x-forwarded-uri", "x-forwarded-path")

SUBREDDIT_PATTERN = re.compile(r"^[A-Za-z0-9_]{2,21}$")
APP_ID_PATTERN = re.compile(r"^\d{1,10}$")


def _from_path(path: str | None, segment: str) -> str | None:
    if not path:
        return None
    match = re.search(rf"/{re.escape(segment)}/([^/?&#]+)", path, re.IGNORECASE)
    return match.group(1) if match else None


def extract_param(
    request: Request,
    name: str,
    segment: str,
    default: str,
    pattern: re.Pattern | None = None,
) -> str:
    """
    Resolve a single proxy parameter.

    Args:
        request: Incoming request
        name: Path/query parameter name
        segment: Path segment preceding the value (e.g. "subreddit")
        default: Value used when no source has one, or the value is invalid
        pattern: Optional validation pattern for the resolved value

    Returns:
        Stripped parameter value
    """
    candidates = [
        request.path_params.get(name),
        _from_path(request.url.path, segment),
        request.query_params.get(name),
    ]
    candidates.extend(_from_path(request.headers.get(h), segment) for h in FORWARDED_HEADERS)

    for value in candidates:
        if value and value.strip():
            value = value.strip()
            break
    else:
        return default

    if pattern is not None and not pattern.match(value):
        logger.warning(f"Rejected {name}={value!r}, using default {default!r}")
        return default
    return value


def extract_subreddit(request: Request, default: str) -> str:
    """Subreddit name, lower-cased."""
    return extract_param(
        request, "subreddit", "subreddit", default, SUBREDDIT_PATTERN
    ).lower()


def extract_posts_subreddit(request: Request, default: str) -> str:
    """Subreddit name for the top posts route, lower-cased."""
    return extract_param(
        request, "subreddit", "posts", default, SUBREDDIT_PATTERN
    ).lower()


def extract_app_id(request: Request, default: str) -> str:
    """Steam app ID."""
    return extract_param(request, "appid", "appdetails", default, APP_ID_PATTERN)
