"""
Upstream Client - read-only JSON fetches.
Wraps an httpx.AsyncClient and converts every failure into an
UpstreamFailure value instead of an exception.
"""

import json
from typing import Any

import httpx

from ..core.config import settings
from ..core.logger import get_logger
from ..core.models import UpstreamFailure

logger = get_logger(__name__)


DEFAULT_HEADERS = {
    "User-Agent": settings.user_agent,
    "Accept": "application/json",
}


def is_fallback_envelope(raw: Any) -> bool:
    """True if a body is a proxy fallback envelope rather than upstream data."""
    return isinstance(raw, dict) and "fallback" in raw


class UpstreamClient:
    """
    Issues GET requests and returns parsed JSON or an UpstreamFailure.
    Performs no caching and no retries.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        headers: dict[str, str] | None = None,
        timeout: float | None = None
    ):
        """
        Initialize client.

        Args:
            http: Shared async HTTP client (owned by the caller)
            headers: Headers sent with every request
            timeout: Per-request timeout in seconds
        """
        self.http = http
        self.headers = dict(headers) if headers is not None else dict(DEFAULT_HEADERS)
        self.timeout = timeout if timeout is not None else settings.request_timeout

    async def fetch_json(
        self,
        url: str,
        params: dict[str, Any] | None = None
    ) -> Any | UpstreamFailure:
        """
        Fetch a URL and parse its JSON body.

        Args:
            url: Absolute URL, or a path relative to the client's base URL
            params: Optional query parameters

        Returns:
            Parsed JSON on 2xx, otherwise an UpstreamFailure
        """
        try:
            response = await self.http.get(
                url,
                params=params,
                headers=self.headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            logger.warning(f"Upstream timeout after {self.timeout}s: {url}")
            return UpstreamFailure(message="timeout", url=url)
        except httpx.HTTPError as e:
            logger.warning(f"Upstream request failed: {url}: {e}")
            return UpstreamFailure(message=f"request failed: {e}", url=url)

        if not response.is_success:
            logger.warning(f"Upstream returned status {response.status_code}: {url}")
            return UpstreamFailure(
                status=response.status_code,
                message=f"upstream error: {response.status_code}",
                url=url,
            )

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Upstream returned invalid JSON: {url}: {e}")
            return UpstreamFailure(
                status=response.status_code,
                message="invalid JSON body",
                url=url,
            )
