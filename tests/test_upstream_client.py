# livestats test scripts
from __future__ import annotations

import asyncio

import httpx

from livestats.core.models import UpstreamFailure
from livestats.upstream.client import UpstreamClient, is_fallback_envelope

from conftest import mock_transport


def _fetch(routes, url="/data", params=None, seen=None, **client_kwargs):
    async def run():
        transport = mock_transport(routes, seen)
        async with httpx.AsyncClient(transport=transport, base_url="http://proxy") as http:
            return await UpstreamClient(http, **client_kwargs).fetch_json(url, params=params)

    return asyncio.run(run())


def test_fetch_json_returns_parsed_body() -> None:
    assert _fetch({"/data": (200, {"ok": [1, 2]})}) == {"ok": [1, 2]}


def test_fetch_json_sends_identification_header_and_params() -> None:
    seen: list[httpx.Request] = []
    _fetch(
        {"/data": (200, {})},
        params={"limit": 100},
        seen=seen,
        headers={"User-Agent": "Tester:v1 (by /u/tester)"},
    )
    assert seen[0].headers["User-Agent"] == "Tester:v1 (by /u/tester)"
    assert seen[0].url.params["limit"] == "100"


def test_default_headers_identify_the_service() -> None:
    seen: list[httpx.Request] = []
    _fetch({"/data": (200, {})}, seen=seen)
    assert seen[0].headers["User-Agent"].startswith("VisionAlgorithms:")
    assert seen[0].headers["Accept"] == "application/json"


def test_non_2xx_is_a_failure_signal() -> None:
    result = _fetch({"/data": (429, {"message": "Too Many Requests"})})
    assert isinstance(result, UpstreamFailure)
    assert result.status == 429
    assert result.url == "/data"


def test_transport_error_is_a_failure_signal() -> None:
    result = _fetch({"/data": httpx.ConnectError("connection refused")})
    assert isinstance(result, UpstreamFailure)
    assert result.status is None
    assert "connection refused" in result.message


def test_timeout_is_a_failure_signal() -> None:
    result = _fetch({"/data": httpx.ReadTimeout("slow")}, timeout=0.5)
    assert isinstance(result, UpstreamFailure)
    assert result.status is None
    assert result.message == "timeout"


def test_invalid_json_is_a_failure_signal() -> None:
    def html(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>blocked</html>", headers={"content-type": "text/html"})

    result = _fetch({"/data": html})
    assert isinstance(result, UpstreamFailure)
    assert result.status == 200


def test_is_fallback_envelope() -> None:
    assert is_fallback_envelope({"error": "Failed", "fallback": {}})
    assert not is_fallback_envelope({"data": {}})
    assert not is_fallback_envelope([{"fallback": 1}])
    assert not is_fallback_envelope(None)
