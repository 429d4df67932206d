"""Upstream module - HTTP client for the third-party JSON APIs."""

from .client import UpstreamClient, is_fallback_envelope, DEFAULT_HEADERS

__all__ = [
    "UpstreamClient",
    "is_fallback_envelope",
    "DEFAULT_HEADERS",
]
