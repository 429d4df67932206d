"""API module - FastAPI application, routes and WebSocket."""

from .main import create_app

__all__ = ["create_app"]
