"""
FastAPI Application - Main entry point.
Provides the upstream proxy routes, the aggregated stats API and the
live stats WebSocket.
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..core.config import Settings, settings as default_settings
from ..core.logger import get_logger, setup_logger
from ..stats.aggregator import StatsAggregator
from ..stats.scheduler import RefreshScheduler
from ..upstream.client import UpstreamClient, DEFAULT_HEADERS

from .routes import proxy, stats
from .websocket import router as websocket_router, manager

logger = get_logger(__name__)

INPROCESS_BASE_URL = "http://livestats.internal"


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Service settings (module settings if not provided)
        transport: Optional transport for upstream calls (used by tests)

    Returns:
        Configured FastAPI app
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.
        Creates the HTTP clients, aggregator and scheduler; cleans them up.
        """
        setup_logger("livestats", settings.log_level.upper())

        headers = {**DEFAULT_HEADERS, "User-Agent": settings.user_agent}

        upstream_http = httpx.AsyncClient(
            transport=transport,
            timeout=settings.request_timeout,
            follow_redirects=True,
        )

        # The aggregator reaches the proxy routes over HTTP, or in-process
        if settings.proxy_base_url:
            proxy_http = httpx.AsyncClient(
                base_url=settings.proxy_base_url,
                timeout=settings.request_timeout,
            )
        else:
            proxy_http = httpx.AsyncClient(
                transport=httpx.ASGITransport(app=app, raise_app_exceptions=False),
                base_url=INPROCESS_BASE_URL,
                timeout=settings.request_timeout,
            )

        aggregator = StatsAggregator(
            UpstreamClient(proxy_http, headers, settings.request_timeout),
            settings,
        )
        scheduler = RefreshScheduler(aggregator, settings.update_interval)

        app.state.settings = settings
        app.state.upstream = UpstreamClient(upstream_http, headers, settings.request_timeout)
        app.state.aggregator = aggregator
        app.state.scheduler = scheduler

        if settings.auto_update:
            scheduler.start_auto_update(manager.broadcast_stats)

        logger.info(f"Live stats API ready (r/{settings.subreddit}, app {settings.steam_app_id})")

        yield

        logger.info("Shutting down...")
        await scheduler.stop_all()
        await proxy_http.aclose()
        await upstream_http.aclose()

    app = FastAPI(
        title="Live Stats",
        description=(
            "Same-origin proxy for Reddit, Steam Store and SteamSpy, and the "
            "live statistics aggregated from them."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Include routers
    app.include_router(proxy.router, prefix="/api", tags=["Proxy"])
    app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
    app.include_router(websocket_router, prefix="/ws", tags=["WebSocket"])

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Live Stats",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
            "proxies": [
                "/api/reddit/subreddit/{subreddit}",
                "/api/reddit/posts/{subreddit}",
                "/api/steam/appdetails/{appid}",
                "/api/steamspy/appdetails/{appid}",
            ],
            "stats": ["/api/stats", "/api/stats/refresh", "/api/stats/cached", "/ws/stats"],
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        aggregator = getattr(app.state, "aggregator", None)
        scheduler = getattr(app.state, "scheduler", None)
        cached = aggregator.get_cached_stats() if aggregator else None
        return {
            "status": "healthy",
            "aggregator": "ready" if aggregator else "not initialized",
            "auto_update": bool(scheduler and scheduler.running),
            "last_updated": cached.last_updated.isoformat() if cached else None,
        }

    return app


# Create app instance
app = create_app()
