"""
Stats API - aggregated live statistics.
"""

from typing import Any
from fastapi import APIRouter, HTTPException, Request

from ...core.models import AggregatedStats
from ...stats.aggregator import StatsAggregator

router = APIRouter()


def _aggregator(req: Request) -> StatsAggregator:
    aggregator = getattr(req.app.state, "aggregator", None)
    if aggregator is None:
        raise HTTPException(status_code=503, detail="Aggregator not initialized")
    return aggregator


@router.get("", response_model=AggregatedStats)
async def get_stats(req: Request) -> AggregatedStats:
    """
    Run an aggregation cycle and return the snapshot.

    Args:
        req: FastAPI request

    Returns:
        Aggregated statistics (never an error; defaults on total failure)
    """
    return await _aggregator(req).fetch_all_stats()


@router.post("/refresh", response_model=AggregatedStats)
async def refresh_stats(req: Request) -> AggregatedStats:
    """Manual on-demand refresh."""
    return await _aggregator(req).refresh()


@router.get("/cached")
async def get_cached_stats(req: Request) -> dict[str, Any]:
    """Most recent snapshot without touching the upstream APIs."""
    cached = _aggregator(req).get_cached_stats()
    if cached is None:
        return {"cached": False}
    return {"cached": True, "stats": cached.model_dump(mode="json")}
