"""
WebSocket API - pushed stats updates.
"""

import asyncio
import json
from typing import Any
from datetime import datetime, timezone
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..core.logger import get_logger
from ..core.models import AggregatedStats

logger = get_logger(__name__)

router = APIRouter()

KEEPALIVE_SECONDS = 30.0


class ConnectionManager:
    """Manages WebSocket subscribers to stats updates."""

    def __init__(self):
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        """Accept new connection."""
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        """Remove connection."""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: dict[str, Any]):
        """Broadcast message to all connections, dropping dead ones."""
        message["timestamp"] = datetime.now(timezone.utc).isoformat()
        message_json = json.dumps(message)

        for connection in list(self.active_connections):
            try:
                await connection.send_text(message_json)
            except Exception as e:
                logger.warning(f"Dropping WebSocket subscriber: {e}")
                self.disconnect(connection)

    async def broadcast_stats(self, stats: AggregatedStats):
        """Scheduler callback: push a new snapshot to every subscriber."""
        await self.broadcast({
            "event": "stats_updated",
            "stats": stats.model_dump(mode="json"),
        })


manager = ConnectionManager()


@router.websocket("/stats")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for live stats.

    Sends events:
    - connected (with the cached snapshot, if any)
    - stats_updated

    Args:
        websocket: WebSocket connection
    """
    await manager.connect(websocket)

    try:
        aggregator = getattr(websocket.app.state, "aggregator", None)
        cached = aggregator.get_cached_stats() if aggregator else None

        await websocket.send_json({
            "event": "connected",
            "stats": cached.model_dump(mode="json") if cached else None,
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

        # Keep connection alive and handle incoming messages
        while True:
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=KEEPALIVE_SECONDS
                )

                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    continue

                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})

            except asyncio.TimeoutError:
                await websocket.send_json({"type": "ping"})

    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.warning(f"WebSocket error: {e}")
        manager.disconnect(websocket)
