"""WebSocket endpoint for the live location feed."""

from __future__ import annotations

import asyncio
import json
import queue
import threading
from datetime import datetime, timezone
from typing import Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

from carsim.comms.event_bus import EventBus
from carsim.simulation.engine import INIT_EVENT

router = APIRouter(prefix="/ws", tags=["websocket"])


async def send_json(websocket: WebSocket, message: dict):
    """Send a message to a specific client."""
    try:
        await websocket.send_text(json.dumps(message))
    except Exception as e:
        logger.warning(f"Failed to send to websocket: {e}")


class ConnectionManager:
    """Manages WebSocket connections for real-time updates.

    One instance per application lifespan (``app.state.connections``), so
    its lock always belongs to the loop serving the app.
    """

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, initial: dict | None = None):
        """Accept a connection, send *initial* to it, then register it.

        Registering after the initial message guarantees the client sees it
        before any broadcast.
        """
        await websocket.accept()
        if initial is not None:
            await self.send_to(websocket, initial)
        async with self._lock:
            self.active_connections.add(websocket)
        logger.info(f"WebSocket connected. Total connections: {len(self.active_connections)}")

    async def disconnect(self, websocket: WebSocket):
        """Remove a WebSocket connection."""
        async with self._lock:
            self.active_connections.discard(websocket)
        logger.info(f"WebSocket disconnected. Total connections: {len(self.active_connections)}")

    async def broadcast(self, message: dict):
        """Broadcast a message to all connected clients."""
        if not self.active_connections:
            return

        message_str = json.dumps(message)
        disconnected = set()

        async with self._lock:
            for connection in self.active_connections:
                try:
                    await connection.send_text(message_str)
                except Exception as e:
                    logger.warning(f"Failed to send to websocket: {e}")
                    disconnected.add(connection)

            self.active_connections -= disconnected

    async def send_to(self, websocket: WebSocket, message: dict):
        await send_json(websocket, message)


def get_connections(websocket: WebSocket) -> ConnectionManager:
    """The app's ConnectionManager, created on first use if the lifespan did not."""
    state = websocket.app.state
    connections = getattr(state, "connections", None)
    if connections is None:
        connections = ConnectionManager()
        state.connections = connections
    return connections


@router.websocket("/live")
async def websocket_live(websocket: WebSocket):
    """Live car feed: one location:init on connect, then location:update every tick."""
    connections = get_connections(websocket)
    engine = getattr(websocket.app.state, "simulation_engine", None)
    cars = engine.init_payload() if engine is not None else []
    await connections.connect(websocket, initial={"type": INIT_EVENT, "data": cars})

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await send_json(websocket, {"type": "error", "message": "Invalid JSON"})
                continue
            await handle_client_message(websocket, message)
    except WebSocketDisconnect:
        await connections.disconnect(websocket)


async def handle_client_message(websocket: WebSocket, message: dict):
    """Handle messages from WebSocket clients. The feed is push-only apart from ping."""
    msg_type = message.get("type") if isinstance(message, dict) else None

    if msg_type == "ping":
        await send_json(
            websocket,
            {"type": "pong", "timestamp": datetime.now(timezone.utc).isoformat()},
        )
    else:
        await send_json(
            websocket,
            {"type": "error", "message": f"Unknown message type: {msg_type}"},
        )


class FeedBridge:
    """Forwards EventBus events from the tick thread onto the asyncio loop.

    The tick thread publishes into a bounded queue; this daemon thread drains
    it and schedules ``connections.broadcast`` on *loop*.  Events go out
    unchanged as ``{"type": ..., "data": ...}``.
    """

    def __init__(
        self,
        event_bus: EventBus,
        loop: asyncio.AbstractEventLoop,
        connections: ConnectionManager,
        poll_timeout: float = 0.5,
    ) -> None:
        self._event_bus = event_bus
        self._loop = loop
        self._connections = connections
        self._poll_timeout = poll_timeout
        self._sub: queue.Queue | None = None
        self._running = False
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._sub = self._event_bus.subscribe()
        self._running = True
        self._thread = threading.Thread(
            target=self._bridge_loop, daemon=True, name="feed-ws-bridge"
        )
        self._thread.start()

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        if self._sub is not None:
            self._event_bus.unsubscribe(self._sub)
            self._sub = None

    def _bridge_loop(self) -> None:
        while self._running:
            try:
                msg = self._sub.get(timeout=self._poll_timeout)
            except queue.Empty:
                continue
            if self._loop.is_closed():
                break
            asyncio.run_coroutine_threadsafe(self._connections.broadcast(msg), self._loop)


def start_feed_bridge(
    event_bus: EventBus,
    loop: asyncio.AbstractEventLoop,
    connections: ConnectionManager,
) -> FeedBridge:
    """Start a daemon thread that forwards simulation events to WebSocket clients."""
    bridge = FeedBridge(event_bus, loop, connections)
    bridge.start()
    return bridge
