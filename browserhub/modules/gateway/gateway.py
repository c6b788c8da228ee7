"""WebSocket gateway between browser clients and the lifecycle manager."""

import asyncio
import contextlib
import logging
import uuid
from typing import Dict, Set

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from browserhub.modules.api import ClientEvent, ClientMessage, ServerMessage
from browserhub.modules.lifecycle import Emitter, LifecycleManager

logger = logging.getLogger("browserhub.gateway")


class ConnectionGateway:
    """Accepts WebSocket connections and routes their control messages.

    Every connection gets a stable id; events produced for that id are sent
    to its socket only. Losing the socket always triggers forced cleanup.
    """

    def __init__(self, lifecycle: LifecycleManager):
        self.lifecycle = lifecycle
        self._connections: Dict[str, WebSocket] = {}
        self._tasks: Dict[str, Set[asyncio.Task]] = {}
        self._cleanups: Set[asyncio.Future] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def handle(self, websocket: WebSocket) -> None:
        """Serve one connection until it goes away."""
        connection_id = str(uuid.uuid4())
        await websocket.accept()

        self._connections[connection_id] = websocket
        self._tasks[connection_id] = set()
        self.lifecycle.attach(connection_id, self._emitter(websocket))
        logger.info(f"Client connected: {connection_id}")

        try:
            while True:
                raw = await websocket.receive_text()
                self._dispatch(connection_id, raw)
        except WebSocketDisconnect:
            logger.info(f"Client disconnected: {connection_id}")
        except Exception as e:
            logger.warning(f"Connection {connection_id} lost: {e}")
        finally:
            # Cleanup must finish even if this handler is cancelled
            cleanup = asyncio.ensure_future(self._disconnect(connection_id))
            self._cleanups.add(cleanup)
            cleanup.add_done_callback(self._cleanups.discard)
            await asyncio.shield(cleanup)

    def _dispatch(self, connection_id: str, raw: str) -> None:
        """Parse a frame and schedule its handler; the lifecycle lock keeps arrival order."""
        try:
            message = ClientMessage.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid message from {connection_id}: {e.errors()[0]['msg']}")
            return

        if message.event == ClientEvent.START_BROWSER:
            coro = self.lifecycle.start(connection_id)
        elif message.event == ClientEvent.NAVIGATE:
            coro = self.lifecycle.navigate(connection_id, message.data)
        else:
            coro = self.lifecycle.stop(connection_id)

        task = asyncio.create_task(coro)
        tasks = self._tasks.setdefault(connection_id, set())
        tasks.add(task)
        task.add_done_callback(lambda t: self._task_done(connection_id, message.event, t))

    def _task_done(self, connection_id: str, event: ClientEvent, task: asyncio.Task) -> None:
        self._tasks.get(connection_id, set()).discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Handler for {event.value} on {connection_id} failed: {exc}")

    async def _disconnect(self, connection_id: str) -> None:
        """Forced cleanup first, then drop the connection's bookkeeping."""
        await self.lifecycle.release(connection_id)

        pending = self._tasks.pop(connection_id, set())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._connections.pop(connection_id, None)

    def _emitter(self, websocket: WebSocket) -> Emitter:
        async def emit(message: ServerMessage) -> None:
            await websocket.send_json(message.to_wire())

        return emit

    async def close_all(self, reason: str = "Server shutting down") -> None:
        """Close all WebSocket connections gracefully."""
        websockets = list(self._connections.values())
        for websocket in websockets:
            with contextlib.suppress(Exception):
                await websocket.close(code=1001, reason=reason)
        logger.info(f"Closed {len(websockets)} browser connections")

        if self._cleanups:
            await asyncio.gather(*self._cleanups, return_exceptions=True)
