import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Set

from browserhub.modules.api import (
    ServerMessage,
    SessionState,
    browser_error,
    browser_ready,
    navigation_complete,
)
from browserhub.modules.provider import BrowserProvider, ProviderError, SessionConfig

logger = logging.getLogger("browserhub.lifecycle")

Emitter = Callable[[ServerMessage], Awaitable[None]]

NOT_CONFIGURED_MESSAGE = "BrowserBase not configured"


@dataclass
class ConnectionState:
    """Per-connection bookkeeping owned by the lifecycle manager."""

    connection_id: str
    emit: Emitter
    state: SessionState = SessionState.IDLE
    alive: bool = True
    session_id: Optional[str] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class LifecycleManager:
    def __init__(
        self,
        registry,
        provider: Optional[BrowserProvider],
        session_config: Optional[SessionConfig] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize lifecycle manager.

        Args:
            registry: Session registry (connection -> provider session)
            provider: Provider client, or None when not configured
            session_config: Parameters for every create call
            timeout: Max seconds to wait on any single provider call
        """
        self.registry = registry
        self.provider = provider
        self.session_config = session_config
        self.timeout = timeout
        self._connections: Dict[str, ConnectionState] = {}
        self._background: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return self.provider is not None

    def attach(self, connection_id: str, emit: Emitter) -> None:
        """Register a live connection and the callback that reaches it."""
        self._connections[connection_id] = ConnectionState(connection_id=connection_id, emit=emit)

    def state(self, connection_id: str) -> SessionState:
        conn = self._connections.get(connection_id)
        return conn.state if conn else SessionState.IDLE

    def connection_ids(self) -> List[str]:
        return list(self._connections)

    async def start(self, connection_id: str) -> None:
        """
        Create a remote browser for the connection.

        Logic:
        1. Refuse with a fixed error when no provider is configured
        2. Ignore unless the connection is IDLE (one session per connection)
        3. Create the session, then fetch its live view URL
        4. Record ownership and emit browser-ready
        5. On any failure return to IDLE and emit browser-error
        """
        conn = self._connections.get(connection_id)
        if conn is None:
            logger.debug(f"Start requested for unknown connection {connection_id}")
            return

        if not self.enabled:
            await self._emit(conn, browser_error(NOT_CONFIGURED_MESSAGE))
            return

        async with conn.lock:
            if not conn.alive:
                return
            if conn.state != SessionState.IDLE:
                logger.info(f"Ignoring start for {connection_id}: browser is {conn.state.value}")
                return

            conn.state = SessionState.CREATING
            logger.info(f"Creating BrowserBase session for {connection_id}...")

            try:
                await self._open_session(conn)
            except BaseException:
                # Cancelled mid-create; the connection must be startable again
                if conn.state == SessionState.CREATING:
                    conn.state = SessionState.IDLE
                raise

    async def _open_session(self, conn: ConnectionState) -> None:
        connection_id = conn.connection_id

        try:
            handle = await self._call(
                self.provider.create_session(self.session_config), "create session"
            )
        except ProviderError as e:
            conn.state = SessionState.IDLE
            logger.error(f"Failed to start browser for {connection_id}: {e}")
            await self._emit(conn, browser_error(str(e)))
            return

        try:
            live_view = await self._call(
                self.provider.get_live_view_info(handle.session_id), "fetch live view"
            )
            await self.registry.set(connection_id, handle.session_id)
        except asyncio.CancelledError:
            self._in_background(self._abandon(connection_id, handle.session_id))
            raise
        except Exception as e:
            # Session exists remotely but nobody owns it locally; give it back.
            logger.error(f"Failed to start browser for {connection_id}: {e}")
            await self._stop_remote(handle.session_id)
            conn.state = SessionState.IDLE
            await self._emit(conn, browser_error(str(e) or type(e).__name__))
            return

        conn.session_id = handle.session_id
        conn.state = SessionState.READY
        logger.info(f"Browser session created: {handle.session_id}")
        logger.info(f"Live view URL: {live_view.debugger_url}")

        await self._emit(
            conn,
            browser_ready(
                session_id=handle.session_id,
                live_view_url=live_view.debugger_url,
                connect_url=handle.connect_url,
            ),
        )

    async def navigate(self, connection_id: str, url: str) -> None:
        """
        Acknowledge a navigation request.

        Navigation is not forwarded to the remote browser yet; a READY
        connection gets navigation-complete, anything else is ignored.
        """
        conn = self._connections.get(connection_id)
        if conn is None:
            return

        async with conn.lock:
            if conn.state != SessionState.READY:
                logger.info(f"No active session for navigation ({connection_id})")
                return

            await self._emit(conn, navigation_complete())
            logger.info(f"Navigation requested to: {url}")

    async def stop(self, connection_id: str) -> None:
        """Explicit stop-browser. No-op without an active session."""
        conn = self._connections.get(connection_id)
        if conn is None:
            return

        async with conn.lock:
            await self._teardown(connection_id, conn)

    async def release(self, connection_id: str) -> None:
        """
        Forced cleanup for a lost connection.

        Marks the connection dead first so queued starts bail out, waits for
        any in-flight operation, then stops the session and forgets the
        connection. The registry entry is always removed.
        """
        conn = self._connections.get(connection_id)
        if conn is None:
            logger.debug(f"Release requested for unknown connection {connection_id}")
            return

        conn.alive = False
        async with conn.lock:
            try:
                await self._teardown(connection_id, conn)
            finally:
                self._connections.pop(connection_id, None)

    async def drain(self) -> int:
        """
        Force cleanup of every connection attached to this manager.

        Called at shutdown. Registry entries of other processes sharing the
        same backend are left alone.

        Returns:
            Number of connections drained
        """
        connection_ids = list(self._connections)
        if connection_ids:
            logger.info(f"Draining {len(connection_ids)} browser connection(s)")
        results = await asyncio.gather(
            *(self.release(connection_id) for connection_id in connection_ids),
            return_exceptions=True,
        )
        for connection_id, result in zip(connection_ids, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to drain {connection_id}: {result}")

        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

        return len(connection_ids)

    async def _teardown(self, connection_id: str, conn: ConnectionState) -> None:
        """
        Stop the owned session (best effort) and drop the registry entry.

        The session id recorded on the connection is authoritative; the
        registry only mirrors it, so a lost or unreadable entry never hides
        a live session.
        """
        session_id = conn.session_id
        if session_id is None:
            conn.state = SessionState.IDLE
            await self._forget(connection_id)
            return

        conn.state = SessionState.STOPPING

        try:
            await self._stop_remote(session_id)
        finally:
            await self._forget(connection_id)
            conn.session_id = None
            conn.state = SessionState.IDLE

    async def _forget(self, connection_id: str) -> None:
        try:
            await self.registry.remove(connection_id)
        except Exception as e:
            logger.error(f"Failed to remove registry entry for {connection_id}: {e}")

    async def _abandon(self, connection_id: str, session_id: str) -> None:
        """Release a session whose start was cancelled before it was owned."""
        await self._stop_remote(session_id)
        try:
            if await self.registry.get(connection_id) == session_id:
                await self.registry.remove(connection_id)
        except Exception as e:
            logger.error(f"Failed to remove registry entry for {connection_id}: {e}")

    def _in_background(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _stop_remote(self, session_id: str) -> bool:
        """Ask the provider to release a session. Failures are logged, never raised."""
        if self.provider is None:
            return False

        try:
            await self._call(self.provider.stop_session(session_id), "stop session")
        except ProviderError as e:
            logger.error(f"Failed to stop browser session {session_id}: {e}")
            return False

        logger.info(f"Browser session stopped: {session_id}")
        return True

    async def _call(self, coro, action: str):
        """Await a provider call with the configured timeout."""
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Provider {action} timed out after {self.timeout:g}s") from e
        except ProviderError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected provider error during {action}")
            raise ProviderError(f"Provider {action} failed: {str(e) or type(e).__name__}") from e

    async def _emit(self, conn: ConnectionState, message: ServerMessage) -> None:
        try:
            await conn.emit(message)
        except Exception as e:
            logger.warning(f"Could not deliver {message.event.value} to {conn.connection_id}: {e}")
