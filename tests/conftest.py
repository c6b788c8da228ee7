"""
Shared pytest fixtures for browserhub tests.

This module provides common fixtures including:
- FakeProvider: Scriptable stand-in for the remote browser provider
- EventRecorder: Captures events the lifecycle manager emits to a connection
- Redis mocks for registry tests
"""

import asyncio
import os
import sys
import time
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from browserhub.modules.api import ServerMessage
from browserhub.modules.lifecycle import LifecycleManager
from browserhub.modules.provider import LiveViewInfo, SessionConfig, SessionHandle
from browserhub.modules.registry import InMemorySessionRegistry


# =============================================================================
# Provider Mocking Infrastructure
# =============================================================================

class FakeProvider:
    """
    Scriptable provider double.

    Hands out session ids S1, S2, ... with connect URL wss://x and live view
    https://live/<id>. Failures, delays and hangs are set per operation.

    Usage:
        async def test_stop_failure(fake_provider):
            fake_provider.stop_error = ProviderError("boom")
            ...
            assert fake_provider.stop_calls == ["S1"]
    """

    def __init__(self, connect_url: str = "wss://x"):
        self.connect_url = connect_url
        self.create_calls: List[SessionConfig] = []
        self.debug_calls: List[str] = []
        self.stop_calls: List[str] = []

        self.create_error: Optional[Exception] = None
        self.debug_error: Optional[Exception] = None
        self.stop_error: Optional[Exception] = None

        self.create_delay = 0.0
        self.hang_create = False
        self.hang_stop = False
        self.closed = False
        self._issued = 0

    async def create_session(self, config: SessionConfig) -> SessionHandle:
        self.create_calls.append(config)
        if self.create_delay:
            await asyncio.sleep(self.create_delay)
        if self.hang_create:
            await asyncio.Event().wait()
        if self.create_error:
            raise self.create_error

        self._issued += 1
        return SessionHandle(session_id=f"S{self._issued}", connect_url=self.connect_url)

    async def get_live_view_info(self, session_id: str) -> LiveViewInfo:
        self.debug_calls.append(session_id)
        if self.debug_error:
            raise self.debug_error
        return LiveViewInfo(debugger_url=f"https://live/{session_id}")

    async def stop_session(self, session_id: str) -> None:
        self.stop_calls.append(session_id)
        if self.hang_stop:
            await asyncio.Event().wait()
        if self.stop_error:
            raise self.stop_error

    async def aclose(self) -> None:
        self.closed = True


class EventRecorder:
    """Emitter that records every message sent to one connection."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[Dict[str, Any]] = []

    async def __call__(self, message: ServerMessage) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.messages.append(message.to_wire())

    @property
    def events(self) -> List[str]:
        return [m["event"] for m in self.messages]


def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll a condition set by another thread (TestClient runs the app in a portal)."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def registry():
    return InMemorySessionRegistry()


@pytest.fixture
def manager(registry, fake_provider):
    """Lifecycle manager wired to the fake provider with a short timeout."""
    return LifecycleManager(
        registry,
        fake_provider,
        session_config=SessionConfig(project_id="proj-1"),
        timeout=0.5,
    )


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async operations."""
    redis = AsyncMock()

    redis.set = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.delete = AsyncMock(return_value=1)
    redis.exists = AsyncMock(return_value=0)
    redis.ping = AsyncMock(return_value=True)

    redis.sadd = AsyncMock()
    redis.srem = AsyncMock()
    redis.smembers = AsyncMock(return_value=set())

    return redis


@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    This allows testing code that reads back what it writes.
    """
    storage = {}
    sets = {}

    redis = AsyncMock()

    async def mock_set(key, value, *args, **kwargs):
        storage[key] = value
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                count += 1
        return count

    async def mock_exists(*keys):
        return sum(1 for k in keys if k in storage)

    async def mock_sadd(key, *members):
        sets.setdefault(key, set()).update(members)
        return len(members)

    async def mock_srem(key, *members):
        existing = sets.get(key, set())
        removed = len(existing & set(members))
        existing.difference_update(members)
        return removed

    async def mock_smembers(key):
        return set(sets.get(key, set()))

    redis.set = mock_set
    redis.get = mock_get
    redis.delete = mock_delete
    redis.exists = mock_exists
    redis.sadd = mock_sadd
    redis.srem = mock_srem
    redis.smembers = mock_smembers
    redis._storage = storage  # Expose for test assertions
    redis._sets = sets

    return redis


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests that drive the full FastAPI application"
    )
