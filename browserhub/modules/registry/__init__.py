"""
Registry Module - Black Box Interface

Purpose: Single source of truth for which connection owns which remote session
Interface: set(), get(), remove(), connection_ids(), count()
Hidden: Storage backend (process memory or Redis), key layout

remove() is idempotent so bulk cleanup never trips over missing entries.
"""

from typing import Protocol, List, Optional

from .registry import InMemorySessionRegistry, RedisSessionRegistry


class SessionRegistry(Protocol):
    """Protocol for registry backends."""

    async def set(self, connection_id: str, session_id: str) -> None:
        ...

    async def get(self, connection_id: str) -> Optional[str]:
        ...

    async def remove(self, connection_id: str) -> None:
        ...

    async def connection_ids(self) -> List[str]:
        ...

    async def count(self) -> int:
        ...

    async def ping(self) -> bool:
        ...


__all__ = ["SessionRegistry", "InMemorySessionRegistry", "RedisSessionRegistry"]
