from typing import Dict, List, Optional


class InMemorySessionRegistry:
    """Connection -> remote session ownership table held in process memory."""

    def __init__(self):
        self._sessions: Dict[str, str] = {}

    async def set(self, connection_id: str, session_id: str) -> None:
        self._sessions[connection_id] = session_id

    async def get(self, connection_id: str) -> Optional[str]:
        return self._sessions.get(connection_id)

    async def remove(self, connection_id: str) -> None:
        self._sessions.pop(connection_id, None)

    async def connection_ids(self) -> List[str]:
        return list(self._sessions)

    async def count(self) -> int:
        return len(self._sessions)

    async def ping(self) -> bool:
        return True


class RedisSessionRegistry:
    def __init__(self, redis_client):
        """
        Initialize Redis-backed registry.

        Args:
            redis_client: Async Redis client (decode_responses=True)

        Shares the ownership table between workers so health and metrics
        report every session. Each worker only ever touches entries for its
        own connections.
        """
        self.redis = redis_client

    async def set(self, connection_id: str, session_id: str) -> None:
        await self.redis.set(f"browser:session:{connection_id}", session_id)

        await self.redis.sadd("browser:sessions:active", connection_id)

    async def get(self, connection_id: str) -> Optional[str]:
        return await self.redis.get(f"browser:session:{connection_id}")

    async def remove(self, connection_id: str) -> None:
        """Delete the entry; DEL and SREM are both no-ops when absent."""
        await self.redis.delete(f"browser:session:{connection_id}")
        await self.redis.srem("browser:sessions:active", connection_id)

    async def connection_ids(self) -> List[str]:
        """
        List connections that still own a session.

        Members whose key is gone are pruned on the way.
        """
        connection_ids = await self.redis.smembers("browser:sessions:active")

        live = []
        for connection_id in connection_ids:
            if await self.redis.exists(f"browser:session:{connection_id}"):
                live.append(connection_id)
            else:
                # Clean up stale entry
                await self.redis.srem("browser:sessions:active", connection_id)

        return sorted(live)

    async def count(self) -> int:
        return len(await self.connection_ids())

    async def ping(self) -> bool:
        return bool(await self.redis.ping())
