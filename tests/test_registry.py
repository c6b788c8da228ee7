import pytest

from browserhub.modules.registry import InMemorySessionRegistry, RedisSessionRegistry


@pytest.mark.asyncio
async def test_memory_set_get_remove():
    """Test point operations on the in-memory table."""
    registry = InMemorySessionRegistry()

    await registry.set("c1", "S1")
    assert await registry.get("c1") == "S1"
    assert await registry.get("c2") is None

    await registry.remove("c1")
    assert await registry.get("c1") is None


@pytest.mark.asyncio
async def test_memory_remove_is_idempotent():
    """Test removing an absent entry does not raise."""
    registry = InMemorySessionRegistry()

    await registry.remove("missing")
    await registry.set("c1", "S1")
    await registry.remove("c1")
    await registry.remove("c1")

    assert await registry.count() == 0


@pytest.mark.asyncio
async def test_memory_one_entry_per_connection():
    """Test a connection maps to at most one session."""
    registry = InMemorySessionRegistry()

    await registry.set("c1", "S1")
    await registry.set("c1", "S2")
    await registry.set("c2", "S3")

    assert await registry.get("c1") == "S2"
    assert sorted(await registry.connection_ids()) == ["c1", "c2"]
    assert await registry.count() == 2
    assert await registry.ping() is True


@pytest.mark.asyncio
async def test_redis_set_never_expires(mock_redis):
    """Test entries live until removed; the owning worker decides when."""
    registry = RedisSessionRegistry(mock_redis)

    await registry.set("c1", "S1")

    mock_redis.set.assert_called_once_with("browser:session:c1", "S1")
    mock_redis.sadd.assert_called_once_with("browser:sessions:active", "c1")
    mock_redis.expire.assert_not_called()


@pytest.mark.asyncio
async def test_redis_get(mock_redis):
    mock_redis.get.return_value = "S1"
    registry = RedisSessionRegistry(mock_redis)

    assert await registry.get("c1") == "S1"
    mock_redis.get.assert_called_once_with("browser:session:c1")


@pytest.mark.asyncio
async def test_redis_remove(mock_redis):
    """Test remove deletes the key and the active-set member."""
    registry = RedisSessionRegistry(mock_redis)

    await registry.remove("c1")

    mock_redis.delete.assert_called_once_with("browser:session:c1")
    mock_redis.srem.assert_called_once_with("browser:sessions:active", "c1")


@pytest.mark.asyncio
async def test_redis_connection_ids_prunes_missing_keys(mock_redis):
    """Test members whose key is gone are dropped from the active set."""
    mock_redis.smembers.return_value = {"c1", "c2"}
    mock_redis.exists.side_effect = lambda key: 1 if key == "browser:session:c1" else 0
    registry = RedisSessionRegistry(mock_redis)

    assert await registry.connection_ids() == ["c1"]
    mock_redis.srem.assert_called_once_with("browser:sessions:active", "c2")


@pytest.mark.asyncio
async def test_redis_round_trip(mock_redis_with_data):
    """Test the registry reads back what it writes."""
    registry = RedisSessionRegistry(mock_redis_with_data)

    await registry.set("c1", "S1")
    await registry.set("c2", "S2")
    assert await registry.get("c1") == "S1"
    assert await registry.count() == 2

    await registry.remove("c1")
    await registry.remove("c1")

    assert await registry.get("c1") is None
    assert await registry.connection_ids() == ["c2"]
    assert "browser:session:c1" not in mock_redis_with_data._storage
