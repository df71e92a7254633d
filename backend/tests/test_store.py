from __future__ import annotations
import pytest
from dailydraw.store import MemoryStore, RedisStore, build_store


@pytest.mark.asyncio
async def test_memory_store_strings_and_counters():
    s = MemoryStore()
    assert await s.get("k") is None
    await s.set("k", "v")
    assert await s.get("k") == "v"
    assert await s.increment("n") == 1
    assert await s.increment("n", 4) == 5
    assert await s.get("n") == "5"


@pytest.mark.asyncio
async def test_memory_store_hashes():
    s = MemoryStore()
    assert await s.hgetall("h") == {}
    await s.hset("h", "alice", "1")
    await s.hset("h", "alice", "1")
    await s.hset("h", "bob", "1")
    assert await s.hget("h", "alice") == "1"
    assert await s.hget("h", "carol") is None
    all_ = await s.hgetall("h")
    assert all_ == {"alice": "1", "bob": "1"}
    # callers get a copy
    all_["mallory"] = "1"
    assert len(await s.hgetall("h")) == 2


def test_build_store_backends():
    assert isinstance(build_store("memory", ""), MemoryStore)
    assert isinstance(build_store("redis", "redis://localhost:6379/0"), RedisStore)
    with pytest.raises(ValueError):
        build_store("sqlite", "")
