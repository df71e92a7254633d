"""Key-value backends behind the ranking store interface.

Every service function takes a store as its first argument. There are no
transactions: callers enforce invariants with read-then-write sequences, so
two concurrent requests on the same key can race (a duplicate vote slipping
through, or a lost append to a JSON index). ``increment`` is the one atomic
primitive and backs the once-per-day claims used by the rollover.
"""
from __future__ import annotations
from typing import Protocol
from redis import asyncio as aioredis


class RankingStore(Protocol):
    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...
    async def increment(self, key: str, delta: int = 1) -> int: ...
    async def hset(self, key: str, field: str, value: str) -> None: ...
    async def hget(self, key: str, field: str) -> str | None: ...
    async def hgetall(self, key: str) -> dict[str, str]: ...


class RedisStore:
    def __init__(self, client: aioredis.Redis):
        self._r = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        return cls(aioredis.Redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        return await self._r.get(key)

    async def set(self, key: str, value: str) -> None:
        await self._r.set(key, value)

    async def increment(self, key: str, delta: int = 1) -> int:
        return int(await self._r.incrby(key, delta))

    async def hset(self, key: str, field: str, value: str) -> None:
        await self._r.hset(key, field, value)

    async def hget(self, key: str, field: str) -> str | None:
        return await self._r.hget(key, field)

    async def hgetall(self, key: str) -> dict[str, str]:
        return dict(await self._r.hgetall(key))

    async def close(self) -> None:
        await self._r.aclose()


class MemoryStore:
    """In-process store for local runs and tests."""

    def __init__(self):
        self.strings: dict[str, str] = {}
        self.hashes: dict[str, dict[str, str]] = {}

    async def get(self, key: str) -> str | None:
        return self.strings.get(key)

    async def set(self, key: str, value: str) -> None:
        self.strings[key] = value

    async def increment(self, key: str, delta: int = 1) -> int:
        n = int(self.strings.get(key) or 0) + delta
        self.strings[key] = str(n)
        return n

    async def hset(self, key: str, field: str, value: str) -> None:
        self.hashes.setdefault(key, {})[field] = value

    async def hget(self, key: str, field: str) -> str | None:
        return self.hashes.get(key, {}).get(field)

    async def hgetall(self, key: str) -> dict[str, str]:
        return dict(self.hashes.get(key, {}))

    async def close(self) -> None:
        pass


def build_store(backend: str, redis_url: str) -> RankingStore:
    if backend == "memory":
        return MemoryStore()
    if backend == "redis":
        return RedisStore.from_url(redis_url)
    raise ValueError(f"unknown store backend: {backend}")
