"""Shared pytest fixtures for the memstash test suite."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from memstash.interfaces.kv_client import IKeyValueClient
from memstash.models.options import MemoryStoreOptions
from memstash.providers.cache.memory_store import MemoryStore
from memstash.services.registry import CacheRegistry

# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class FakeClock:
    """Millisecond clock that only moves when a test advances it."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# In-process stores
# ---------------------------------------------------------------------------


@pytest.fixture
def make_store(clock: FakeClock) -> Iterator[Any]:
    """Factory building MemoryStores on the fake clock; closes them on teardown."""
    created: list[MemoryStore] = []

    def _make(
        max_keys: int = 0,
        default_ttl: int = 0,
        sweep_interval: int = 0,
        name: str | None = None,
    ) -> MemoryStore:
        store: MemoryStore = MemoryStore(
            MemoryStoreOptions(
                max_keys=max_keys,
                default_ttl=default_ttl,
                sweep_interval=sweep_interval,
            ),
            name=name,
            clock=clock,
        )
        created.append(store)
        return store

    yield _make

    for store in created:
        store.close()


@pytest.fixture
def registry() -> Iterator[CacheRegistry]:
    reg = CacheRegistry()
    yield reg
    reg.close()


# ---------------------------------------------------------------------------
# External key/value service doubles
# ---------------------------------------------------------------------------


def redis_glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a Redis ``KEYS`` pattern, honouring backslash escapes."""
    parts: list[str] = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        elif char == "[":
            members: list[str] = []
            for member in chars:
                if member == "]":
                    break
                members.append(member)
            parts.append("[" + "".join(re.escape(m) for m in members) + "]")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


class InMemoryKeyValueClient(IKeyValueClient):
    """Dict-backed IKeyValueClient honouring ``PX`` expiry on a FakeClock.

    Records every ``set`` call so tests can assert on the option tokens the
    store sent.
    """

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self.data: dict[str, str] = {}
        self.expiry: dict[str, float] = {}
        self.set_calls: list[tuple[Any, ...]] = []

    async def get(self, key: str) -> str | None:
        self._expire(key)
        return self.data.get(key)

    async def set(self, key: str, value: str, *args: Any) -> Any:
        self.set_calls.append((key, value, *args))
        self.data[key] = value
        self.expiry.pop(key, None)
        if len(args) >= 2 and args[0] == "PX":
            self.expiry[key] = self._clock() + int(args[1])
        return "OK"

    async def delete(self, key: str) -> int:
        self.expiry.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0

    async def keys(self, pattern: str) -> list[str]:
        for key in list(self.data):
            self._expire(key)
        regex = redis_glob_to_regex(pattern)
        return [key for key in self.data if regex.fullmatch(key)]

    async def flush_all(self) -> Any:
        self.data.clear()
        self.expiry.clear()
        return "OK"

    def _expire(self, key: str) -> None:
        expires_at = self.expiry.get(key)
        if expires_at is not None and expires_at <= self._clock():
            self.data.pop(key, None)
            self.expiry.pop(key, None)


@pytest.fixture
def kv_client(clock: FakeClock) -> InMemoryKeyValueClient:
    return InMemoryKeyValueClient(clock)


@pytest.fixture
def mock_kv_client() -> Any:
    """Return a MagicMock(spec=IKeyValueClient) with AsyncMock methods."""
    mock = MagicMock(spec=IKeyValueClient)
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value="OK")
    mock.delete = AsyncMock(return_value=0)
    mock.keys = AsyncMock(return_value=[])
    mock.flush_all = AsyncMock(return_value="OK")
    return mock
