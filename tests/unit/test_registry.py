"""Unit tests for CacheRegistry."""

from __future__ import annotations

import threading
from datetime import datetime

import pytest

from memstash.providers.cache.memory_store import MemoryStore
from memstash.providers.cache.redis_store import RedisStore
from memstash.services.registry import CacheRegistry
from memstash.utils.errors import DuplicateKeyError, InvalidArgumentError, NotFoundError

_INVALID_NAMES = [datetime.now(), {}, [], 1, float("nan"), None, lambda: None, float("inf"), "", "   "]


class TestCacheRegistryAddAndGet:
    def test_starts_empty(self, registry: CacheRegistry) -> None:
        assert registry.list_names() == []
        assert len(registry) == 0

    def test_get_missing_store_raises_not_found(self, registry: CacheRegistry) -> None:
        with pytest.raises(NotFoundError):
            registry.get_store("A_STORE_THAT_DOESNT_EXIST")

    def test_add_and_get(self, registry: CacheRegistry, make_store) -> None:
        store = make_store()
        registry.add_store("NO_TTL", store)
        assert registry.get_store("NO_TTL") is store
        assert registry.list_names() == ["NO_TTL"]
        assert "NO_TTL" in registry

    def test_add_several_stores(self, registry: CacheRegistry, make_store, mock_kv_client) -> None:
        registry.add_store("a", make_store())
        registry.add_store("b", make_store())
        registry.add_store("c", RedisStore(mock_kv_client))
        assert sorted(registry.list_names()) == ["a", "b", "c"]
        assert isinstance(registry.get_store("a"), MemoryStore)
        assert isinstance(registry.get_store("c"), RedisStore)

    def test_duplicate_name_rejected_and_original_kept(
        self, registry: CacheRegistry, make_store
    ) -> None:
        original = make_store()
        registry.add_store("x", original)
        with pytest.raises(DuplicateKeyError):
            registry.add_store("x", make_store())
        assert registry.get_store("x") is original
        assert len(registry) == 1

    @pytest.mark.parametrize("name", _INVALID_NAMES)
    def test_add_rejects_invalid_names(self, registry: CacheRegistry, make_store, name) -> None:
        with pytest.raises(InvalidArgumentError):
            registry.add_store(name, make_store())
        assert len(registry) == 0

    @pytest.mark.parametrize("name", _INVALID_NAMES)
    def test_get_rejects_invalid_names(self, registry: CacheRegistry, name) -> None:
        with pytest.raises(InvalidArgumentError):
            registry.get_store(name)

    def test_add_rejects_non_store(self, registry: CacheRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            registry.add_store("x", {"not": "a store"})


class TestCacheRegistryRemove:
    def test_remove_missing_store_returns_true(self, registry: CacheRegistry) -> None:
        assert registry.remove_store("RANDOM_STORE_KEY") is True
        with pytest.raises(NotFoundError):
            registry.get_store("RANDOM_STORE_KEY")

    @pytest.mark.parametrize("name", [None, 1, ""])
    def test_remove_rejects_invalid_names(self, registry: CacheRegistry, name) -> None:
        with pytest.raises(InvalidArgumentError):
            registry.remove_store(name)

    def test_remove_without_flush_keeps_data(self, registry: CacheRegistry, make_store) -> None:
        store = make_store()
        store.set("k", "v")
        registry.add_store("s", store)
        assert registry.remove_store("s") is True
        assert "s" not in registry
        assert store.get("k") == "v"

    def test_remove_with_flush_empties_store(self, registry: CacheRegistry, make_store) -> None:
        store = make_store()
        for i in range(3):
            store.set(f"k{i}", i)
        registry.add_store("s", store)
        assert registry.remove_store("s", should_flush=True) is True
        assert "s" not in registry
        assert store.size() == 0

    def test_remove_stops_sweep(self, registry: CacheRegistry, make_store) -> None:
        store = make_store(default_ttl=1000, sweep_interval=10)
        registry.add_store("s", store)
        assert store.sweeping is True
        registry.remove_store("s")
        assert store.sweeping is False

    def test_name_reusable_after_remove(self, registry: CacheRegistry, make_store) -> None:
        registry.add_store("s", make_store())
        registry.remove_store("s")
        replacement = make_store()
        registry.add_store("s", replacement)
        assert registry.get_store("s") is replacement

    def test_sync_flush_of_async_store_rejected(
        self, registry: CacheRegistry, mock_kv_client
    ) -> None:
        registry.add_store("r", RedisStore(mock_kv_client))
        with pytest.raises(TypeError, match="aremove_store"):
            registry.remove_store("r", should_flush=True)
        assert "r" in registry
        mock_kv_client.flush_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_aremove_flushes_async_store(
        self, registry: CacheRegistry, mock_kv_client
    ) -> None:
        registry.add_store("r", RedisStore(mock_kv_client))
        assert await registry.aremove_store("r", should_flush=True) is True
        mock_kv_client.flush_all.assert_awaited_once()
        assert "r" not in registry

    @pytest.mark.asyncio
    async def test_aremove_flushes_sync_store(self, registry: CacheRegistry, make_store) -> None:
        store = make_store()
        store.set("k", "v")
        registry.add_store("s", store)
        assert await registry.aremove_store("s", should_flush=True) is True
        assert store.size() == 0

    @pytest.mark.asyncio
    async def test_aremove_missing_returns_true(self, registry: CacheRegistry) -> None:
        assert await registry.aremove_store("missing") is True

    def test_close_stops_every_store(self, make_store) -> None:
        reg = CacheRegistry()
        stores = [make_store(default_ttl=1000, sweep_interval=10) for _ in range(3)]
        for i, store in enumerate(stores):
            reg.add_store(f"s{i}", store)
        reg.close()
        assert reg.list_names() == []
        assert not any(store.sweeping for store in stores)


class TestCacheRegistryConcurrency:
    def test_concurrent_adds_of_distinct_names(self, registry: CacheRegistry, make_store) -> None:
        stores = [make_store() for _ in range(64)]

        def _add(index: int) -> None:
            registry.add_store(f"store-{index}", stores[index])

        threads = [threading.Thread(target=_add, args=(i,)) for i in range(64)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 64

    def test_concurrent_adds_of_same_name_admit_one(
        self, registry: CacheRegistry, make_store
    ) -> None:
        stores = [make_store() for _ in range(16)]
        failures: list[DuplicateKeyError] = []

        def _add(index: int) -> None:
            try:
                registry.add_store("shared", stores[index])
            except DuplicateKeyError as exc:
                failures.append(exc)

        threads = [threading.Thread(target=_add, args=(i,)) for i in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 1
        assert len(failures) == 15
