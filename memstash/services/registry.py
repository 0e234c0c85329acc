"""Named directory of cache stores.

The registry only mediates store lifecycle -- add, look up, remove.  Reads
and writes go straight to the store returned by :meth:`CacheRegistry.get_store`;
the registry never sits on that path.

# ─── HOW THE REGISTRY WORKS ────────────────────────────────────────────
#
#   registry = CacheRegistry()
#   registry.add_store("sessions", MemoryStore(options))
#   store = registry.get_store("sessions")     # NotFoundError if missing
#   store.set("user:1", {"name": "a"})
#   registry.remove_store("sessions", should_flush=True)
#
#   - Names are non-empty strings and unique; a clashing add_store raises
#     DuplicateKeyError and leaves the existing store in place.
#   - remove_store on an unknown name returns True (nothing to do).
#   - A removed store is closed, which stops its background sweep.
#   - Async stores need aremove_store() when the removal should flush.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import threading
from typing import Any, Union

import structlog

from memstash.interfaces.cache_store import IAsyncCacheStore, ICacheStore
from memstash.utils.errors import DuplicateKeyError, InvalidArgumentError, NotFoundError
from memstash.utils.logging import get_logger

CacheStore = Union[ICacheStore[Any, Any], IAsyncCacheStore[Any, Any]]


def _validate_name(name: Any, action: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"a valid non-empty string name is required to {action}")


class CacheRegistry:
    """Maps store names to backend instances.

    The registry is a plain object owned by the caller; there is no global
    instance.  Mutations are serialised with a re-entrant lock so concurrent
    threads registering different names cannot corrupt the mapping.
    """

    def __init__(self) -> None:
        self._stores: dict[str, CacheStore] = {}
        self._lock = threading.RLock()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_store(self, name: str, store: CacheStore) -> None:
        """Register *store* under *name*.

        Raises
        ------
        InvalidArgumentError
            If *name* is not a non-empty string or *store* is not a cache store.
        DuplicateKeyError
            If a store is already registered under *name*.
        """
        _validate_name(name, "add a cache store")
        if not isinstance(store, (ICacheStore, IAsyncCacheStore)):
            raise InvalidArgumentError(
                f"expected a cache store, got {type(store).__name__}", store_name=name
            )

        with self._lock:
            if name in self._stores:
                raise DuplicateKeyError(f"store '{name}' already exists", store_name=name)
            self._stores[name] = store

        self._logger.info("store_added", store=name, backend=type(store).__name__)

    def get_store(self, name: str) -> CacheStore:
        """Return the store registered under *name*.

        Raises
        ------
        InvalidArgumentError
            If *name* is not a non-empty string.
        NotFoundError
            If nothing is registered under *name*.
        """
        _validate_name(name, "get a cache store")
        with self._lock:
            store = self._stores.get(name)
        if store is None:
            raise NotFoundError(f"store '{name}' does not exist", store_name=name)
        return store

    def remove_store(self, name: str, should_flush: bool = False) -> bool:
        """Unregister and close the store under *name*, flushing it first if asked.

        Returns ``True`` both when a store was removed and when none existed.

        Raises
        ------
        InvalidArgumentError
            If *name* is not a non-empty string.
        TypeError
            If *should_flush* is set for an async store, whose flush cannot
            be awaited here.  Use :meth:`aremove_store` for those.
        """
        _validate_name(name, "remove a cache store")

        with self._lock:
            store = self._stores.get(name)
            if store is None:
                return True

            if should_flush:
                if isinstance(store, IAsyncCacheStore):
                    raise TypeError(
                        f"store '{name}' is async; flush it with aremove_store()"
                    )
                store.flush_all()

            del self._stores[name]

        store.close()
        self._logger.info("store_removed", store=name, flushed=should_flush)
        return True

    async def aremove_store(self, name: str, should_flush: bool = False) -> bool:
        """Async variant of :meth:`remove_store` that can flush async stores."""
        _validate_name(name, "remove a cache store")

        with self._lock:
            store = self._stores.get(name)
        if store is None:
            return True

        if should_flush:
            if isinstance(store, IAsyncCacheStore):
                await store.flush_all()
            else:
                store.flush_all()

        with self._lock:
            # Another caller may have swapped the entry while the flush awaited.
            if self._stores.get(name) is store:
                del self._stores[name]

        store.close()
        self._logger.info("store_removed", store=name, flushed=should_flush)
        return True

    def list_names(self) -> list[str]:
        """Return the names of every registered store."""
        with self._lock:
            return list(self._stores)

    def close(self) -> None:
        """Unregister every store and stop their background work."""
        with self._lock:
            stores = list(self._stores.items())
            self._stores.clear()
        for name, store in stores:
            store.close()
            self._logger.debug("store_closed", store=name)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._stores

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)
