"""Abstract base classes for cache stores (the backend contract).

Every backend exposes the same capability set -- get, set, delete,
flush_all, size, keys and hit/miss counters -- generic over the value type
``V`` and a hashable key type ``K``.  Two flavours exist:

* :class:`ICacheStore` -- synchronous, for stores living in this process.
* :class:`IAsyncCacheStore` -- data operations are coroutines, for stores that
  round-trip to an external service.

Both must signal the same error kinds, apply the same TTL resolution and
count hits/misses identically, whatever their synchronicity.

TTL resolution on ``set`` (shared by all backends):

    ignore_ttl=True      →  no expiry, whatever else is passed
    ttl > 0              →  expire ``ttl`` ms after the write
    store default > 0    →  expire ``default_ttl`` ms after the write
    otherwise            →  no expiry
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import Any, Generic, TypeVar

from memstash.models.stats import CacheStats
from memstash.utils.errors import InvalidArgumentError

V = TypeVar("V")
K = TypeVar("K", bound=Hashable)


def validate_key(key: Any, store_name: str | None = None) -> None:
    """Raise :class:`InvalidArgumentError` unless *key* is usable as a cache key.

    ``None``, empty ``str``/``bytes`` and unhashable objects are rejected.
    """
    if key is None:
        raise InvalidArgumentError("cache key is required", store_name=store_name)
    if isinstance(key, (str, bytes)) and not key:
        raise InvalidArgumentError("cache key must not be empty", store_name=store_name)
    try:
        hash(key)
    except TypeError:
        raise InvalidArgumentError(
            f"cache key of type {type(key).__name__} is not hashable",
            store_name=store_name,
        ) from None


def validate_value(value: Any, store_name: str | None = None) -> None:
    """Raise :class:`InvalidArgumentError` if *value* is ``None``."""
    if value is None:
        raise InvalidArgumentError("cannot store None", store_name=store_name)


def resolve_ttl(ignore_ttl: bool, ttl: int | None, default_ttl: int) -> int | None:
    """Return the TTL in milliseconds to apply on a write, or ``None`` for no expiry.

    Raises
    ------
    InvalidArgumentError
        If *ttl* is negative.
    """
    if ttl is not None and ttl < 0:
        raise InvalidArgumentError(f"ttl must be >= 0, got {ttl}")
    if ignore_ttl:
        return None
    if ttl:
        return ttl
    if default_ttl > 0:
        return default_ttl
    return None


class _StatsMixin:
    """Hit/miss accessors shared by both contract flavours."""

    _stats: CacheStats

    def get_hits(self) -> int:
        """Return how many lookups found a live value since the last flush."""
        return self._stats.hits

    def get_misses(self) -> int:
        """Return how many lookups found nothing since the last flush."""
        return self._stats.misses

    @property
    def stats(self) -> CacheStats:
        """A copy of the current counters."""
        return self._stats.snapshot()


class ICacheStore(_StatsMixin, ABC, Generic[V, K]):
    """Contract for synchronous, in-process cache stores."""

    @abstractmethod
    def get(self, key: K) -> V | None:
        """Return the live value stored under *key*, or ``None``.

        Increments the hit counter when a value is returned and the miss
        counter otherwise.

        Raises
        ------
        InvalidArgumentError
            If *key* is ``None``, empty or unhashable.
        """

    @abstractmethod
    def set(self, key: K, value: V, ignore_ttl: bool = False, ttl: int | None = None) -> bool:
        """Store *value* under *key* and return ``True``.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The value to store; ``None`` is rejected.
        ignore_ttl:
            When ``True`` the entry never expires, regardless of *ttl* and
            the store's default TTL.
        ttl:
            Time-to-live in milliseconds, relative to this call.

        Raises
        ------
        InvalidArgumentError
            If *key* or *value* is missing, or *ttl* is negative.
        MaxSizeReachedError
            If the store is capped, full, and *key* is new.
        """

    @abstractmethod
    def delete(self, key: K) -> bool:
        """Remove *key*; return whether a value was actually removed."""

    @abstractmethod
    def flush_all(self) -> bool:
        """Remove every entry and reset the hit/miss counters."""

    @abstractmethod
    def size(self) -> int:
        """Return the number of live entries."""

    @abstractmethod
    def keys(self) -> list[K]:
        """Return every live key; ``len(keys()) == size()``."""

    def close(self) -> None:
        """Release background resources.  The default does nothing."""


class IAsyncCacheStore(_StatsMixin, ABC, Generic[V, K]):
    """Contract for cache stores backed by an external service.

    Same semantics as :class:`ICacheStore`; the data operations suspend on
    each round trip.  ``get_hits``/``get_misses`` stay synchronous since the
    counters are kept locally.
    """

    @abstractmethod
    async def get(self, key: K) -> V | None:
        """Return the value stored under *key*, or ``None``."""

    @abstractmethod
    async def set(
        self, key: K, value: V, ignore_ttl: bool = False, ttl: int | None = None
    ) -> bool:
        """Store *value* under *key*; see :meth:`ICacheStore.set`."""

    @abstractmethod
    async def delete(self, key: K) -> bool:
        """Remove *key*; return whether a value was actually removed."""

    @abstractmethod
    async def flush_all(self) -> bool:
        """Remove every entry and reset the hit/miss counters."""

    @abstractmethod
    async def size(self) -> int:
        """Return the number of stored entries."""

    @abstractmethod
    async def keys(self) -> list[K]:
        """Return every stored key."""

    def close(self) -> None:
        """Release background resources.  The default does nothing."""
