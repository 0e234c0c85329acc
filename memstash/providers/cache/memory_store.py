"""In-process TTL cache store.

Keeps values in a plain dict and absolute expiry times in a parallel dict.
Expired entries disappear through two call sites that share one internal
removal path:

* lazily, when ``get`` (or ``size``/``keys``/a capacity check) finds a key
  whose expiry is at or before "now";
* eagerly, when the background :class:`~memstash.utils.sweeper.SweepTimer`
  fires and scans the expiry dict.

# ─── EXPIRY STATES (per key) ───────────────────────────────────────────
#
#   (absent) ──set──→ no-TTL ─────────────────────────┐
#      │                                              │ delete / flush_all
#      └─────set──→ live ──time passes──→ expired ────┤
#                    │                      │         ▼
#                    └──delete/flush_all────┴──sweep/get──→ (absent)
#
# The sweep thread and caller threads share the same RLock, so a sweep
# pass never interleaves with a read or a write.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

import structlog

from memstash.interfaces.cache_store import (
    ICacheStore,
    K,
    V,
    resolve_ttl,
    validate_key,
    validate_value,
)
from memstash.models.options import MemoryStoreOptions
from memstash.models.stats import CacheStats
from memstash.utils.errors import MaxSizeReachedError
from memstash.utils.logging import get_logger
from memstash.utils.sweeper import SweepTimer

# Sweep period used when the options leave sweep_interval at 0 (one hour).
DEFAULT_SWEEP_INTERVAL_MS = 3_600_000

_MISSING: Any = object()


def _monotonic_ms() -> float:
    return time.monotonic_ns() / 1_000_000


class MemoryStore(ICacheStore[V, K]):
    """Dict-backed cache with per-key TTLs and a background expiry sweep.

    Parameters
    ----------
    options:
        Key cap, default TTL and sweep interval.  Defaults to an unbounded
        store without default expiry (and therefore without a sweep).
    name:
        Optional label used in log lines and error messages.
    clock:
        Callable returning the current monotonic time in milliseconds.
        Tests inject a fake clock to drive expiry deterministically.
    """

    def __init__(
        self,
        options: MemoryStoreOptions | None = None,
        *,
        name: str | None = None,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        self._options = options or MemoryStoreOptions()
        self._name = name
        self._clock = clock
        self._data: dict[K, V] = {}
        self._expirations: dict[K, float] = {}
        self._stats = CacheStats()
        self._lock = threading.RLock()
        # Guards _sweep_timer and _closed.  Never taken by the sweep thread,
        # so holding it while joining that thread cannot deadlock.
        self._timer_lock = threading.Lock()
        self._sweep_timer: SweepTimer | None = None
        self._closed = False
        self._logger: structlog.BoundLogger = get_logger(__name__, store=name)
        with self._timer_lock:
            self._start_sweep()

    @property
    def options(self) -> MemoryStoreOptions:
        return self._options

    @property
    def sweeping(self) -> bool:
        """Whether a background sweep timer is currently running."""
        return self._sweep_timer is not None and self._sweep_timer.running

    # ------------------------------------------------------------------
    # ICacheStore implementation
    # ------------------------------------------------------------------

    def get(self, key: K) -> V | None:
        validate_key(key, self._name)

        with self._lock:
            if self._is_expired(key, self._clock()):
                self._remove(key)

            value = self._data.get(key, _MISSING)
            if value is _MISSING:
                self._stats.record_miss()
                self._logger.debug("cache_miss", key=repr(key))
                return None

            self._stats.record_hit()
            self._logger.debug("cache_hit", key=repr(key))
            return value

    def set(self, key: K, value: V, ignore_ttl: bool = False, ttl: int | None = None) -> bool:
        validate_key(key, self._name)
        validate_value(value, self._name)
        effective_ttl = resolve_ttl(ignore_ttl, ttl, self._options.default_ttl)

        with self._lock:
            now = self._clock()
            self._ensure_capacity(key, now)

            previous_value = self._data.get(key, _MISSING)
            previous_expiry = self._expirations.pop(key, _MISSING)
            self._data[key] = value

            if effective_ttl is not None:
                try:
                    self._record_expiry(key, now + effective_ttl)
                except Exception:
                    # Never leave a value behind without the TTL it asked for.
                    self._restore(key, previous_value, previous_expiry)
                    raise

        self._logger.debug("cache_set", key=repr(key), ttl_ms=effective_ttl)
        return True

    def delete(self, key: K) -> bool:
        validate_key(key, self._name)
        with self._lock:
            return self._remove(key)

    def flush_all(self) -> bool:
        with self._timer_lock:
            self._stop_sweep()
            with self._lock:
                self._data = {}
                self._expirations = {}
                self._stats.reset()
            if not self._closed:
                self._start_sweep()
        self._logger.info("store_flushed")
        return True

    def size(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._data)

    def keys(self) -> list[K]:
        with self._lock:
            self._purge_expired(self._clock())
            return list(self._data)

    def close(self) -> None:
        """Stop the background sweep for good.  Stored data is left untouched.

        The store stays usable afterwards; expired keys are then only
        removed lazily, and :meth:`flush_all` no longer restarts the sweep.
        """
        with self._timer_lock:
            self._closed = True
            self._stop_sweep()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _is_expired(self, key: K, now: float) -> bool:
        expiry = self._expirations.get(key)
        return expiry is not None and expiry <= now

    def _remove(self, key: K) -> bool:
        """Single removal path shared by delete, lazy expiry and the sweep."""
        removed = self._data.pop(key, _MISSING) is not _MISSING
        self._expirations.pop(key, None)
        return removed

    def _record_expiry(self, key: K, expires_at: float) -> None:
        self._expirations[key] = expires_at

    def _restore(self, key: K, previous_value: Any, previous_expiry: Any) -> None:
        if previous_value is _MISSING:
            self._data.pop(key, None)
        else:
            self._data[key] = previous_value
        if previous_expiry is not _MISSING:
            self._expirations[key] = previous_expiry
        else:
            self._expirations.pop(key, None)

    def _ensure_capacity(self, key: K, now: float) -> None:
        max_keys = self._options.max_keys
        if max_keys <= 0 or key in self._data:
            return
        if len(self._data) >= max_keys:
            self._purge_expired(now)
        if len(self._data) >= max_keys:
            raise MaxSizeReachedError(
                f"max keys limit: {max_keys} exhausted. Cannot add any new key",
                store_name=self._name,
            )

    def _purge_expired(self, now: float) -> int:
        if not self._expirations:
            return 0
        expired = [key for key, expiry in self._expirations.items() if expiry <= now]
        for key in expired:
            self._remove(key)
        return len(expired)

    def _sweep(self) -> int:
        """One pass of the background sweep; returns the number of evicted keys."""
        with self._lock:
            evicted = self._purge_expired(self._clock())
        if evicted:
            self._logger.debug("sweep_evicted", evicted=evicted)
        return evicted

    # _start_sweep and _stop_sweep expect the caller to hold _timer_lock.

    def _start_sweep(self) -> None:
        if self._sweep_timer is not None or self._options.default_ttl <= 0:
            return
        interval = self._options.sweep_interval or DEFAULT_SWEEP_INTERVAL_MS
        self._sweep_timer = SweepTimer(
            interval,
            self._sweep,
            name=f"memstash-sweep-{self._name or id(self)}",
        )
        self._sweep_timer.start()

    def _stop_sweep(self) -> None:
        timer = self._sweep_timer
        self._sweep_timer = None
        if timer is not None:
            timer.stop()

    def __repr__(self) -> str:
        return (
            f"MemoryStore(name={self._name!r}, max_keys={self._options.max_keys}, "
            f"default_ttl={self._options.default_ttl}, entries={len(self._data)})"
        )
