"""memstash models -- re-exports the public option and stats classes.

    - options.py -- per-backend options and YAML store definitions
    - stats.py   -- hit/miss counters kept by every store
"""

from __future__ import annotations

from memstash.models.options import (
    MemoryStoreOptions,
    RedisStoreOptions,
    StoreBackend,
    StoreDefinition,
)
from memstash.models.stats import CacheStats

__all__ = [
    "CacheStats",
    "MemoryStoreOptions",
    "RedisStoreOptions",
    "StoreBackend",
    "StoreDefinition",
]
