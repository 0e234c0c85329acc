"""Cache store providers.

MemoryStore is a dict-based TTL cache living in this process -- fast but not
shared across processes.  RedisStore keeps the same contract while delegating
storage and expiry to an external key/value service, so callers can swap one
for the other behind a registry name without changing any business logic.
"""

from memstash.providers.cache.memory_store import DEFAULT_SWEEP_INTERVAL_MS, MemoryStore
from memstash.providers.cache.redis_store import RedisStore

__all__ = ["DEFAULT_SWEEP_INTERVAL_MS", "MemoryStore", "RedisStore"]
