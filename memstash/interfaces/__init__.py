"""Public interface definitions for cache stores and the clients they use.

Every backend is accessed exclusively through the abstract base classes
defined here.  Concrete adapters live in ``memstash/providers/`` and are
handed to a :class:`~memstash.services.registry.CacheRegistry` by the caller
(or by the factories in ``memstash/main.py``).

CONCRETE PROVIDER MAP:
    Interface            →  Concrete implementations (in memstash/providers/)
    ─────────────────────────────────────────────────────────────────────
    ICacheStore          →  MemoryStore
    IAsyncCacheStore     →  RedisStore
    IKeyValueClient      →  RedisKeyValueClient
"""

from memstash.interfaces.cache_store import (
    IAsyncCacheStore,
    ICacheStore,
    resolve_ttl,
    validate_key,
    validate_value,
)
from memstash.interfaces.kv_client import IKeyValueClient

__all__ = [
    "IAsyncCacheStore",
    "ICacheStore",
    "IKeyValueClient",
    "resolve_ttl",
    "validate_key",
    "validate_value",
]
