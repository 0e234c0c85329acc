"""memstash: pluggable key/value caching with TTL expiry.

Stores:
    MemoryStore (in-process, background expiry sweep),
    RedisStore (delegates to an external key/value service)

Contracts:
    ICacheStore, IAsyncCacheStore, IKeyValueClient

Registry:
    CacheRegistry

Errors:
    MemstashError, InvalidArgumentError, NotFoundError, DuplicateKeyError,
    MaxSizeReachedError, StoreUnavailableError, ConfigurationError
"""

from memstash.interfaces import IAsyncCacheStore, ICacheStore, IKeyValueClient
from memstash.models import CacheStats, MemoryStoreOptions, RedisStoreOptions, StoreDefinition
from memstash.providers.cache import MemoryStore, RedisStore
from memstash.providers.kv import RedisKeyValueClient
from memstash.services import CacheRegistry
from memstash.utils.errors import (
    ConfigurationError,
    DuplicateKeyError,
    InvalidArgumentError,
    MaxSizeReachedError,
    MemstashError,
    NotFoundError,
    StoreUnavailableError,
)

__version__ = "0.1.0"

__all__ = [
    "CacheRegistry",
    "CacheStats",
    "ConfigurationError",
    "DuplicateKeyError",
    "IAsyncCacheStore",
    "ICacheStore",
    "IKeyValueClient",
    "InvalidArgumentError",
    "MaxSizeReachedError",
    "MemoryStore",
    "MemoryStoreOptions",
    "MemstashError",
    "NotFoundError",
    "RedisKeyValueClient",
    "RedisStore",
    "RedisStoreOptions",
    "StoreDefinition",
    "StoreUnavailableError",
]
