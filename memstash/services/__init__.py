"""Services built on top of the cache stores."""

from memstash.services.registry import CacheRegistry, CacheStore

__all__ = ["CacheRegistry", "CacheStore"]
