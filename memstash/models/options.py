"""Store configuration models.

Pydantic v2 models for the options each backend is constructed with, plus
the :class:`StoreDefinition` used to declare stores in a YAML config file.
All durations are integer milliseconds; ``0`` means "disabled" for TTLs and
"use the implementation default" for the sweep interval.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Per-backend options
# ---------------------------------------------------------------------------
class MemoryStoreOptions(BaseModel):
    """Options for the in-process :class:`~memstash.providers.cache.MemoryStore`."""

    model_config = ConfigDict(frozen=True)

    # Hard cap on distinct keys; 0 = unbounded.
    max_keys: int = Field(default=0, ge=0)
    # TTL applied when set() gets no explicit ttl; 0 = no default expiry.
    # A positive value also enables the background sweep.
    default_ttl: int = Field(default=0, ge=0)
    # Delay between two sweep passes; 0 = DEFAULT_SWEEP_INTERVAL_MS.
    sweep_interval: int = Field(default=0, ge=0)


class RedisStoreOptions(BaseModel):
    """Options for the external-service :class:`~memstash.providers.cache.RedisStore`."""

    model_config = ConfigDict(frozen=True)

    default_ttl: int = Field(default=0, ge=0)
    # Empty prefix = keys live in the service's global namespace and
    # size()/keys()/flush_all() act on every key it holds.
    key_prefix: str = ""


# ---------------------------------------------------------------------------
# Declarative store definitions (config file entries)
# ---------------------------------------------------------------------------
class StoreBackend(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """Backends a :class:`StoreDefinition` can name."""

    MEMORY = "memory"
    REDIS = "redis"


class StoreDefinition(BaseModel):
    """One entry of the ``stores:`` list in the YAML config.

    Example::

        stores:
          - name: sessions
            backend: memory
            max_keys: 1000
            default_ttl: 60000
            sweep_interval: 5000
          - name: shared
            backend: redis
            key_prefix: "shared:"
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    backend: StoreBackend = StoreBackend.MEMORY
    max_keys: int = Field(default=0, ge=0)
    default_ttl: int = Field(default=0, ge=0)
    sweep_interval: int = Field(default=0, ge=0)
    key_prefix: str = ""

    def memory_options(self) -> MemoryStoreOptions:
        return MemoryStoreOptions(
            max_keys=self.max_keys,
            default_ttl=self.default_ttl,
            sweep_interval=self.sweep_interval,
        )

    def redis_options(self) -> RedisStoreOptions:
        return RedisStoreOptions(default_ttl=self.default_ttl, key_prefix=self.key_prefix)
