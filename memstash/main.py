"""Factories that turn configuration into stores and a populated registry.

Typical wiring at application start-up::

    settings = Settings()
    config = load_config(settings=settings)
    configure_logging(config["logging"])
    registry = build_registry(config, settings)

Redis-backed stores built from one config share a single
:class:`RedisKeyValueClient`, so give each of them a ``key_prefix`` if their
``size()``/``keys()``/``flush_all()`` must not see each other's keys.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from memstash.config.settings import Settings
from memstash.interfaces.kv_client import IKeyValueClient
from memstash.models.options import (
    MemoryStoreOptions,
    RedisStoreOptions,
    StoreBackend,
    StoreDefinition,
)
from memstash.providers.cache.memory_store import MemoryStore
from memstash.providers.cache.redis_store import RedisStore
from memstash.providers.kv.redis_client import RedisKeyValueClient
from memstash.services.registry import CacheRegistry, CacheStore
from memstash.utils.errors import ConfigurationError, MemstashError
from memstash.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Single-store factories
# ---------------------------------------------------------------------------


def build_memory_store(
    options: MemoryStoreOptions | None = None, name: str | None = None
) -> MemoryStore[Any, Any]:
    """Create an in-process TTL store."""
    return MemoryStore(options, name=name)


def build_redis_store(
    client: IKeyValueClient,
    options: RedisStoreOptions | None = None,
    name: str | None = None,
) -> RedisStore[Any]:
    """Create a store that delegates to *client*."""
    return RedisStore(client, options, name=name)


def build_store(
    definition: StoreDefinition,
    settings: Settings | None = None,
    client: IKeyValueClient | None = None,
) -> CacheStore:
    """Create the store described by *definition*.

    For Redis definitions, *client* is used when given; otherwise one is
    created from ``settings.redis_url``.
    """
    if definition.backend is StoreBackend.MEMORY:
        return build_memory_store(definition.memory_options(), name=definition.name)

    if definition.backend is StoreBackend.REDIS:
        if client is None:
            settings = settings or Settings()
            client = RedisKeyValueClient.from_url(settings.redis_url)
        return build_redis_store(client, definition.redis_options(), name=definition.name)

    raise ConfigurationError(f"unknown backend: {definition.backend}", store_name=definition.name)


# ---------------------------------------------------------------------------
# Registry factory
# ---------------------------------------------------------------------------


def parse_store_definitions(raw_stores: Any) -> list[StoreDefinition]:
    """Validate the ``stores:`` section of a loaded config.

    Raises
    ------
    ConfigurationError
        If the section is not a list or an entry fails validation.
    """
    if not isinstance(raw_stores, list):
        raise ConfigurationError("'stores' must be a list of store definitions")

    definitions: list[StoreDefinition] = []
    for index, raw in enumerate(raw_stores):
        try:
            definitions.append(StoreDefinition.model_validate(raw))
        except ValidationError as exc:
            name = raw.get("name") if isinstance(raw, dict) else None
            raise ConfigurationError(
                f"invalid store definition at index {index}: {exc}",
                store_name=name,
            ) from exc
    return definitions


def build_registry(
    config: dict,
    settings: Settings | None = None,
    client: IKeyValueClient | None = None,
) -> CacheRegistry:
    """Build a :class:`CacheRegistry` holding every store declared in *config*.

    Parameters
    ----------
    config:
        Output of :func:`~memstash.config.loader.load_config`.
    settings:
        Used for the Redis URL when no ``redis.url`` is present in *config*.
    client:
        Shared client for Redis-backed stores.  Created lazily from the
        configured URL on the first Redis definition when omitted.

    Raises
    ------
    ConfigurationError
        On invalid definitions or duplicate store names.  Stores created
        before the failure are closed.
    """
    definitions = parse_store_definitions(config.get("stores", []))
    redis_url = (config.get("redis") or {}).get("url")
    registry = CacheRegistry()

    try:
        for definition in definitions:
            if definition.backend is StoreBackend.REDIS and client is None:
                url = redis_url or (settings or Settings()).redis_url
                client = RedisKeyValueClient.from_url(url)
            store = build_store(definition, settings, client)
            try:
                registry.add_store(definition.name, store)
            except MemstashError as exc:
                store.close()
                raise ConfigurationError(exc.message, store_name=definition.name) from exc
    except ConfigurationError:
        registry.close()
        raise

    _logger.info("registry_built", stores=registry.list_names())
    return registry
