"""Cache store backed by an external Redis-like key/value service.

Every contract call is translated into one or more round trips on an
injected :class:`~memstash.interfaces.kv_client.IKeyValueClient`.  Values
travel as JSON text; expiry is delegated to the service through its native
``PX <milliseconds>`` option, so this store runs no background work.

``size()`` and ``keys()`` list keys with a wildcard pattern.  Without a
``key_prefix`` that pattern is ``*`` and covers the whole namespace of the
service, including keys written by other stores sharing the connection.
With a prefix, wildcard characters in it are escaped and results are
filtered on the literal prefix, so stores only ever see their own keys.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from memstash.interfaces.cache_store import (
    IAsyncCacheStore,
    V,
    resolve_ttl,
    validate_key,
    validate_value,
)
from memstash.interfaces.kv_client import IKeyValueClient
from memstash.models.options import RedisStoreOptions
from memstash.models.stats import CacheStats
from memstash.utils.errors import InvalidArgumentError
from memstash.utils.logging import get_logger

_EXPIRE_MS_OPTION = "PX"
_GLOB_SPECIALS = frozenset("*?[]\\")


def _escape_glob(text: str) -> str:
    """Backslash-escape the characters Redis ``KEYS`` patterns treat as wildcards."""
    return "".join(f"\\{char}" if char in _GLOB_SPECIALS else char for char in text)


class RedisStore(IAsyncCacheStore[V, str]):
    """Async cache store delegating storage and expiry to an external client.

    Parameters
    ----------
    client:
        The external key/value client.  Timeouts, retries and connection
        handling are its responsibility.
    options:
        Default TTL and optional key prefix.
    name:
        Optional label used in log lines and error messages.
    """

    def __init__(
        self,
        client: IKeyValueClient,
        options: RedisStoreOptions | None = None,
        *,
        name: str | None = None,
    ) -> None:
        self._client = client
        self._options = options or RedisStoreOptions()
        self._name = name
        self._stats = CacheStats()
        self._logger: structlog.BoundLogger = get_logger(__name__, store=name)

    @property
    def client(self) -> IKeyValueClient:
        """The underlying client, for operations outside the cache contract."""
        return self._client

    @property
    def options(self) -> RedisStoreOptions:
        return self._options

    # ------------------------------------------------------------------
    # IAsyncCacheStore implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> V | None:
        validate_key(key, self._name)

        raw = await self._client.get(self._wire_key(key))
        if raw is None:
            self._stats.record_miss()
            self._logger.debug("cache_miss", key=key)
            return None

        self._stats.record_hit()
        self._logger.debug("cache_hit", key=key)
        return self._decode(raw)

    async def set(
        self, key: str, value: V, ignore_ttl: bool = False, ttl: int | None = None
    ) -> bool:
        validate_key(key, self._name)
        validate_value(value, self._name)
        effective_ttl = resolve_ttl(ignore_ttl, ttl, self._options.default_ttl)
        payload = self._encode(value)

        args: list[Any] = []
        if effective_ttl is not None:
            args.extend((_EXPIRE_MS_OPTION, effective_ttl))

        await self._client.set(self._wire_key(key), payload, *args)
        self._logger.debug("cache_set", key=key, ttl_ms=effective_ttl)
        return True

    async def delete(self, key: str) -> bool:
        validate_key(key, self._name)
        removed = await self._client.delete(self._wire_key(key))
        return removed > 0

    async def flush_all(self) -> bool:
        if self._options.key_prefix:
            for wire_key in await self._own_wire_keys():
                await self._client.delete(wire_key)
        else:
            await self._client.flush_all()
        self._stats.reset()
        self._logger.info("store_flushed")
        return True

    async def size(self) -> int:
        return len(await self._own_wire_keys())

    async def keys(self) -> list[str]:
        prefix = self._options.key_prefix
        return [wire_key[len(prefix):] for wire_key in await self._own_wire_keys()]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _wire_key(self, key: str) -> str:
        return f"{self._options.key_prefix}{key}"

    def _pattern(self) -> str:
        return f"{_escape_glob(self._options.key_prefix)}*"

    async def _own_wire_keys(self) -> list[str]:
        prefix = self._options.key_prefix
        wire_keys = await self._client.keys(self._pattern())
        return [wire_key for wire_key in wire_keys if wire_key.startswith(prefix)]

    def _encode(self, value: V) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(
                f"value of type {type(value).__name__} is not JSON-serialisable: {exc}",
                store_name=self._name,
            ) from exc

    @staticmethod
    def _decode(raw: str) -> Any:
        # Payloads written by other producers may not be JSON; hand them back raw.
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw

    def __repr__(self) -> str:
        return (
            f"RedisStore(name={self._name!r}, default_ttl={self._options.default_ttl}, "
            f"key_prefix={self._options.key_prefix!r})"
        )
