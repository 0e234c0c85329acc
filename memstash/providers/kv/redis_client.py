"""Redis key/value client adapter.

Implements :class:`~memstash.interfaces.kv_client.IKeyValueClient` on top of
``redis.asyncio``.  The contract passes expiry as trailing positional option
tokens (``"PX", 30000``), while redis-py's ``set`` takes keyword arguments,
so this adapter parses the tokens into ``px=``/``ex=``/``nx=``/``xx=``.

Connection and timeout failures surface as
:class:`~memstash.utils.errors.StoreUnavailableError`; everything else raised
by redis-py propagates untouched.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, TypeVar

import redis.asyncio as aioredis
import structlog
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from memstash.interfaces.kv_client import IKeyValueClient
from memstash.utils.errors import InvalidArgumentError, StoreUnavailableError
from memstash.utils.logging import get_logger

_T = TypeVar("_T")

# Tokens followed by an integer argument, mapped to redis-py keyword names.
_VALUE_OPTIONS = {"PX": "px", "EX": "ex"}
# Bare flag tokens.
_FLAG_OPTIONS = {"NX": "nx", "XX": "xx", "KEEPTTL": "keepttl"}


def parse_set_options(args: tuple[Any, ...]) -> dict[str, Any]:
    """Translate ``SET`` option tokens into redis-py keyword arguments.

    >>> parse_set_options(("PX", 500))
    {'px': 500}
    """
    kwargs: dict[str, Any] = {}
    tokens = list(args)
    while tokens:
        token = str(tokens.pop(0)).upper()
        if token in _VALUE_OPTIONS:
            if not tokens:
                raise InvalidArgumentError(f"SET option {token} requires a value")
            kwargs[_VALUE_OPTIONS[token]] = int(tokens.pop(0))
        elif token in _FLAG_OPTIONS:
            kwargs[_FLAG_OPTIONS[token]] = True
        else:
            raise InvalidArgumentError(f"unsupported SET option: {token}")
    return kwargs


class RedisKeyValueClient(IKeyValueClient):
    """String key/value client backed by a ``redis.asyncio.Redis`` connection.

    Parameters
    ----------
    redis:
        A connected client created with ``decode_responses=True`` so reads
        return ``str`` rather than ``bytes``.
    """

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisKeyValueClient:
        """Create a client from a ``redis://`` URL."""
        kwargs.setdefault("decode_responses", True)
        return cls(aioredis.Redis.from_url(url, **kwargs))

    # ------------------------------------------------------------------
    # IKeyValueClient implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> str | None:
        return await self._call("get", self._redis.get(key))

    async def set(self, key: str, value: str, *args: Any) -> Any:
        options = parse_set_options(args)
        return await self._call("set", self._redis.set(key, value, **options))

    async def delete(self, key: str) -> int:
        return int(await self._call("delete", self._redis.delete(key)))

    async def keys(self, pattern: str) -> list[str]:
        return list(await self._call("keys", self._redis.keys(pattern)))

    async def flush_all(self) -> Any:
        result = await self._call("flushdb", self._redis.flushdb())
        self._logger.info("redis_flushed")
        return result

    # ------------------------------------------------------------------
    # Connection helpers
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        """Return ``True`` if the server answers, ``False`` if it is unreachable."""
        try:
            return bool(await self._redis.ping())
        except (RedisConnectionError, RedisTimeoutError):
            return False

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._redis.aclose()

    async def _call(self, command: str, awaitable: Awaitable[_T]) -> _T:
        try:
            return await awaitable
        except (RedisConnectionError, RedisTimeoutError) as exc:
            self._logger.warning("redis_unavailable", command=command, error=str(exc))
            raise StoreUnavailableError(
                message=f"Redis {command} failed: {exc}",
                store_name="redis",
            ) from exc
