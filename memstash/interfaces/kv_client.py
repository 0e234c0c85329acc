"""Abstract base class for the external key/value client consumed by RedisStore.

This is the minimal capability the adapter needs from an external service:
plain string keys and values, pattern listing and a whole-namespace flush.
Durability, wire protocol, connection handling and timeouts are the
implementation's business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IKeyValueClient(ABC):
    """Contract for an asynchronous string key/value service client."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the string stored under *key*, or ``None`` if absent."""

    @abstractmethod
    async def set(self, key: str, value: str, *args: Any) -> Any:
        """Store *value* under *key*.

        Trailing *args* carry option pairs understood by the service, e.g.
        ``"PX", 30000`` to expire the key after 30 000 milliseconds.
        """

    @abstractmethod
    async def delete(self, key: str) -> int:
        """Remove *key*; return the number of keys removed (0 or 1)."""

    @abstractmethod
    async def keys(self, pattern: str) -> list[str]:
        """Return every key matching the glob-style *pattern*."""

    @abstractmethod
    async def flush_all(self) -> Any:
        """Remove every key from the service's namespace."""
