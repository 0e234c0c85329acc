"""Custom exception hierarchy for memstash.

All library exceptions inherit from :class:`MemstashError`, which carries an
optional ``store_name`` so callers can tell which cache store (e.g. "sessions",
"redis") raised the failure.

The hierarchy is organized by the layer that raises it:

    MemstashError  (base -- catch-all for any memstash error)
    +-- InvalidArgumentError   (missing key/value, bad TTL, bad store name)
    +-- NotFoundError          (registry lookup of an unknown store)
    +-- DuplicateKeyError      (registry name collision on add)
    +-- MaxSizeReachedError    (in-process store at its key cap)
    +-- StoreUnavailableError  (external key/value service unreachable)
    +-- ConfigurationError     (invalid store definitions / settings)

None of these are retried inside the library; retry policy belongs to the
caller.
"""


class MemstashError(Exception):
    """Base exception for all memstash errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``store_name`` identifying the store involved.  The ``__str__`` method
    prefixes the store name in brackets for structured log output, e.g.
    ``[sessions] max keys limit: 3 exhausted``.
    """

    def __init__(
        self,
        message: str = "An unexpected cache error occurred",
        store_name: str | None = None,
    ) -> None:
        self._message = message
        self._store_name = store_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def store_name(self) -> str | None:
        return self._store_name

    def __str__(self) -> str:
        if self._store_name:
            return f"[{self._store_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller input errors
# ---------------------------------------------------------------------------

class InvalidArgumentError(MemstashError):
    """Raised when a required input is missing or malformed.

    Covers absent/empty cache keys, ``None`` values, negative TTLs and
    registry names that are not non-empty strings.
    """

    def __init__(
        self,
        message: str = "Invalid argument",
        store_name: str | None = None,
    ) -> None:
        super().__init__(message=message, store_name=store_name)


# ---------------------------------------------------------------------------
# Registry errors
# ---------------------------------------------------------------------------

class NotFoundError(MemstashError):
    """Raised when no store is registered under the requested name."""

    def __init__(
        self,
        message: str = "Cache store does not exist",
        store_name: str | None = None,
    ) -> None:
        super().__init__(message=message, store_name=store_name)


class DuplicateKeyError(MemstashError):
    """Raised when adding a store under a name that is already registered.

    The registry is left untouched; the original store stays in place.
    """

    def __init__(
        self,
        message: str = "Cache store already exists",
        store_name: str | None = None,
    ) -> None:
        super().__init__(message=message, store_name=store_name)


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------

class MaxSizeReachedError(MemstashError):
    """Raised when a new key is inserted into a store at its ``max_keys`` cap.

    Overwriting an existing key never raises this.
    """

    def __init__(
        self,
        message: str = "Max keys limit reached",
        store_name: str | None = None,
    ) -> None:
        super().__init__(message=message, store_name=store_name)


class StoreUnavailableError(MemstashError):
    """Raised when the external key/value service cannot be reached."""

    def __init__(
        self,
        message: str = "External key/value service is unavailable",
        store_name: str | None = None,
    ) -> None:
        super().__init__(message=message, store_name=store_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(MemstashError):
    """Raised when store definitions or settings are invalid."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        store_name: str | None = None,
    ) -> None:
        super().__init__(message=message, store_name=store_name)
