"""Utility modules for memstash.

- **errors** -- Exception hierarchy rooted at MemstashError; every failure a
  store or the registry signals is one of its subclasses.
- **logging** -- structlog setup with a dual renderer: coloured console output
  in development, structured JSON in production.
- **sweeper** -- Daemon-thread recurring timer that drives the expiry sweep of
  in-process stores.
"""

# -- Exception hierarchy ----------------------------------------------------
from memstash.utils.errors import (
    ConfigurationError,
    DuplicateKeyError,
    InvalidArgumentError,
    MaxSizeReachedError,
    MemstashError,
    NotFoundError,
    StoreUnavailableError,
)

# -- Structured logging setup -----------------------------------------------
from memstash.utils.logging import configure_logging, get_logger

# -- Background expiry timer ------------------------------------------------
from memstash.utils.sweeper import SweepTimer

__all__ = [
    "ConfigurationError",
    "DuplicateKeyError",
    "InvalidArgumentError",
    "MaxSizeReachedError",
    "MemstashError",
    "NotFoundError",
    "StoreUnavailableError",
    "SweepTimer",
    "configure_logging",
    "get_logger",
]
