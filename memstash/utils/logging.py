"""Structured logging for memstash, built on structlog.

Configuration comes from the ``logging`` section produced by
:func:`memstash.config.loader.load_config`::

    logging:
      level: INFO      # DEBUG, INFO, WARNING, ERROR
      json: false      # true renders one JSON object per line

Every logger carries ``logger_name`` and, for store-owned loggers, the
``store`` label, so lines from several stores in one process can be told
apart.  Standard-library records (``redis`` among them) go through the same
renderer.
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {"level": "INFO", "json": False}


def _drop_unset_context(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    # Unnamed stores bind store=None; keep that noise out of the output.
    for key in [key for key, value in event_dict.items() if value is None]:
        del event_dict[key]
    return event_dict


def configure_logging(logging_config: Mapping[str, Any] | None = None) -> None:
    """Configure structlog and the root logger from a ``logging`` config section.

    Parameters
    ----------
    logging_config:
        Mapping with optional ``level`` and ``json`` keys.  Missing keys fall
        back to :data:`DEFAULT_LOGGING_CONFIG`.
    """
    merged = {**DEFAULT_LOGGING_CONFIG, **(logging_config or {})}
    level = str(merged["level"]).upper()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _drop_unset_context,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if merged["json"]
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str, **context: Any) -> structlog.BoundLogger:
    """Return a logger bound to ``logger_name=name`` plus any extra *context*.

    Falls back to :data:`DEFAULT_LOGGING_CONFIG` when nothing has configured
    logging yet.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name, **context)
