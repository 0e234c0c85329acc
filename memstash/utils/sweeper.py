"""Recurring background timer used by in-process stores to evict expired keys.

Each :class:`SweepTimer` owns exactly one daemon thread.  The thread waits on
a :class:`threading.Event` for ``interval_ms`` and then invokes the callback;
setting the event ends the loop, so :meth:`SweepTimer.stop` returns as soon
as the current pass (if any) finishes.

# ─── TIMER LIFECYCLE ───────────────────────────────────────────────────
#
#   start() ──→ [waiting] ──interval──→ callback() ──→ [waiting] ...
#                   │
#   stop()  ────────┘  (event set, thread joined, handle dropped)
#
#   - start() on a running timer is a no-op: one sweep per store at most.
#   - A callback that raises is logged; the next firing still happens.
#   - stop() called from inside the callback only signals the loop, it
#     never joins its own thread.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

from memstash.utils.logging import get_logger

_JOIN_TIMEOUT_SECONDS = 2.0


class SweepTimer:
    """Fires ``callback`` every ``interval_ms`` milliseconds on a daemon thread.

    Parameters
    ----------
    interval_ms:
        Delay between two firings, in milliseconds.  Must be positive.
    callback:
        Zero-argument callable run on every firing.
    name:
        Thread name, useful when several stores sweep in one process.
    """

    def __init__(
        self,
        interval_ms: float,
        callback: Callable[[], object],
        name: str = "memstash-sweep",
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._interval_ms = interval_ms
        self._callback = callback
        self._name = name
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        """Start the timer thread unless one is already running."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            # Fresh event per run so a previous stop() does not leak into it.
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name=self._name,
                daemon=True,
            )
            self._thread.start()
        self._logger.debug("sweep_started", timer=self._name, interval_ms=self._interval_ms)

    def stop(self) -> None:
        """Signal the timer thread to exit and wait for it."""
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()

        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=_JOIN_TIMEOUT_SECONDS)
        self._logger.debug("sweep_stopped", timer=self._name)

    def _run(self, stop_event: threading.Event) -> None:
        interval_seconds = self._interval_ms / 1000.0
        while not stop_event.wait(interval_seconds):
            try:
                self._callback()
            except Exception as exc:
                self._logger.error("sweep_failed", timer=self._name, error=str(exc))
