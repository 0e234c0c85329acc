"""Hit/miss counters owned by a single store instance."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class CacheStats:
    """Cumulative lookup counters since construction or the last flush.

    Mutable and internal to each store; callers only ever receive copies
    produced by :meth:`snapshot`.
    """

    hits: int = 0
    misses: int = 0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0

    def snapshot(self) -> CacheStats:
        return replace(self)
