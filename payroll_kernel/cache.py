"""
Typed read-through cache for reference and attendance data.

Entries are keyed by ``CacheKey(entity, filters)`` where ``filters`` is a
sorted tuple of ``(name, value)`` pairs, never a formatted string.  Writes
invalidate whole entity families through an explicit table
(``INVALIDATION_SETS``): changing attendance invalidates attendance *and*
payroll reads, because payroll figures are derived from attendance.

Expiry uses the injected ``Clock`` so tests can advance time.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, TypeVar

from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.logging_config import get_logger

logger = get_logger("cache")

T = TypeVar("T")

EMPLOYEE = "employee"
ATTENDANCE = "attendance"
PAYROLL = "payroll"
ADJUSTMENT = "adjustment"

# entity written -> entity families whose cached reads become stale
INVALIDATION_SETS: Mapping[str, frozenset[str]] = {
    EMPLOYEE: frozenset({EMPLOYEE, PAYROLL}),
    ATTENDANCE: frozenset({ATTENDANCE, PAYROLL}),
    ADJUSTMENT: frozenset({ADJUSTMENT, PAYROLL}),
    PAYROLL: frozenset({PAYROLL}),
}

# Default time-to-live per entity family, in seconds
DEFAULT_TTLS: Mapping[str, int] = {
    EMPLOYEE: 600,
    ATTENDANCE: 120,
    ADJUSTMENT: 300,
    PAYROLL: 600,
}


@dataclass(frozen=True)
class CacheKey:
    """Strongly-typed cache key: an entity family plus its query filters."""
    entity: str
    filters: tuple[tuple[str, Hashable], ...] = ()

    @classmethod
    def of(cls, entity: str, **filters: Hashable) -> CacheKey:
        return cls(entity=entity, filters=tuple(sorted(filters.items())))


class EntityCache:
    """In-process TTL cache with per-entity invalidation."""

    def __init__(self, clock: Clock | None = None, ttls: Mapping[str, int] | None = None):
        self._clock = clock or SystemClock()
        self._ttls = dict(DEFAULT_TTLS if ttls is None else ttls)
        self._entries: dict[CacheKey, tuple[datetime, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock.now():
            del self._entries[key]
            return None
        return value

    def set(self, key: CacheKey, value: Any, ttl_seconds: int | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self._ttls.get(key.entity, 300)
        self._entries[key] = (self._clock.now() + timedelta(seconds=ttl), value)

    def get_or_load(self, key: CacheKey, loader: Callable[[], T]) -> T:
        """Return the cached value for ``key`` or load, store and return it."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = loader()
        self.set(key, value)
        return value

    def invalidate(self, entity: str) -> int:
        """Drop every entry of the families that a write to ``entity`` makes stale.

        Returns:
            Number of entries removed.
        """
        families = INVALIDATION_SETS.get(entity, frozenset({entity}))
        stale = [k for k in self._entries if k.entity in families]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(
                "cache_invalidated",
                extra={"entity": entity, "families": sorted(families), "removed": len(stale)},
            )
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
