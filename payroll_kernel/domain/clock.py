"""
Clock -- Deterministic time abstraction.

Responsibility:
    Provides an injectable clock interface so that engine, module and service
    code never call ``datetime.now()`` or ``date.today()`` directly.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Failure modes:
    - None. DeterministicClock always returns its controlled time.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        All services that need the current time or business date must receive
        a Clock instance via constructor injection.

    Guarantees:
        - ``now()`` returns a timezone-aware ``datetime``.
        - ``today()`` returns the calendar date of ``now()`` in the clock's
          own timezone (the business-local timezone for SystemClock).
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...

    def now_utc(self) -> datetime:
        """Get the current UTC time."""
        return self.now().astimezone(timezone.utc)

    def today(self) -> date:
        """Get the current business date."""
        return self.now().date()


class SystemClock(Clock):
    """
    Production clock that returns actual system time.

    Args:
        tz: Business-local timezone. Pay periods are resolved from the
            calendar date in this timezone. Defaults to UTC.
    """

    def __init__(self, tz: timezone | None = None):
        self._tz = tz or timezone.utc

    def now(self) -> datetime:
        """Get current system time in the business timezone."""
        return datetime.now(self._tz)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    Guarantees:
        - ``now()`` returns the same value on repeated calls until ``advance()``
          or ``set_time()`` is called.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(
            2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc
        )
        self._advance_seconds = 0

    def now(self) -> datetime:
        """Get the fixed/controlled time."""
        return self._fixed_time + timedelta(seconds=self._advance_seconds)

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._fixed_time = time
        self._advance_seconds = 0

    def advance(self, seconds: int = 1) -> None:
        """Advance the clock by the specified seconds."""
        self._advance_seconds += seconds
