"""
Period Resolver -- maps calendar dates to dealership pay periods.

A pay period runs from the 21st of month N through the 20th of month N+1 and
is named after month N+1.  Any date with day-of-month above 20 therefore
belongs to the NEXT month's period; December 21st onwards rolls into January
of the following year.

Pure functions, no I/O.  ``current_period`` is the only function that needs
"today" and it takes it from an injected ``Clock``.

Usage:
    from payroll_engines.period import resolve_period

    resolve_period(date(2024, 3, 20))   # PayrollPeriod(month=3, year=2024)
    resolve_period(date(2024, 3, 21))   # PayrollPeriod(month=4, year=2024)
    resolve_period(date(2024, 12, 25))  # PayrollPeriod(month=1, year=2025)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime

from payroll_kernel.domain.clock import Clock

# Last day-of-month that still belongs to the same-named period.
PERIOD_CUTOFF_DAY = 20


@dataclass(frozen=True, order=True)
class PayrollPeriod:
    """A pay period, identified by the month it is named after.

    Ordering compares (year, month), so periods sort chronologically.
    """
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be 1..12, got {self.month}")

    @property
    def start_date(self) -> date:
        """The 21st of the previous calendar month."""
        if self.month == 1:
            return date(self.year - 1, 12, PERIOD_CUTOFF_DAY + 1)
        return date(self.year, self.month - 1, PERIOD_CUTOFF_DAY + 1)

    @property
    def end_date(self) -> date:
        """The 20th of the named month."""
        return date(self.year, self.month, PERIOD_CUTOFF_DAY)

    @property
    def code(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def shift(self, months: int) -> PayrollPeriod:
        """The period ``months`` later (negative for earlier)."""
        index = self.year * 12 + (self.month - 1) + months
        return PayrollPeriod(year=index // 12, month=index % 12 + 1)

    def contains(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date

    def __str__(self) -> str:
        return self.code


def resolve_period(d: date) -> PayrollPeriod:
    """
    Resolve the pay period a date belongs to.

    Day 1..20 stays in the same month; day 21..31 moves to the next month,
    with December rolling over to January of the next year.  A ``datetime``
    is reduced to its own calendar date; no timezone conversion happens here.
    """
    if isinstance(d, datetime):
        d = d.date()
    if d.day > PERIOD_CUTOFF_DAY:
        return PayrollPeriod(
            year=d.year + 1 if d.month == 12 else d.year,
            month=d.month % 12 + 1,
        )
    return PayrollPeriod(year=d.year, month=d.month)


def period_bounds(period: PayrollPeriod) -> tuple[date, date]:
    """Inclusive ``(start, end)`` dates of ``period``."""
    return period.start_date, period.end_date


def period_for_month(year: int, month: int) -> PayrollPeriod:
    return PayrollPeriod(year=year, month=month)


def current_period(clock: Clock) -> PayrollPeriod:
    """The period that the clock's business date belongs to."""
    return resolve_period(clock.today())


def iter_periods(first: PayrollPeriod, count: int) -> Iterator[PayrollPeriod]:
    """Yield ``count`` consecutive periods starting at ``first``."""
    for offset in range(count):
        yield first.shift(offset)
