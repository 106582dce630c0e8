"""
Attendance Hours Engine -- per-record hours and attendance status.

Turns the raw check-in / check-out / break times of one attendance record
into net, regular and overtime hours, and derives the daily status the
attendance sheet shows.

Rules:
    raw      = check_out - check_in
    break    = break_end - break_start   (zero unless both are present)
    net      = max(raw - break, 0)
    regular  = min(net, standard_daily_hours)
    overtime = max(net - standard_daily_hours, 0)

Records without both times, and records marked Absent or Leave, contribute
zero hours.  Nothing is rounded here; callers round once at the end.

Usage:
    from payroll_engines.attendance import compute_record_hours

    hours = compute_record_hours(record)
    hours.regular   # Decimal('8')
    hours.overtime  # Decimal('1')
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal

from payroll_kernel.db.types import ZERO, round_hours
from payroll_kernel.exceptions import InvalidBreakError, NegativeDurationError
from payroll_kernel.logging_config import get_logger
from payroll_modules.hr.config import PayrollConfig
from payroll_modules.hr.models import (
    NON_WORKING_STATUSES,
    AttendanceRecord,
    AttendanceStatus,
)

logger = get_logger("engines.attendance")

_SECONDS_PER_HOUR = Decimal("3600")

# Statuses that enrichment never overwrites
_PRESERVED_STATUSES: frozenset[AttendanceStatus] = NON_WORKING_STATUSES | {
    AttendanceStatus.HOLIDAY
}


@dataclass(frozen=True)
class AttendanceHours:
    """Unrounded hours for one attendance record."""
    raw: Decimal
    break_hours: Decimal
    net: Decimal
    regular: Decimal
    overtime: Decimal

    @classmethod
    def zero(cls) -> AttendanceHours:
        return cls(raw=ZERO, break_hours=ZERO, net=ZERO, regular=ZERO, overtime=ZERO)


def _hours_between(work_date: date, start: time, end: time) -> Decimal:
    delta = datetime.combine(work_date, end) - datetime.combine(work_date, start)
    return Decimal(int(delta.total_seconds())) / _SECONDS_PER_HOUR


def compute_record_hours(
    record: AttendanceRecord,
    config: PayrollConfig | None = None,
) -> AttendanceHours:
    """
    Compute hours for a single record from its times.

    Stored ``hours_worked`` / ``overtime_hours`` are ignored.

    Raises:
        NegativeDurationError: check-out before check-in.
        InvalidBreakError: break end before break start.
    """
    config = config or PayrollConfig.with_defaults()

    if record.status in NON_WORKING_STATUSES or not record.has_times:
        return AttendanceHours.zero()

    if record.check_out < record.check_in:
        raise NegativeDurationError(
            record.employee_id,
            record.work_date,
            record.check_in.isoformat(),
            record.check_out.isoformat(),
        )
    raw = _hours_between(record.work_date, record.check_in, record.check_out)

    break_hours = ZERO
    if record.break_start is not None and record.break_end is not None:
        if record.break_end < record.break_start:
            raise InvalidBreakError(
                record.employee_id,
                record.work_date,
                record.break_start.isoformat(),
                record.break_end.isoformat(),
            )
        break_hours = _hours_between(record.work_date, record.break_start, record.break_end)

    net = max(raw - break_hours, ZERO)
    standard = config.standard_daily_hours
    return AttendanceHours(
        raw=raw,
        break_hours=break_hours,
        net=net,
        regular=min(net, standard),
        overtime=max(net - standard, ZERO),
    )


def derive_status(
    record: AttendanceRecord,
    hours: AttendanceHours,
    config: PayrollConfig | None = None,
) -> AttendanceStatus:
    """
    Attendance status implied by the times.

    Absent, Leave and Holiday are kept as entered.  Otherwise a check-in
    after the standard in-time is Late; else net hours decide between
    Present, Half Day and Partial.
    """
    config = config or PayrollConfig.with_defaults()

    if record.status in _PRESERVED_STATUSES or not record.has_times:
        return record.status
    if config.standard_in_time is not None and record.check_in > config.standard_in_time:
        return AttendanceStatus.LATE
    if hours.net >= config.standard_daily_hours:
        return AttendanceStatus.PRESENT
    if hours.net >= config.half_day_hours:
        return AttendanceStatus.HALF_DAY
    return AttendanceStatus.PARTIAL


def enrich_attendance_record(
    record: AttendanceRecord,
    config: PayrollConfig | None = None,
) -> AttendanceRecord:
    """Return a copy with rounded derived hours and derived status filled in."""
    hours = compute_record_hours(record, config)
    return replace(
        record,
        hours_worked=round_hours(hours.net),
        overtime_hours=round_hours(hours.overtime),
        status=derive_status(record, hours, config),
    )


@dataclass(frozen=True)
class AttendanceSummary:
    """Counts and hour totals over a set of attendance records."""
    total_days: int
    present_days: int  # includes late days
    late_days: int
    absent_days: int
    leave_days: int
    holiday_days: int
    half_days: int
    total_regular_hours: Decimal
    total_overtime_hours: Decimal
    average_hours_per_day: Decimal


def summarize_attendance(
    records: Iterable[AttendanceRecord],
    config: PayrollConfig | None = None,
) -> AttendanceSummary:
    """Summarise records the way the monthly attendance sheet reports them.

    Statuses are counted as stored; hours are recomputed from the times.
    The average is over days that logged any net hours.
    """
    config = config or PayrollConfig.with_defaults()

    counts = {status: 0 for status in AttendanceStatus}
    regular = ZERO
    overtime = ZERO
    net_total = ZERO
    worked_days = 0
    total = 0

    for record in records:
        total += 1
        counts[record.status] += 1
        hours = compute_record_hours(record, config)
        regular += hours.regular
        overtime += hours.overtime
        if hours.net > 0:
            net_total += hours.net
            worked_days += 1

    average = round_hours(net_total / worked_days) if worked_days else ZERO
    return AttendanceSummary(
        total_days=total,
        present_days=counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE],
        late_days=counts[AttendanceStatus.LATE],
        absent_days=counts[AttendanceStatus.ABSENT],
        leave_days=counts[AttendanceStatus.LEAVE],
        holiday_days=counts[AttendanceStatus.HOLIDAY],
        half_days=counts[AttendanceStatus.HALF_DAY],
        total_regular_hours=round_hours(regular),
        total_overtime_hours=round_hours(overtime),
        average_hours_per_day=average,
    )
