"""
Payroll Calculator -- one employee, one pay period.

Responsibility:
    Turn attendance records, the employee's monthly salary and the period's
    adjustment balance into a ``PayrollRecord``.

Architecture position:
    Engines -- pure calculation, zero I/O.  Rules and constants come from
    ``PayrollConfig`` (defaults: 8 h day, 30 day month, 1.5x overtime,
    5 / 10 / 15 % stepped flat tax).

Computation:
    hourly_rate   = basic_salary / (days_per_month x standard_daily_hours)
    basic_pay     = round(sum(regular hours) x hourly_rate)
    overtime_pay  = round(sum(overtime hours) x hourly_rate x overtime_multiplier)
    gross_pay     = basic_pay + overtime_pay + bonuses        (exact)
    tax_rate      = 15 % if gross > 5000, 10 % if gross > 3000, else 5 %
    tax_deduction = round(gross_pay x tax_rate)
    net_pay       = gross_pay - tax_deduction - deductions    (exact)

    Rounding is ROUND_HALF_UP to the configured places and happens once per
    derived figure, so both payroll identities hold to the cent.

Failure modes:
    - InvalidPeriodRangeError: period_start after period_end.
    - MissingSalaryError: employee has no salary on file.
    - AttendanceEmployeeMismatchError / AttendanceOutsidePeriodError /
      DuplicateAttendanceError: malformed attendance input.
    - NegativeDurationError / InvalidBreakError: from the hours engine.
    - ZeroAttendanceWarning: no attendance at all.  Not fatal; the record is
      produced with zero hours and carries the warning code.

Usage:
    from payroll_engines.payroll import compute_payroll

    record = compute_payroll(employee, attendance, date(2024, 2, 21), date(2024, 3, 20))
    record.net_pay
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from payroll_engines.attendance import compute_record_hours
from payroll_engines.period import PayrollPeriod
from payroll_engines.reconciliation import AdjustmentBalance, reconcile
from payroll_engines.tracer import traced_engine
from payroll_kernel.db.types import ZERO, round_hours, round_money
from payroll_kernel.exceptions import (
    AttendanceEmployeeMismatchError,
    AttendanceOutsidePeriodError,
    DuplicateAttendanceError,
    InvalidPeriodRangeError,
    MissingSalaryError,
    ValidationError,
    ZeroAttendanceWarning,
)
from payroll_kernel.logging_config import get_logger
from payroll_modules.adjustments.models import Adjustment
from payroll_modules.hr.config import PayrollConfig
from payroll_modules.hr.models import AttendanceRecord, Employee, PayrollRecord

logger = get_logger("engines.payroll")


def hourly_rate_for(basic_salary: Decimal, config: PayrollConfig | None = None) -> Decimal:
    """Unrounded hourly rate for a monthly salary."""
    config = config or PayrollConfig.with_defaults()
    return basic_salary / config.monthly_hours


def tax_rate_for(gross_pay: Decimal, config: PayrollConfig | None = None) -> Decimal:
    """Flat rate of the highest bracket whose threshold ``gross_pay`` exceeds."""
    config = config or PayrollConfig.with_defaults()
    for bracket in config.tax_brackets:
        if gross_pay > bracket.threshold:
            return bracket.rate
    return config.base_tax_rate


def compute_tax(gross_pay: Decimal, config: PayrollConfig | None = None) -> tuple[Decimal, Decimal]:
    """``(tax_rate, tax_deduction)`` for ``gross_pay``, the deduction rounded once."""
    config = config or PayrollConfig.with_defaults()
    rate = tax_rate_for(gross_pay, config)
    return rate, round_money(gross_pay * rate, config.money_decimal_places)


def _validate_attendance(
    employee_id: str,
    attendance: Sequence[AttendanceRecord],
    period_start: date,
    period_end: date,
) -> None:
    seen: set[date] = set()
    for record in attendance:
        if record.employee_id != employee_id:
            raise AttendanceEmployeeMismatchError(employee_id, record.employee_id, record.work_date)
        if not period_start <= record.work_date <= period_end:
            raise AttendanceOutsidePeriodError(employee_id, record.work_date, period_start, period_end)
        if record.work_date in seen:
            raise DuplicateAttendanceError(employee_id, record.work_date)
        seen.add(record.work_date)


@traced_engine(
    "payroll", "1.0",
    fingerprint_fields=("employee", "attendance", "period_start", "period_end", "adjustments"),
)
def compute_payroll(
    employee: Employee,
    attendance: Iterable[AttendanceRecord],
    period_start: date,
    period_end: date,
    adjustments: AdjustmentBalance | None = None,
    config: PayrollConfig | None = None,
) -> PayrollRecord:
    """
    Compute the payroll record of ``employee`` for ``[period_start, period_end]``.

    Args:
        employee: Employee with a monthly ``basic_salary``.
        attendance: The employee's records within the period.  Stored
            derived hours are ignored; hours come from the times.
        period_start: First day of the period (inclusive).
        period_end: Last day of the period (inclusive).
        adjustments: The employee's reconciled balance for the period.
            Credits become ``bonuses``, debits become ``deductions``.
        config: Payroll rules; defaults to the standard rules.

    Returns:
        A pending ``PayrollRecord``.  Identical inputs give equal records.
    """
    config = config or PayrollConfig.with_defaults()
    places = config.money_decimal_places
    attendance = list(attendance)

    if period_start > period_end:
        raise InvalidPeriodRangeError(period_start, period_end)
    if employee.basic_salary is None:
        logger.error(
            "payroll_missing_salary",
            extra={"employee_id": employee.employee_id},
        )
        raise MissingSalaryError(employee.employee_id)
    _validate_attendance(employee.employee_id, attendance, period_start, period_end)

    balance = adjustments or AdjustmentBalance.empty(employee.employee_id)
    if balance.employee_id != employee.employee_id:
        raise ValidationError(
            f"Adjustment balance of {balance.employee_id} passed for {employee.employee_id}"
        )

    regular_hours = ZERO
    overtime_hours = ZERO
    for record in attendance:
        hours = compute_record_hours(record, config)
        regular_hours += hours.regular
        overtime_hours += hours.overtime

    record_warnings: tuple[str, ...] = ()
    if not attendance:
        record_warnings = (ZeroAttendanceWarning.code,)
        logger.warning(
            "payroll_zero_attendance",
            extra={
                "employee_id": employee.employee_id,
                "period_start": period_start,
                "period_end": period_end,
            },
        )
        warnings.warn(
            f"No attendance for {employee.employee_id} in {period_start}..{period_end}",
            ZeroAttendanceWarning,
            stacklevel=3,
        )

    rate = hourly_rate_for(employee.basic_salary, config)
    basic_pay = round_money(regular_hours * rate, places)
    overtime_pay = round_money(overtime_hours * rate * config.overtime_multiplier, places)
    bonuses = round_money(balance.credits, places)
    deductions = round_money(balance.debits, places)

    gross_pay = basic_pay + overtime_pay + bonuses
    tax_rate, tax_deduction = compute_tax(gross_pay, config)
    net_pay = gross_pay - tax_deduction - deductions

    if net_pay < 0:
        logger.warning(
            "payroll_negative_net_pay",
            extra={"employee_id": employee.employee_id, "net_pay": net_pay},
        )

    result = PayrollRecord(
        employee_id=employee.employee_id,
        period_start=period_start,
        period_end=period_end,
        regular_hours=round_hours(regular_hours),
        overtime_hours=round_hours(overtime_hours),
        hourly_rate=round_money(rate, places),
        basic_salary=basic_pay,
        overtime_pay=overtime_pay,
        bonuses=bonuses,
        deductions=deductions,
        gross_pay=gross_pay,
        tax_rate=tax_rate,
        tax_deduction=tax_deduction,
        net_pay=net_pay,
        warnings=record_warnings,
    )

    logger.info(
        "payroll_computed",
        extra={
            "employee_id": employee.employee_id,
            "period_start": period_start,
            "period_end": period_end,
            "regular_hours": regular_hours,
            "overtime_hours": overtime_hours,
            "gross_pay": gross_pay,
            "net_pay": net_pay,
        },
    )
    return result


def compute_payroll_for_period(
    employee: Employee,
    attendance: Iterable[AttendanceRecord],
    period: PayrollPeriod,
    adjustments: Iterable[Adjustment] = (),
    config: PayrollConfig | None = None,
) -> PayrollRecord:
    """Reconcile ``adjustments`` for ``period`` and compute the employee's record."""
    balances = reconcile(list(adjustments), period)
    return compute_payroll(
        employee,
        attendance,
        period.start_date,
        period.end_date,
        adjustments=balances.get(employee.employee_id),
        config=config,
    )


def payroll_fingerprint(record: PayrollRecord) -> str:
    """SHA-256 of the record's computed figures."""
    return record.computed_fingerprint()
