"""Builders for frozen domain objects used across the test suite."""

from datetime import date, time
from decimal import Decimal

from payroll_modules.adjustments.models import Adjustment, AdjustmentType
from payroll_modules.hr.models import AttendanceRecord, AttendanceStatus, Employee


def make_employee(employee_id="EMP001", salary="24000", **kwargs) -> Employee:
    return Employee(
        employee_id=employee_id,
        name=kwargs.pop("name", f"Employee {employee_id}"),
        basic_salary=None if salary is None else Decimal(salary),
        **kwargs,
    )


def make_attendance(
    work_date: date,
    check_in="09:00",
    check_out="18:00",
    employee_id="EMP001",
    break_start=None,
    break_end=None,
    status=AttendanceStatus.PRESENT,
) -> AttendanceRecord:
    def t(value):
        if value is None:
            return None
        hour, minute = value.split(":")
        return time(int(hour), int(minute))

    return AttendanceRecord(
        employee_id=employee_id,
        work_date=work_date,
        check_in=t(check_in),
        check_out=t(check_out),
        break_start=t(break_start),
        break_end=t(break_end),
        status=status,
    )


def make_adjustment(
    adjustment_id="ADJ-1",
    type=AdjustmentType.BONUS,
    amount="500",
    adjustment_date=date(2024, 3, 10),
    employee_ids=("EMP001",),
    **kwargs,
) -> Adjustment:
    return Adjustment(
        id=adjustment_id,
        type=type,
        amount=Decimal(amount),
        adjustment_date=adjustment_date,
        employee_ids=tuple(employee_ids),
        **kwargs,
    )
