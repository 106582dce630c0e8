"""
HR Domain Models (``payroll_modules.hr.models``).

Responsibility
--------------
Frozen dataclass value objects for the nouns of HR payroll: employees,
daily attendance records and per-period payroll records.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by the
engines and by ``PayrollService``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary and hour fields use ``Decimal`` -- NEVER ``float``.
* ``AttendanceRecord.hours_worked`` / ``overtime_hours`` are derived values;
  the engines recompute them from the times and never trust them as input.
* ``PayrollRecord``: gross = basic + overtime + bonuses and
  net = gross - tax - deductions.

Failure modes
-------------
* Negative salary  -> ``NegativeAmountError``.
* A missing salary is allowed here; the payroll calculator raises
  ``MissingSalaryError`` when it needs one.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_kernel.domain.validation import parse_date, to_decimal
from payroll_kernel.exceptions import NegativeAmountError
from payroll_kernel.logging_config import get_logger
from payroll_kernel.utils.hashing import hash_payload

logger = get_logger("modules.hr.models")


class EmployeeStatus(Enum):
    """Employment states."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    TERMINATED = "Terminated"
    ON_LEAVE = "On Leave"


class AttendanceStatus(Enum):
    """Daily attendance states."""
    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"
    HALF_DAY = "Half Day"
    PARTIAL = "Partial"
    HOLIDAY = "Holiday"
    LEAVE = "Leave"


# Statuses under which check-in/out times are not counted as work.
NON_WORKING_STATUSES: frozenset[AttendanceStatus] = frozenset(
    {AttendanceStatus.ABSENT, AttendanceStatus.LEAVE}
)


class PaymentStatus(Enum):
    """Payroll record lifecycle states."""
    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"


class PaymentMethod(Enum):
    """How net pay is disbursed."""
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    CHECK = "check"


@dataclass(frozen=True)
class Employee:
    """An employee for payroll purposes."""
    employee_id: str
    name: str
    basic_salary: Decimal | None  # monthly
    department: str | None = None
    position: str | None = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    joining_date: date | None = None

    def __post_init__(self):
        if self.basic_salary is not None and self.basic_salary < 0:
            logger.warning(
                "employee_negative_salary",
                extra={
                    "employee_id": self.employee_id,
                    "basic_salary": str(self.basic_salary),
                },
            )
            raise NegativeAmountError("basic_salary", str(self.basic_salary))


def employee_from_record(raw: Mapping[str, Any]) -> Employee:
    """
    Adapt a raw employee row or document to the canonical ``Employee``.

    Stored employees come in two shapes: nested
    (``personal_info.name``, ``job_details.salary``) and flat (``name``,
    ``salary``).  This is the only place that knows about both.
    """
    personal = raw.get("personal_info") or {}
    job = raw.get("job_details") or {}

    salary = job.get("salary", raw.get("salary", raw.get("basic_salary")))
    joining = job.get("joining_date", raw.get("joining_date"))
    status = job.get("status", raw.get("status"))

    return Employee(
        employee_id=str(raw["employee_id"]),
        name=personal.get("name") or raw.get("name") or "",
        basic_salary=None if salary in (None, "") else to_decimal(salary, "salary"),
        department=job.get("department", raw.get("department")),
        position=job.get("position", raw.get("position")),
        status=EmployeeStatus(status) if status else EmployeeStatus.ACTIVE,
        joining_date=parse_date(joining) if joining else None,
    )


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee, one calendar date."""
    employee_id: str
    work_date: date
    check_in: time | None = None
    check_out: time | None = None
    break_start: time | None = None
    break_end: time | None = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    hours_worked: Decimal | None = None
    overtime_hours: Decimal | None = None
    notes: str = ""

    @property
    def has_times(self) -> bool:
        return self.check_in is not None and self.check_out is not None


@dataclass(frozen=True)
class PayrollRecord:
    """One employee, one pay period."""
    employee_id: str
    period_start: date
    period_end: date
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    basic_salary: Decimal  # basic pay portion for the period
    overtime_pay: Decimal
    bonuses: Decimal
    deductions: Decimal
    gross_pay: Decimal
    tax_rate: Decimal
    tax_deduction: Decimal
    net_pay: Decimal
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    payment_date: date | None = None
    warnings: tuple[str, ...] = ()

    @property
    def is_balanced(self) -> bool:
        """Both payroll identities hold to the cent."""
        return (
            self.gross_pay == self.basic_salary + self.overtime_pay + self.bonuses
            and self.net_pay == self.gross_pay - self.tax_deduction - self.deductions
        )

    def computed_fingerprint(self) -> str:
        """SHA-256 over the computed figures (lifecycle fields excluded).

        Two computations from identical inputs have the same fingerprint;
        processing or paying the record does not change it.
        """
        return hash_payload({
            "employee_id": self.employee_id,
            "period_start": self.period_start,
            "period_end": self.period_end,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "hourly_rate": self.hourly_rate,
            "basic_salary": self.basic_salary,
            "overtime_pay": self.overtime_pay,
            "bonuses": self.bonuses,
            "deductions": self.deductions,
            "gross_pay": self.gross_pay,
            "tax_rate": self.tax_rate,
            "tax_deduction": self.tax_deduction,
            "net_pay": self.net_pay,
            "warnings": list(self.warnings),
        })
