"""
HR Module (``payroll_modules.hr``).

Responsibility
--------------
Employees, daily attendance and per-period payroll records: the canonical
``Employee`` schema (with ``employee_from_record`` adapting legacy raw
shapes at the boundary), attendance capture and correction, payroll
generation and the pending -> processed -> paid record lifecycle.

Architecture position
---------------------
**Modules layer** -- frozen DTOs, config schema, ports, SQLAlchemy ORM,
selectors, the payroll record workflow and the ``PayrollService`` facade.
Hours, pay and tax figures come from ``payroll_engines``.

Invariants enforced
-------------------
* Transaction boundary owned by ``PayrollService``.
* One attendance row per employee and date; one payroll row per employee
  and pay period.
* Payroll records are immutable once processed, except through the
  Admin-only reversal of a paid record.

Failure modes
-------------
* ``MissingSalaryError`` -- employee without a salary.
* ``PayrollRecordImmutableError`` -- regenerating a processed/paid record
  with changed inputs.
"""

from payroll_modules.hr.config import PayrollConfig, TaxBracket
from payroll_modules.hr.models import (
    NON_WORKING_STATUSES,
    AttendanceRecord,
    AttendanceStatus,
    Employee,
    EmployeeStatus,
    PaymentMethod,
    PaymentStatus,
    PayrollRecord,
    employee_from_record,
)
from payroll_modules.hr.workflows import PAYROLL_RECORD_WORKFLOW

__all__ = [
    "NON_WORKING_STATUSES",
    "AttendanceRecord",
    "AttendanceStatus",
    "Employee",
    "EmployeeStatus",
    "PaymentMethod",
    "PaymentStatus",
    "PayrollRecord",
    "employee_from_record",
    "PAYROLL_RECORD_WORKFLOW",
    "PayrollConfig",
    "TaxBracket",
]
