"""
Ports to the systems the payroll core does not own.

The core reads attendance, adjustments and employee reference data and
writes payroll records through these interfaces only.  SQLAlchemy-backed
implementations live in the selectors and ``PayrollService``; tests and
importers may supply in-memory ones.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date

from payroll_modules.adjustments.models import Adjustment
from payroll_modules.hr.models import AttendanceRecord, Employee, PayrollRecord


class AttendanceSource(ABC):
    """Attendance records by employee and date range."""

    @abstractmethod
    def attendance_for(
        self, employee_id: str, start: date, end: date
    ) -> Sequence[AttendanceRecord]:
        """Records of ``employee_id`` dated within ``[start, end]``, ordered by date."""
        ...


class AdjustmentSource(ABC):
    """Adjustments that may land in a date range."""

    @abstractmethod
    def adjustments_affecting(self, start: date, end: date) -> Sequence[Adjustment]:
        """Adjustments dated within ``[start, end]`` plus installment
        advances dated before ``start`` whose slices may still be due."""
        ...


class EmployeeDirectory(ABC):
    """Employee reference data."""

    @abstractmethod
    def get_employee(self, employee_id: str) -> Employee:
        """
        Raises:
            EmployeeNotFoundError: unknown employee id.
        """
        ...

    @abstractmethod
    def active_employees(self) -> Sequence[Employee]:
        ...


class PayrollSink(ABC):
    """Destination of computed payroll records."""

    @abstractmethod
    def save_payroll(self, record: PayrollRecord, actor_id: str) -> PayrollRecord:
        """Insert or update the record for its (employee, period) key."""
        ...

    @abstractmethod
    def find_payroll(
        self, employee_id: str, period_start: date, period_end: date
    ) -> PayrollRecord | None:
        ...
