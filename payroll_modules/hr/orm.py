"""
HR ORM Models (``payroll_modules.hr.orm``).

Responsibility
--------------
SQLAlchemy persistence models for the HR module.  Maps the frozen domain
dataclasses from ``models.py`` to database tables.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``payroll_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``payroll_kernel`` or
``payroll_engines``.

Invariants enforced
-------------------
* One attendance row per employee per date
  (``uq_hr_attendance_employee_date``).
* One payroll row per employee per pay period
  (``uq_payroll_record_employee_period``).
"""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, String, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase
from payroll_modules.hr.models import (
    AttendanceRecord,
    AttendanceStatus,
    Employee,
    EmployeeStatus,
    PaymentMethod,
    PaymentStatus,
    PayrollRecord,
)


# ---------------------------------------------------------------------------
# 1. EmployeeModel
# ---------------------------------------------------------------------------


class EmployeeModel(TrackedBase):
    """
    ORM model for employees.

    Guarantees:
        - employee_id is unique (uq_hr_employees_employee_id).
        - basic_salary is nullable; payroll refuses to run without it.
    """

    __tablename__ = "hr_employees"

    __table_args__ = (
        UniqueConstraint("employee_id", name="uq_hr_employees_employee_id"),
        Index("idx_hr_employees_status", "status"),
    )

    employee_id: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    basic_salary: Mapped[Decimal | None] = mapped_column(nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=EmployeeStatus.ACTIVE.value)
    joining_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def to_dto(self) -> Employee:
        """Convert ORM model to frozen dataclass."""
        return Employee(
            employee_id=self.employee_id,
            name=self.name,
            basic_salary=self.basic_salary,
            department=self.department,
            position=self.position,
            status=EmployeeStatus(self.status),
            joining_date=self.joining_date,
        )

    @classmethod
    def from_dto(cls, dto: Employee, created_by: str) -> EmployeeModel:
        """Create ORM model from frozen dataclass."""
        return cls(
            employee_id=dto.employee_id,
            name=dto.name,
            basic_salary=dto.basic_salary,
            department=dto.department,
            position=dto.position,
            status=dto.status.value,
            joining_date=dto.joining_date,
            created_by=created_by,
        )

    def __repr__(self) -> str:
        return f"<EmployeeModel {self.employee_id}: {self.name}>"


# ---------------------------------------------------------------------------
# 2. AttendanceRecordModel
# ---------------------------------------------------------------------------


class AttendanceRecordModel(TrackedBase):
    """
    ORM model for daily attendance.

    ``hours_worked`` and ``overtime_hours`` are stored for display only;
    payroll recomputes them from the times.
    """

    __tablename__ = "hr_attendance_records"

    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="uq_hr_attendance_employee_date"),
        Index("idx_hr_attendance_work_date", "work_date"),
    )

    employee_id: Mapped[str] = mapped_column(
        ForeignKey("hr_employees.employee_id"), nullable=False
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_in: Mapped[time | None] = mapped_column(Time, nullable=True)
    check_out: Mapped[time | None] = mapped_column(Time, nullable=True)
    break_start: Mapped[time | None] = mapped_column(Time, nullable=True)
    break_end: Mapped[time | None] = mapped_column(Time, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=AttendanceStatus.PRESENT.value)
    hours_worked: Mapped[Decimal | None] = mapped_column(nullable=True)
    overtime_hours: Mapped[Decimal | None] = mapped_column(nullable=True)
    notes: Mapped[str] = mapped_column(String(4000), default="")

    def to_dto(self) -> AttendanceRecord:
        return AttendanceRecord(
            employee_id=self.employee_id,
            work_date=self.work_date,
            check_in=self.check_in,
            check_out=self.check_out,
            break_start=self.break_start,
            break_end=self.break_end,
            status=AttendanceStatus(self.status),
            hours_worked=self.hours_worked,
            overtime_hours=self.overtime_hours,
            notes=self.notes or "",
        )

    @classmethod
    def from_dto(cls, dto: AttendanceRecord, created_by: str) -> AttendanceRecordModel:
        return cls(
            employee_id=dto.employee_id,
            work_date=dto.work_date,
            check_in=dto.check_in,
            check_out=dto.check_out,
            break_start=dto.break_start,
            break_end=dto.break_end,
            status=dto.status.value,
            hours_worked=dto.hours_worked,
            overtime_hours=dto.overtime_hours,
            notes=dto.notes,
            created_by=created_by,
        )

    def apply(self, dto: AttendanceRecord, updated_by: str) -> None:
        """Overwrite the mutable fields from a corrected record."""
        self.check_in = dto.check_in
        self.check_out = dto.check_out
        self.break_start = dto.break_start
        self.break_end = dto.break_end
        self.status = dto.status.value
        self.hours_worked = dto.hours_worked
        self.overtime_hours = dto.overtime_hours
        self.notes = dto.notes
        self.updated_by = updated_by

    def __repr__(self) -> str:
        return f"<AttendanceRecordModel {self.employee_id} {self.work_date}>"


# ---------------------------------------------------------------------------
# 3. PayrollRecordModel
# ---------------------------------------------------------------------------


class PayrollRecordModel(TrackedBase):
    """
    ORM model for per-period payroll records.

    Guarantees:
        - (employee_id, period_start, period_end) is unique
          (uq_payroll_record_employee_period).
        - ``fingerprint`` is the computed-figures fingerprint of the stored
          record; regeneration compares against it.
        - ``warnings`` is stored as a comma-separated list of codes.
    """

    __tablename__ = "hr_payroll_records"

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "period_start", "period_end",
            name="uq_payroll_record_employee_period",
        ),
        Index("idx_hr_payroll_records_status", "payment_status"),
    )

    employee_id: Mapped[str] = mapped_column(
        ForeignKey("hr_employees.employee_id"), nullable=False
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    regular_hours: Mapped[Decimal] = mapped_column(nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(nullable=False)
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False)
    overtime_pay: Mapped[Decimal] = mapped_column(nullable=False)
    bonuses: Mapped[Decimal] = mapped_column(nullable=False)
    deductions: Mapped[Decimal] = mapped_column(nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(nullable=False)
    tax_deduction: Mapped[Decimal] = mapped_column(nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), default=PaymentStatus.PENDING.value)
    payment_method: Mapped[str] = mapped_column(
        String(20), default=PaymentMethod.BANK_TRANSFER.value
    )
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    warnings: Mapped[str] = mapped_column(String(255), default="")
    fingerprint: Mapped[str] = mapped_column(String(64), nullable=False)

    def to_dto(self) -> PayrollRecord:
        return PayrollRecord(
            employee_id=self.employee_id,
            period_start=self.period_start,
            period_end=self.period_end,
            regular_hours=self.regular_hours,
            overtime_hours=self.overtime_hours,
            hourly_rate=self.hourly_rate,
            basic_salary=self.basic_salary,
            overtime_pay=self.overtime_pay,
            bonuses=self.bonuses,
            deductions=self.deductions,
            gross_pay=self.gross_pay,
            tax_rate=self.tax_rate,
            tax_deduction=self.tax_deduction,
            net_pay=self.net_pay,
            payment_status=PaymentStatus(self.payment_status),
            payment_method=PaymentMethod(self.payment_method),
            payment_date=self.payment_date,
            warnings=tuple(w for w in (self.warnings or "").split(",") if w),
        )

    @classmethod
    def from_dto(cls, dto: PayrollRecord, created_by: str) -> PayrollRecordModel:
        model = cls(employee_id=dto.employee_id, created_by=created_by)
        model.apply(dto)
        return model

    def apply(self, dto: PayrollRecord, updated_by: str | None = None) -> None:
        """Overwrite every stored figure from ``dto``."""
        self.period_start = dto.period_start
        self.period_end = dto.period_end
        self.regular_hours = dto.regular_hours
        self.overtime_hours = dto.overtime_hours
        self.hourly_rate = dto.hourly_rate
        self.basic_salary = dto.basic_salary
        self.overtime_pay = dto.overtime_pay
        self.bonuses = dto.bonuses
        self.deductions = dto.deductions
        self.gross_pay = dto.gross_pay
        self.tax_rate = dto.tax_rate
        self.tax_deduction = dto.tax_deduction
        self.net_pay = dto.net_pay
        self.payment_status = dto.payment_status.value
        self.payment_method = dto.payment_method.value
        self.payment_date = dto.payment_date
        self.warnings = ",".join(dto.warnings)
        self.fingerprint = dto.computed_fingerprint()
        if updated_by is not None:
            self.updated_by = updated_by

    def __repr__(self) -> str:
        return (
            f"<PayrollRecordModel {self.employee_id} "
            f"{self.period_start}..{self.period_end} {self.payment_status}>"
        )
