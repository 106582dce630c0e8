"""
HR selectors: read-only, cached queries over employees, attendance and
payroll records.  These are the SQLAlchemy implementations of the
``EmployeeDirectory`` and ``AttendanceSource`` ports and the read side of
``PayrollSink``.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import select

from payroll_kernel.cache import ATTENDANCE, EMPLOYEE, PAYROLL, CacheKey
from payroll_kernel.exceptions import EmployeeNotFoundError
from payroll_kernel.selectors import BaseSelector
from payroll_modules.hr.models import (
    AttendanceRecord,
    Employee,
    EmployeeStatus,
    PaymentStatus,
    PayrollRecord,
)
from payroll_modules.hr.orm import AttendanceRecordModel, EmployeeModel, PayrollRecordModel
from payroll_modules.hr.ports import AttendanceSource, EmployeeDirectory


class EmployeeSelector(BaseSelector, EmployeeDirectory):

    def get_employee(self, employee_id: str) -> Employee:
        def load() -> Employee:
            model = self.session.scalars(
                select(EmployeeModel).where(EmployeeModel.employee_id == employee_id)
            ).one_or_none()
            if model is None:
                raise EmployeeNotFoundError(employee_id)
            return model.to_dto()

        return self.cache.get_or_load(CacheKey.of(EMPLOYEE, employee_id=employee_id), load)

    def active_employees(self) -> tuple[Employee, ...]:
        def load() -> tuple[Employee, ...]:
            rows = self.session.scalars(
                select(EmployeeModel)
                .where(EmployeeModel.status == EmployeeStatus.ACTIVE.value)
                .order_by(EmployeeModel.employee_id)
            )
            return tuple(m.to_dto() for m in rows)

        return self.cache.get_or_load(CacheKey.of(EMPLOYEE, status="active"), load)


class AttendanceSelector(BaseSelector, AttendanceSource):

    def attendance_for(
        self, employee_id: str, start: date, end: date
    ) -> tuple[AttendanceRecord, ...]:
        def load() -> tuple[AttendanceRecord, ...]:
            rows = self.session.scalars(
                select(AttendanceRecordModel)
                .where(
                    AttendanceRecordModel.employee_id == employee_id,
                    AttendanceRecordModel.work_date >= start,
                    AttendanceRecordModel.work_date <= end,
                )
                .order_by(AttendanceRecordModel.work_date)
            )
            return tuple(m.to_dto() for m in rows)

        key = CacheKey.of(ATTENDANCE, employee_id=employee_id, start=start, end=end)
        return self.cache.get_or_load(key, load)


class PayrollRecordSelector(BaseSelector):
    """Payroll records by key, status or period.  Uncached lookups by key
    are used by the service when it needs the ORM row itself."""

    def find_payroll(
        self, employee_id: str, period_start: date, period_end: date
    ) -> PayrollRecord | None:
        key = CacheKey.of(PAYROLL, employee_id=employee_id, start=period_start, end=period_end)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        model = self.find_model(employee_id, period_start, period_end)
        if model is None:
            return None
        record = model.to_dto()
        self.cache.set(key, record)
        return record

    def find_model(
        self, employee_id: str, period_start: date, period_end: date
    ) -> PayrollRecordModel | None:
        return self.session.scalars(
            select(PayrollRecordModel).where(
                PayrollRecordModel.employee_id == employee_id,
                PayrollRecordModel.period_start == period_start,
                PayrollRecordModel.period_end == period_end,
            )
        ).one_or_none()

    def records_for_period(
        self,
        period_start: date,
        period_end: date,
        status: PaymentStatus | None = None,
    ) -> tuple[PayrollRecord, ...]:
        def load() -> tuple[PayrollRecord, ...]:
            stmt = select(PayrollRecordModel).where(
                PayrollRecordModel.period_start == period_start,
                PayrollRecordModel.period_end == period_end,
            )
            if status is not None:
                stmt = stmt.where(PayrollRecordModel.payment_status == status.value)
            rows = self.session.scalars(stmt.order_by(PayrollRecordModel.employee_id))
            return tuple(m.to_dto() for m in rows)

        key = CacheKey.of(
            PAYROLL,
            start=period_start,
            end=period_end,
            status=status.value if status else None,
        )
        return self.cache.get_or_load(key, load)
