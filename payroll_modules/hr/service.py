"""
HR Module Service (``payroll_modules.hr.service``).

Responsibility
--------------
Orchestrates employee, attendance and payroll-record operations: recording
and correcting attendance, generating payroll for a pay period, and moving
payroll records through their lifecycle.  Pure computation is delegated to
``payroll_engines``; reads go through the module selectors.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``PayrollService`` is the sole public entry
point for HR writes.

Invariants enforced
-------------------
* Each public method owns the transaction boundary (``commit`` on success,
  ``rollback`` and re-raise on any exception).
* Every method takes the acting ``Principal`` explicitly and binds its
  actor id into ``LogContext`` for the duration of the call.
* Attendance and payroll writes require the Admin or Manager role; the
  paid -> pending reversal requires Admin.
* ``generate_payroll`` is idempotent: identical inputs return the stored
  record untouched, a pending record whose inputs changed is recomputed in
  place, and a processed or paid record whose inputs changed raises
  ``PayrollRecordImmutableError``.
* Writes invalidate cached reads through ``INVALIDATION_SETS``.

Failure modes
-------------
* ``AuthorizationError`` -- principal lacks the required role.
* ``EmployeeNotFoundError`` / ``MissingSalaryError`` -- reference data.
* ``DuplicateAttendanceError`` -- second record for an employee and date.
* ``ValidationError`` subclasses from the engines.
* ``InvalidPayrollTransitionError`` / ``PayrollRecordImmutableError``.

Usage::

    service = PayrollService(session, clock=clock)
    record = service.generate_payroll("EMP001", PayrollPeriod(2024, 4), principal)
    service.process_payroll("EMP001", PayrollPeriod(2024, 4), principal)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from payroll_engines.attendance import enrich_attendance_record
from payroll_engines.payroll import compute_payroll_for_period
from payroll_engines.period import PayrollPeriod
from payroll_kernel.cache import ATTENDANCE, EMPLOYEE, PAYROLL, EntityCache
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.domain.principal import PAYROLL_EDITOR_ROLES, Principal, require_role
from payroll_kernel.exceptions import (
    AuthorizationError,
    DuplicateAttendanceError,
    MissingDataError,
    PayrollRecordImmutableError,
    PayrollRecordNotFoundError,
    ValidationError,
)
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_modules.adjustments.selectors import AdjustmentSelector
from payroll_modules.hr.config import PayrollConfig
from payroll_modules.hr.models import (
    AttendanceRecord,
    Employee,
    PaymentMethod,
    PaymentStatus,
    PayrollRecord,
    employee_from_record,
)
from payroll_modules.hr.orm import AttendanceRecordModel, EmployeeModel, PayrollRecordModel
from payroll_modules.hr.ports import (
    AdjustmentSource,
    AttendanceSource,
    EmployeeDirectory,
    PayrollSink,
)
from payroll_modules.hr.selectors import (
    AttendanceSelector,
    EmployeeSelector,
    PayrollRecordSelector,
)
from payroll_modules.hr.workflows import PAYROLL_RECORD_WORKFLOW

logger = get_logger("modules.hr.service")


class SqlAlchemyPayrollSink(PayrollSink):
    """``PayrollSink`` over ``hr_payroll_records``.  Never commits."""

    def __init__(self, session: Session, selector: PayrollRecordSelector):
        self._session = session
        self._selector = selector

    def find_payroll(
        self, employee_id: str, period_start: date, period_end: date
    ) -> PayrollRecord | None:
        return self._selector.find_payroll(employee_id, period_start, period_end)

    def save_payroll(self, record: PayrollRecord, actor_id: str) -> PayrollRecord:
        model = self._selector.find_model(record.employee_id, record.period_start, record.period_end)
        if model is None:
            model = PayrollRecordModel.from_dto(record, created_by=actor_id)
            self._session.add(model)
        else:
            model.apply(record, updated_by=actor_id)
        self._session.flush()
        return record


class PayrollService:
    """
    Orchestrates HR attendance and payroll operations.

    Transaction boundary: this service commits on success, rolls back on failure.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: PayrollConfig | None = None,
        cache: EntityCache | None = None,
        employees: EmployeeDirectory | None = None,
        attendance: AttendanceSource | None = None,
        adjustments: AdjustmentSource | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or PayrollConfig.with_defaults()
        self._cache = cache or EntityCache(clock=self._clock)

        self._employees = employees or EmployeeSelector(session, self._cache)
        self._attendance = attendance or AttendanceSelector(session, self._cache)
        self._adjustments = adjustments or AdjustmentSelector(session, self._cache)
        self._payroll = PayrollRecordSelector(session, self._cache)
        self._sink = SqlAlchemyPayrollSink(session, self._payroll)

    # =========================================================================
    # Employees
    # =========================================================================

    def register_employee(
        self,
        employee: Employee | Mapping[str, Any],
        principal: Principal,
    ) -> Employee:
        """
        Insert or update an employee.

        Raw mappings (flat or nested legacy shapes) are adapted with
        ``employee_from_record`` first.
        """
        if not isinstance(employee, Employee):
            employee = employee_from_record(employee)

        with LogContext.bind(actor_id=principal.actor_id, employee_id=employee.employee_id):
            require_role(principal, PAYROLL_EDITOR_ROLES, "register employee")
            try:
                model = self._session.scalars(
                    select(EmployeeModel).where(EmployeeModel.employee_id == employee.employee_id)
                ).one_or_none()
                if model is None:
                    self._session.add(EmployeeModel.from_dto(employee, created_by=principal.actor_id))
                else:
                    model.name = employee.name
                    model.basic_salary = employee.basic_salary
                    model.department = employee.department
                    model.position = employee.position
                    model.status = employee.status.value
                    model.joining_date = employee.joining_date
                    model.updated_by = principal.actor_id
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            self._cache.invalidate(EMPLOYEE)
            logger.info(
                "employee_registered",
                extra={"is_new": model is None, "status": employee.status.value},
            )
            return employee

    def import_employees(
        self,
        rows: Iterable[Mapping[str, Any]],
        principal: Principal,
    ) -> list[Employee]:
        """Register every raw employee row; stops at the first invalid row."""
        return [self.register_employee(row, principal) for row in rows]

    # =========================================================================
    # Attendance
    # =========================================================================

    def record_attendance(
        self,
        record: AttendanceRecord,
        principal: Principal,
    ) -> AttendanceRecord:
        """
        Store a new attendance record with derived hours and status.

        Raises:
            DuplicateAttendanceError: a record already exists for the date.
            NegativeDurationError / InvalidBreakError: bad times.
        """
        with LogContext.bind(actor_id=principal.actor_id, employee_id=record.employee_id):
            require_role(principal, PAYROLL_EDITOR_ROLES, "record attendance")
            try:
                if self._find_attendance(record.employee_id, record.work_date) is not None:
                    raise DuplicateAttendanceError(record.employee_id, record.work_date)

                enriched = enrich_attendance_record(record, self._config)
                self._session.add(
                    AttendanceRecordModel.from_dto(enriched, created_by=principal.actor_id)
                )
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            self._cache.invalidate(ATTENDANCE)
            logger.info(
                "attendance_recorded",
                extra={
                    "work_date": enriched.work_date,
                    "status": enriched.status.value,
                    "hours_worked": enriched.hours_worked,
                    "overtime_hours": enriched.overtime_hours,
                },
            )
            return enriched

    def correct_attendance(
        self,
        record: AttendanceRecord,
        principal: Principal,
    ) -> AttendanceRecord:
        """Replace the times/status of an existing record and re-derive hours."""
        with LogContext.bind(actor_id=principal.actor_id, employee_id=record.employee_id):
            require_role(principal, PAYROLL_EDITOR_ROLES, "correct attendance")
            try:
                model = self._find_attendance(record.employee_id, record.work_date)
                if model is None:
                    raise MissingDataError(
                        f"No attendance for {record.employee_id} on {record.work_date}"
                    )
                previous_status = model.status
                enriched = enrich_attendance_record(record, self._config)
                model.apply(enriched, updated_by=principal.actor_id)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            self._cache.invalidate(ATTENDANCE)
            logger.info(
                "attendance_corrected",
                extra={
                    "work_date": enriched.work_date,
                    "previous_status": previous_status,
                    "status": enriched.status.value,
                    "hours_worked": enriched.hours_worked,
                },
            )
            return enriched

    def _find_attendance(self, employee_id: str, work_date: date) -> AttendanceRecordModel | None:
        return self._session.scalars(
            select(AttendanceRecordModel).where(
                AttendanceRecordModel.employee_id == employee_id,
                AttendanceRecordModel.work_date == work_date,
            )
        ).one_or_none()

    # =========================================================================
    # Payroll generation
    # =========================================================================

    def generate_payroll(
        self,
        employee_id: str,
        period: PayrollPeriod,
        principal: Principal,
        payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER,
    ) -> PayrollRecord:
        """
        Compute and store the payroll record of one employee for ``period``.

        Returns:
            The stored record (unchanged if the inputs did not change).
        """
        with LogContext.bind(
            actor_id=principal.actor_id, employee_id=employee_id, period=period.code
        ):
            require_role(principal, PAYROLL_EDITOR_ROLES, "generate payroll")
            try:
                result = self._generate(employee_id, period, principal, payment_method)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            self._cache.invalidate(PAYROLL)
            return result

    def generate_period_payroll(
        self,
        period: PayrollPeriod,
        principal: Principal,
    ) -> list[PayrollRecord]:
        """Generate payroll for every active employee in one transaction."""
        with LogContext.bind(actor_id=principal.actor_id, period=period.code):
            require_role(principal, PAYROLL_EDITOR_ROLES, "generate payroll")
            try:
                results = []
                for employee in self._employees.active_employees():
                    with LogContext.bind(employee_id=employee.employee_id):
                        results.append(
                            self._generate(
                                employee.employee_id, period, principal,
                                PaymentMethod.BANK_TRANSFER,
                            )
                        )
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            self._cache.invalidate(PAYROLL)
            logger.info("period_payroll_generated", extra={"record_count": len(results)})
            return results

    def _generate(
        self,
        employee_id: str,
        period: PayrollPeriod,
        principal: Principal,
        payment_method: PaymentMethod,
    ) -> PayrollRecord:
        start, end = period.start_date, period.end_date
        employee = self._employees.get_employee(employee_id)
        attendance = self._attendance.attendance_for(employee_id, start, end)
        adjustments = self._adjustments.adjustments_affecting(start, end)

        computed = compute_payroll_for_period(
            employee, attendance, period, adjustments, self._config
        )

        existing = self._payroll.find_model(employee_id, start, end)
        if existing is None:
            record = replace(computed, payment_method=payment_method)
            self._sink.save_payroll(record, principal.actor_id)
            logger.info(
                "payroll_record_created",
                extra={"gross_pay": record.gross_pay, "net_pay": record.net_pay},
            )
            return record

        if existing.fingerprint == computed.computed_fingerprint():
            logger.info(
                "payroll_record_unchanged",
                extra={"payment_status": existing.payment_status},
            )
            return existing.to_dto()

        if existing.payment_status != PaymentStatus.PENDING.value:
            logger.warning(
                "payroll_record_immutable",
                extra={"payment_status": existing.payment_status},
            )
            raise PayrollRecordImmutableError(employee_id, existing.payment_status)

        record = replace(computed, payment_method=PaymentMethod(existing.payment_method))
        self._sink.save_payroll(record, principal.actor_id)
        logger.info(
            "payroll_record_recomputed",
            extra={"gross_pay": record.gross_pay, "net_pay": record.net_pay},
        )
        return record

    # =========================================================================
    # Payroll record lifecycle
    # =========================================================================

    def process_payroll(
        self, employee_id: str, period: PayrollPeriod, principal: Principal
    ) -> PayrollRecord:
        """pending -> processed."""
        return self._transition(employee_id, period, "process", principal)

    def pay_payroll(
        self,
        employee_id: str,
        period: PayrollPeriod,
        principal: Principal,
        payment_date: date | None = None,
        payment_method: PaymentMethod | None = None,
    ) -> PayrollRecord:
        """processed -> paid.  ``payment_date`` defaults to the clock's today."""
        return self._transition(
            employee_id, period, "pay", principal,
            payment_date=payment_date or self._clock.today(),
            payment_method=payment_method,
        )

    def reverse_payroll(
        self, employee_id: str, period: PayrollPeriod, principal: Principal
    ) -> PayrollRecord:
        """paid -> pending (Admin only).  Clears the payment date."""
        return self._transition(employee_id, period, "reverse", principal)

    def _transition(
        self,
        employee_id: str,
        period: PayrollPeriod,
        action: str,
        principal: Principal,
        payment_date: date | None = None,
        payment_method: PaymentMethod | None = None,
    ) -> PayrollRecord:
        with LogContext.bind(
            actor_id=principal.actor_id, employee_id=employee_id, period=period.code
        ):
            require_role(principal, PAYROLL_EDITOR_ROLES, f"{action} payroll")
            try:
                model = self._payroll.find_model(employee_id, period.start_date, period.end_date)
                if model is None:
                    raise PayrollRecordNotFoundError(employee_id, period.start_date, period.end_date)

                from_state = model.payment_status
                transition = PAYROLL_RECORD_WORKFLOW.transition_for(from_state, action)
                if transition.required_roles and principal.role.value not in transition.required_roles:
                    raise AuthorizationError(principal.actor_id, principal.role.value, f"{action} payroll")

                if action == "process" and not model.to_dto().is_balanced:
                    raise ValidationError(
                        f"Payroll record for {employee_id} in {period.code} does not balance"
                    )
                if action == "pay":
                    model.payment_date = payment_date
                    if payment_method is not None:
                        model.payment_method = payment_method.value
                if action == "reverse":
                    model.payment_date = None

                model.payment_status = transition.to_state
                model.updated_by = principal.actor_id
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            self._cache.invalidate(PAYROLL)
            logger.info(
                "payroll_record_transitioned",
                extra={
                    "action": action,
                    "from_state": from_state,
                    "to_state": transition.to_state,
                },
            )
            return model.to_dto()

    # =========================================================================
    # Reads
    # =========================================================================

    def payroll_for(self, employee_id: str, period: PayrollPeriod) -> PayrollRecord:
        record = self._sink.find_payroll(employee_id, period.start_date, period.end_date)
        if record is None:
            raise PayrollRecordNotFoundError(employee_id, period.start_date, period.end_date)
        return record

