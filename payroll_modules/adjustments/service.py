"""
Adjustment Module Service (``payroll_modules.adjustments.service``).

Responsibility
--------------
Records employee financial adjustments (bonuses, additions, commissions,
advances, deductions, employee expenses) and produces the per-period
reconciliation report.  Visit-type commissions take their amount from the
active ``VisitTypeRateTable``.

Invariants enforced
-------------------
* Each public method owns the transaction boundary (commit on success,
  rollback and re-raise on failure).
* Recording requires the Admin or Manager role.
* Adjustment ids are unique; a repeated id is rejected, not merged.
* Recording an adjustment invalidates cached adjustment AND payroll reads.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from payroll_config.schema import VisitTypeRateTable
from payroll_engines.period import PayrollPeriod
from payroll_engines.reconciliation import ReconciliationReport, reconcile_period
from payroll_kernel.cache import ADJUSTMENT, EntityCache
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.domain.principal import PAYROLL_EDITOR_ROLES, Principal, require_role
from payroll_kernel.exceptions import ValidationError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.utils.ids import adjustment_id
from payroll_modules.adjustments.models import Adjustment, AdjustmentType
from payroll_modules.adjustments.orm import AdjustmentModel
from payroll_modules.adjustments.selectors import AdjustmentSelector
from payroll_modules.adjustments.visit_types import apply_visit_type

logger = get_logger("modules.adjustments.service")


class AdjustmentService:
    """
    Records adjustments and reconciles them per pay period.

    Transaction boundary: this service commits on success, rolls back on failure.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        cache: EntityCache | None = None,
        visit_types: VisitTypeRateTable | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._cache = cache or EntityCache(clock=self._clock)
        self._visit_types = visit_types
        self._selector = AdjustmentSelector(session, self._cache)

    def new_adjustment(
        self,
        type: AdjustmentType,
        amount: Decimal,
        employee_ids: Sequence[str],
        adjustment_date: date | None = None,
        installments: int | None = None,
        remarks: str = "",
        vehicle_id: str | None = None,
        visit_type: str | None = None,
    ) -> Adjustment:
        """Build an unsaved ``Adjustment`` with a clock-derived id."""
        return Adjustment(
            id=adjustment_id(self._clock),
            type=type,
            amount=amount,
            adjustment_date=adjustment_date or self._clock.today(),
            employee_ids=tuple(employee_ids),
            installments=installments,
            remarks=remarks,
            vehicle_id=vehicle_id,
            visit_type=visit_type,
        )

    def record_adjustment(
        self,
        adjustment: Adjustment,
        principal: Principal,
    ) -> Adjustment:
        """
        Persist ``adjustment`` (visit-type amount applied first).

        Raises:
            AuthorizationError: principal may not edit payroll data.
            UnknownVisitTypeError: visit type not in the rate table.
            ValidationError: an adjustment with this id already exists, or a
                visit type is given but no rate table is configured.
        """
        with LogContext.bind(actor_id=principal.actor_id):
            require_role(principal, PAYROLL_EDITOR_ROLES, "record adjustment")
            try:
                if adjustment.visit_type:
                    if self._visit_types is None:
                        raise ValidationError(
                            f"Adjustment {adjustment.id} has a visit type but no rate table is loaded"
                        )
                    adjustment = apply_visit_type(adjustment, self._visit_types)

                if self._selector.get_adjustment(adjustment.id) is not None:
                    raise ValidationError(f"Adjustment {adjustment.id} already exists")

                self._session.add(AdjustmentModel.from_dto(adjustment, created_by=principal.actor_id))
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            self._cache.invalidate(ADJUSTMENT)
            logger.info(
                "adjustment_recorded",
                extra={
                    "adjustment_id": adjustment.id,
                    "type": adjustment.type.value,
                    "amount": adjustment.amount,
                    "recipient_count": adjustment.recipient_count,
                    "total_amount": adjustment.total_amount,
                    "installments": adjustment.installments,
                },
            )
            return adjustment

    def reconciliation_report(self, period: PayrollPeriod) -> ReconciliationReport:
        """Balances and aggregates of every adjustment affecting ``period``."""
        adjustments = self._selector.adjustments_affecting(period.start_date, period.end_date)
        return reconcile_period(adjustments, period)

    def adjustments_for_employee(self, employee_id: str) -> tuple[Adjustment, ...]:
        return self._selector.adjustments_for_employee(employee_id)
