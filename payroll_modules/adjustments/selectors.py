"""Adjustment selector: the SQLAlchemy ``AdjustmentSource``."""

from __future__ import annotations

from datetime import date

from sqlalchemy import or_, select

from payroll_kernel.cache import ADJUSTMENT, CacheKey
from payroll_kernel.selectors import BaseSelector
from payroll_modules.adjustments.models import Adjustment, AdjustmentType
from payroll_modules.adjustments.orm import AdjustmentModel, AdjustmentRecipientModel
from payroll_modules.hr.ports import AdjustmentSource


class AdjustmentSelector(BaseSelector, AdjustmentSource):

    def adjustments_affecting(self, start: date, end: date) -> tuple[Adjustment, ...]:
        def load() -> tuple[Adjustment, ...]:
            rows = self.session.scalars(
                select(AdjustmentModel)
                .where(
                    AdjustmentModel.adjustment_date <= end,
                    or_(
                        AdjustmentModel.adjustment_date >= start,
                        (AdjustmentModel.type == AdjustmentType.ADVANCE.value)
                        & AdjustmentModel.installments.is_not(None),
                    ),
                )
                .order_by(AdjustmentModel.adjustment_date, AdjustmentModel.adjustment_id)
            )
            return tuple(m.to_dto() for m in rows)

        return self.cache.get_or_load(CacheKey.of(ADJUSTMENT, start=start, end=end), load)

    def adjustments_for_employee(self, employee_id: str) -> tuple[Adjustment, ...]:
        def load() -> tuple[Adjustment, ...]:
            rows = self.session.scalars(
                select(AdjustmentModel)
                .join(AdjustmentRecipientModel)
                .where(AdjustmentRecipientModel.employee_id == employee_id)
                .order_by(AdjustmentModel.adjustment_date, AdjustmentModel.adjustment_id)
            )
            return tuple(m.to_dto() for m in rows)

        return self.cache.get_or_load(CacheKey.of(ADJUSTMENT, employee_id=employee_id), load)

    def get_adjustment(self, adjustment_id: str) -> Adjustment | None:
        model = self.session.scalars(
            select(AdjustmentModel).where(AdjustmentModel.adjustment_id == adjustment_id)
        ).one_or_none()
        return model.to_dto() if model else None
