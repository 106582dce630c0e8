"""
Adjustment ORM Models (``payroll_modules.adjustments.orm``).

SQLAlchemy persistence for employee financial adjustments.  The parent row
keeps the per-employee ``amount`` together with ``recipient_count`` and
``total_amount``; each recipient row holds that employee's amount, so
per-employee and aggregate views are both stored and never confused.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_kernel.db.base import TrackedBase
from payroll_modules.adjustments.models import Adjustment, AdjustmentType


class AdjustmentModel(TrackedBase):
    """
    ORM model for adjustments.

    Guarantees:
        - adjustment_id is unique (uq_fin_adjustments_adjustment_id).
        - total_amount == amount x recipient_count.
    """

    __tablename__ = "fin_adjustments"

    __table_args__ = (
        UniqueConstraint("adjustment_id", name="uq_fin_adjustments_adjustment_id"),
        Index("idx_fin_adjustments_date", "adjustment_date"),
        Index("idx_fin_adjustments_type", "type"),
    )

    adjustment_id: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    adjustment_date: Mapped[date] = mapped_column(Date, nullable=False)
    installments: Mapped[int | None] = mapped_column(nullable=True)
    remarks: Mapped[str] = mapped_column(String(4000), default="")
    vehicle_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    visit_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recipient_count: Mapped[int] = mapped_column(nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(nullable=False)

    recipients: Mapped[list[AdjustmentRecipientModel]] = relationship(
        back_populates="adjustment",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="AdjustmentRecipientModel.position",
    )

    def to_dto(self) -> Adjustment:
        """Convert ORM model to frozen dataclass."""
        return Adjustment(
            id=self.adjustment_id,
            type=AdjustmentType(self.type),
            amount=self.amount,
            adjustment_date=self.adjustment_date,
            employee_ids=tuple(r.employee_id for r in self.recipients),
            installments=self.installments,
            remarks=self.remarks or "",
            vehicle_id=self.vehicle_id,
            visit_type=self.visit_type,
        )

    @classmethod
    def from_dto(cls, dto: Adjustment, created_by: str) -> AdjustmentModel:
        """Create ORM model (with recipient rows) from frozen dataclass."""
        return cls(
            adjustment_id=dto.id,
            type=dto.type.value,
            amount=dto.amount,
            adjustment_date=dto.adjustment_date,
            installments=dto.installments,
            remarks=dto.remarks,
            vehicle_id=dto.vehicle_id,
            visit_type=dto.visit_type,
            recipient_count=dto.recipient_count,
            total_amount=dto.total_amount,
            created_by=created_by,
            recipients=[
                AdjustmentRecipientModel(
                    employee_id=employee_id,
                    position=position,
                    amount=dto.amount,
                    created_by=created_by,
                )
                for position, employee_id in enumerate(dto.employee_ids)
            ],
        )

    def __repr__(self) -> str:
        return f"<AdjustmentModel {self.adjustment_id} {self.type} x{self.recipient_count}>"


class AdjustmentRecipientModel(TrackedBase):
    """One recipient employee of an adjustment and the amount they receive."""

    __tablename__ = "fin_adjustment_recipients"

    __table_args__ = (
        UniqueConstraint(
            "adjustment_pk", "employee_id", name="uq_fin_adjustment_recipients_employee"
        ),
        Index("idx_fin_adjustment_recipients_employee_id", "employee_id"),
    )

    adjustment_pk: Mapped[UUID] = mapped_column(
        ForeignKey("fin_adjustments.id"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(String(50), nullable=False)
    position: Mapped[int] = mapped_column(default=0)
    amount: Mapped[Decimal] = mapped_column(nullable=False)

    adjustment: Mapped[AdjustmentModel] = relationship(back_populates="recipients")
