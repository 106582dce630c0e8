"""
Adjustment Domain Models (``payroll_modules.adjustments.models``).

Responsibility
--------------
Frozen dataclass value objects for employee financial adjustments and the
vehicle/office transactions that feed the period finance summary.

Invariants enforced
-------------------
* ``amount`` is the PER-RECIPIENT amount.  A multi-recipient adjustment pays
  every recipient the full amount; ``total_amount`` (amount x recipients) is
  exposed separately and is what financial statements use.
* The type alone decides the sign in any balance: Bonus, Addition and
  Commission are credits; Advance, Deduction and Employee Expense are debits.
* Only an Advance may carry an installment count, and it must be >= 1.

Failure modes
-------------
* Negative amount  -> ``NegativeAmountError``.
* No recipients  -> ``MissingRecipientsError``.
* Repeated recipient  -> ``ValidationError``.
* Bad installments  -> ``InvalidInstallmentsError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_kernel.exceptions import (
    InvalidInstallmentsError,
    MissingRecipientsError,
    NegativeAmountError,
    ValidationError,
)


class AdjustmentType(Enum):
    """Kinds of non-salary financial events."""
    BONUS = "Bonus"
    ADDITION = "Addition"
    COMMISSION = "Commission"
    ADVANCE = "Advance"
    DEDUCTION = "Deduction"
    EMPLOYEE_EXPENSE = "Employee Expense"

    @property
    def is_credit(self) -> bool:
        return self in CREDIT_TYPES


CREDIT_TYPES: frozenset[AdjustmentType] = frozenset(
    {AdjustmentType.BONUS, AdjustmentType.ADDITION, AdjustmentType.COMMISSION}
)
DEBIT_TYPES: frozenset[AdjustmentType] = frozenset(
    {AdjustmentType.ADVANCE, AdjustmentType.DEDUCTION, AdjustmentType.EMPLOYEE_EXPENSE}
)

# Adjustment types the company books as an expense in the period summary.
EXPENSE_TYPES: frozenset[AdjustmentType] = frozenset(
    {
        AdjustmentType.BONUS,
        AdjustmentType.ADDITION,
        AdjustmentType.COMMISSION,
        AdjustmentType.EMPLOYEE_EXPENSE,
    }
)

NO_BOOKING = "No Booking"


@dataclass(frozen=True)
class Adjustment:
    """A typed financial event for one or more employees."""
    id: str
    type: AdjustmentType
    amount: Decimal  # per recipient
    adjustment_date: date
    employee_ids: tuple[str, ...]
    installments: int | None = None
    remarks: str = ""
    vehicle_id: str | None = None  # license plate, or NO_BOOKING
    visit_type: str | None = None

    def __post_init__(self):
        if self.amount < 0:
            raise NegativeAmountError("amount", str(self.amount))
        if not self.employee_ids:
            raise MissingRecipientsError(self.id)
        if len(set(self.employee_ids)) != len(self.employee_ids):
            raise ValidationError(f"Adjustment {self.id} lists a recipient more than once")
        if self.installments is not None:
            if self.type is not AdjustmentType.ADVANCE:
                raise InvalidInstallmentsError(
                    self.id, self.installments, "only an Advance can be paid in installments"
                )
            if self.installments < 1:
                raise InvalidInstallmentsError(
                    self.id, self.installments, "installment count must be at least 1"
                )

    @property
    def recipient_count(self) -> int:
        return len(self.employee_ids)

    @property
    def total_amount(self) -> Decimal:
        """Aggregate disbursed across all recipients (amount x recipient count)."""
        return self.amount * self.recipient_count

    @property
    def is_credit(self) -> bool:
        return self.type.is_credit

    @property
    def installment_count(self) -> int:
        return self.installments or 1


class TransactionKind(Enum):
    """Direction of a vehicle transaction."""
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class VehicleTransaction:
    """A purchase, sale or maintenance cash movement tied to a vehicle."""
    vehicle_id: str
    transaction_date: date
    kind: TransactionKind
    amount: Decimal
    category: str = ""

    def __post_init__(self):
        if self.amount < 0:
            raise NegativeAmountError("amount", str(self.amount))


@dataclass(frozen=True)
class OfficeExpense:
    """A general office expense not tied to a vehicle or an employee."""
    expense_date: date
    amount: Decimal
    description: str = ""

    def __post_init__(self):
        if self.amount < 0:
            raise NegativeAmountError("amount", str(self.amount))
