"""
Adjustments Module (``payroll_modules.adjustments``).

Typed, non-salary financial events for one or more employees.  Credits
(Bonus, Addition, Commission) raise gross pay; debits (Advance, Deduction,
Employee Expense) are taken from net pay.  Advances may be repaid in
installments over consecutive pay periods.  Visit-type commissions take a
fixed amount from the versioned rate table in ``payroll_config``.
"""

from payroll_modules.adjustments.models import (
    CREDIT_TYPES,
    DEBIT_TYPES,
    EXPENSE_TYPES,
    NO_BOOKING,
    Adjustment,
    AdjustmentType,
    OfficeExpense,
    TransactionKind,
    VehicleTransaction,
)

__all__ = [
    "CREDIT_TYPES",
    "DEBIT_TYPES",
    "EXPENSE_TYPES",
    "NO_BOOKING",
    "Adjustment",
    "AdjustmentType",
    "OfficeExpense",
    "TransactionKind",
    "VehicleTransaction",
]
