"""
Period finance summary -- income, expenses and profit for one pay period.

Vehicle transactions and office expenses count at face value.  Employee
adjustments that cost the company money (Bonus, Addition, Commission,
Employee Expense) count as expenses at their TOTAL amount, i.e. amount x
recipients.  Advances and Deductions are recovered from pay and are not
expenses.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from payroll_engines.period import PayrollPeriod, resolve_period
from payroll_kernel.db.types import ZERO
from payroll_kernel.logging_config import get_logger
from payroll_modules.adjustments.models import (
    EXPENSE_TYPES,
    Adjustment,
    OfficeExpense,
    TransactionKind,
    VehicleTransaction,
)

logger = get_logger("engines.finance_summary")


@dataclass(frozen=True)
class FinanceSummary:
    period: PayrollPeriod
    vehicle_income: Decimal
    vehicle_expenses: Decimal
    office_expenses: Decimal
    employee_expenses: Decimal

    @property
    def total_income(self) -> Decimal:
        return self.vehicle_income

    @property
    def total_expenses(self) -> Decimal:
        return self.vehicle_expenses + self.office_expenses + self.employee_expenses

    @property
    def net_profit(self) -> Decimal:
        """Positive for a profit, negative for a loss."""
        return self.total_income - self.total_expenses


def summarize_period_finances(
    period: PayrollPeriod,
    vehicle_transactions: Iterable[VehicleTransaction] = (),
    adjustments: Iterable[Adjustment] = (),
    office_expenses: Iterable[OfficeExpense] = (),
) -> FinanceSummary:
    """Summarise everything dated within ``period``."""
    vehicle_income = ZERO
    vehicle_expenses = ZERO
    for txn in vehicle_transactions:
        if resolve_period(txn.transaction_date) != period:
            continue
        if txn.kind is TransactionKind.INCOME:
            vehicle_income += txn.amount
        else:
            vehicle_expenses += txn.amount

    office_total = sum(
        (e.amount for e in office_expenses if resolve_period(e.expense_date) == period),
        ZERO,
    )
    employee_total = sum(
        (
            a.total_amount
            for a in adjustments
            if a.type in EXPENSE_TYPES and resolve_period(a.adjustment_date) == period
        ),
        ZERO,
    )

    summary = FinanceSummary(
        period=period,
        vehicle_income=vehicle_income,
        vehicle_expenses=vehicle_expenses,
        office_expenses=office_total,
        employee_expenses=employee_total,
    )
    logger.info(
        "finance_summary_computed",
        extra={
            "period": period.code,
            "total_income": summary.total_income,
            "total_expenses": summary.total_expenses,
            "net_profit": summary.net_profit,
        },
    )
    return summary
