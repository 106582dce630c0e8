"""
Tests for the period finance summary.

Covers:
- Vehicle income and expenses
- Office expenses
- Employee adjustments booked at their total (amount x recipients)
- Advances and deductions excluded from company expenses
- Period filtering by the 21st-to-20th rule
"""

from datetime import date
from decimal import Decimal

import pytest

from payroll_engines.finance_summary import summarize_period_finances
from payroll_engines.period import PayrollPeriod
from payroll_kernel.exceptions import NegativeAmountError
from payroll_modules.adjustments.models import (
    AdjustmentType,
    OfficeExpense,
    TransactionKind,
    VehicleTransaction,
)
from tests.builders import make_adjustment

MARCH = PayrollPeriod(year=2024, month=3)


def _vehicle(kind, amount, on=date(2024, 3, 5), vehicle_id="1กข-1234"):
    return VehicleTransaction(
        vehicle_id=vehicle_id, transaction_date=on, kind=kind, amount=Decimal(amount)
    )


class TestSummarizePeriodFinances:

    def test_profit(self):
        summary = summarize_period_finances(
            MARCH,
            vehicle_transactions=[
                _vehicle(TransactionKind.INCOME, "450000"),
                _vehicle(TransactionKind.EXPENSE, "380000"),
                _vehicle(TransactionKind.EXPENSE, "12000"),
            ],
            adjustments=[
                make_adjustment(
                    "ADJ-1", AdjustmentType.BONUS, "500", employee_ids=("EMP001", "EMP002", "EMP003")
                ),
                make_adjustment("ADJ-2", AdjustmentType.EMPLOYEE_EXPENSE, "800"),
            ],
            office_expenses=[
                OfficeExpense(expense_date=date(2024, 3, 1), amount=Decimal("3500"), description="Rent"),
            ],
        )

        assert summary.vehicle_income == Decimal("450000")
        assert summary.vehicle_expenses == Decimal("392000")
        assert summary.employee_expenses == Decimal("2300")
        assert summary.office_expenses == Decimal("3500")
        assert summary.total_income == Decimal("450000")
        assert summary.total_expenses == Decimal("397800")
        assert summary.net_profit == Decimal("52200")

    def test_loss_is_negative(self):
        summary = summarize_period_finances(
            MARCH,
            vehicle_transactions=[_vehicle(TransactionKind.EXPENSE, "1000")],
        )
        assert summary.net_profit == Decimal("-1000")

    def test_advances_and_deductions_are_not_expenses(self):
        summary = summarize_period_finances(
            MARCH,
            adjustments=[
                make_adjustment("ADJ-1", AdjustmentType.ADVANCE, "5000", installments=5),
                make_adjustment("ADJ-2", AdjustmentType.DEDUCTION, "300"),
            ],
        )
        assert summary.employee_expenses == Decimal("0")

    def test_items_outside_period_ignored(self):
        summary = summarize_period_finances(
            MARCH,
            vehicle_transactions=[_vehicle(TransactionKind.INCOME, "1000", on=date(2024, 3, 21))],
            adjustments=[make_adjustment(adjustment_date=date(2024, 2, 20))],
            office_expenses=[OfficeExpense(expense_date=date(2024, 3, 25), amount=Decimal("10"))],
        )

        assert summary.total_income == Decimal("0")
        assert summary.total_expenses == Decimal("0")

    def test_empty_period(self):
        summary = summarize_period_finances(MARCH)
        assert summary.net_profit == Decimal("0")

    def test_negative_transaction_rejected(self):
        with pytest.raises(NegativeAmountError):
            _vehicle(TransactionKind.INCOME, "-1")
