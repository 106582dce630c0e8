"""
Tests for the payroll calculator.

Covers:
- Hourly rate, basic and overtime pay for a single day
- Stepped flat tax brackets and their boundaries
- Adjustment balances flowing into bonuses and deductions
- Rounding once per derived figure and the payroll identities
- Zero-attendance periods (warning, not failure)
- Validation of salary, period range and attendance input
- Determinism of repeated computations
"""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

import pytest
from hypothesis import given, settings, strategies as st

from payroll_engines.payroll import (
    compute_payroll,
    compute_payroll_for_period,
    compute_tax,
    hourly_rate_for,
    payroll_fingerprint,
    tax_rate_for,
)
from payroll_engines.period import PayrollPeriod
from payroll_engines.reconciliation import AdjustmentBalance
from payroll_kernel.exceptions import (
    AttendanceEmployeeMismatchError,
    AttendanceOutsidePeriodError,
    DuplicateAttendanceError,
    InvalidPeriodRangeError,
    MissingSalaryError,
    ValidationError,
    ZeroAttendanceWarning,
)
from payroll_modules.adjustments.models import AdjustmentType
from payroll_modules.hr.models import AttendanceStatus, PaymentStatus
from tests.builders import make_adjustment, make_attendance, make_employee

APRIL = PayrollPeriod(year=2024, month=4)
START, END = APRIL.start_date, APRIL.end_date
WORK_DAY = date(2024, 4, 1)


def _balance(employee_id="EMP001", credits="0", debits="0"):
    credits, debits = Decimal(credits), Decimal(debits)
    return AdjustmentBalance(
        employee_id=employee_id, credits=credits, debits=debits, net=credits - debits
    )


class TestSingleDay:

    def test_nine_hour_day(self):
        record = compute_payroll(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "18:00")],
            START,
            END,
        )

        assert record.regular_hours == Decimal("8")
        assert record.overtime_hours == Decimal("1")
        assert record.hourly_rate == Decimal("100.00")
        assert record.basic_salary == Decimal("800.00")
        assert record.overtime_pay == Decimal("150.00")
        assert record.gross_pay == Decimal("950.00")
        assert record.tax_rate == Decimal("0.05")
        assert record.tax_deduction == Decimal("47.50")
        assert record.net_pay == Decimal("902.50")
        assert record.payment_status is PaymentStatus.PENDING
        assert record.warnings == ()

    def test_hourly_rate_is_salary_over_240_hours(self):
        assert hourly_rate_for(Decimal("24000")) == Decimal("100")

    def test_rounding_happens_once_per_figure(self):
        record = compute_payroll(
            make_employee(salary="25000"),
            [make_attendance(WORK_DAY, "09:00", "18:00")],
            START,
            END,
        )

        # 25000 / 240 = 104.1666...
        assert record.hourly_rate == Decimal("104.17")
        assert record.basic_salary == Decimal("833.33")
        assert record.overtime_pay == Decimal("156.25")
        assert record.gross_pay == Decimal("989.58")
        assert record.tax_deduction == Decimal("49.48")
        assert record.net_pay == Decimal("940.10")
        assert record.is_balanced

    def test_break_reduces_pay(self):
        record = compute_payroll(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "18:00", break_start="12:00", break_end="13:00")],
            START,
            END,
        )

        assert record.regular_hours == Decimal("8")
        assert record.overtime_hours == Decimal("0")
        assert record.gross_pay == Decimal("800.00")

    def test_absent_day_pays_nothing(self):
        record = compute_payroll(
            make_employee(),
            [make_attendance(WORK_DAY, "09:00", "18:00", status=AttendanceStatus.ABSENT)],
            START,
            END,
        )

        assert record.gross_pay == Decimal("0")
        assert record.warnings == ()


class TestTax:

    @pytest.mark.parametrize(
        "gross, rate, tax",
        [
            ("4500", "0.10", "450.00"),
            ("6000", "0.15", "900.00"),
            ("2000", "0.05", "100.00"),
        ],
    )
    def test_brackets(self, gross, rate, tax):
        assert compute_tax(Decimal(gross)) == (Decimal(rate), Decimal(tax))

    @pytest.mark.parametrize(
        "gross, rate",
        [
            ("5000", "0.10"),
            ("5000.01", "0.15"),
            ("3000", "0.05"),
            ("3000.01", "0.10"),
            ("0", "0.05"),
        ],
    )
    def test_thresholds_are_strict(self, gross, rate):
        assert tax_rate_for(Decimal(gross)) == Decimal(rate)

    def test_tax_is_flat_not_progressive(self):
        _, tax = compute_tax(Decimal("10000"))
        assert tax == Decimal("1500.00")

    def test_tax_rounds_half_up(self):
        # 0.05 x 10.10 = 0.505
        _, tax = compute_tax(Decimal("10.10"))
        assert tax == Decimal("0.51")


class TestAdjustments:

    def test_credits_and_debits(self):
        record = compute_payroll(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "18:00")],
            START,
            END,
            adjustments=_balance(credits="500", debits="100"),
        )

        assert record.bonuses == Decimal("500")
        assert record.deductions == Decimal("100")
        assert record.gross_pay == Decimal("1450.00")
        assert record.tax_deduction == Decimal("72.50")
        assert record.net_pay == Decimal("1277.50")
        assert record.is_balanced

    def test_sub_cent_amounts_are_rounded(self):
        record = compute_payroll_for_period(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "17:00")],
            APRIL,
            [make_adjustment(amount="100.005", adjustment_date=WORK_DAY)],
        )

        assert record.bonuses == Decimal("100.01")
        assert record.gross_pay == Decimal("900.01")
        assert record.gross_pay == record.gross_pay.quantize(Decimal("0.01"))
        assert record.net_pay == record.net_pay.quantize(Decimal("0.01"))
        assert record.is_balanced

    def test_sub_cent_debits_are_rounded(self):
        record = compute_payroll(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "17:00")],
            START,
            END,
            adjustments=_balance(debits="10.004"),
        )

        assert record.deductions == Decimal("10.00")
        assert record.net_pay == Decimal("750.00")

    def test_bonus_can_move_gross_into_higher_bracket(self):
        record = compute_payroll(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "18:00")],
            START,
            END,
            adjustments=_balance(credits="2100"),
        )

        assert record.gross_pay == Decimal("3050.00")
        assert record.tax_rate == Decimal("0.10")

    def test_balance_of_other_employee_rejected(self):
        with pytest.raises(ValidationError):
            compute_payroll(
                make_employee("EMP001"),
                [make_attendance(WORK_DAY)],
                START,
                END,
                adjustments=_balance(employee_id="EMP002", credits="500"),
            )

    def test_negative_net_pay_is_logged(self, captured_logs):
        record = compute_payroll(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "17:00")],
            START,
            END,
            adjustments=_balance(debits="2000"),
        )

        assert record.net_pay == Decimal("-1240.00")
        assert record.is_balanced
        assert any(r["message"] == "payroll_negative_net_pay" for r in captured_logs())

    def test_for_period_reconciles_adjustments(self):
        adjustments = [
            make_adjustment("ADJ-B", AdjustmentType.BONUS, "500", date(2024, 4, 5)),
            make_adjustment(
                "ADJ-A", AdjustmentType.ADVANCE, "1200", date(2024, 3, 10), installments=6
            ),
            make_adjustment(
                "ADJ-X", AdjustmentType.BONUS, "999", date(2024, 4, 5), employee_ids=("EMP002",)
            ),
        ]

        record = compute_payroll_for_period(
            make_employee(salary="24000"),
            [make_attendance(WORK_DAY, "09:00", "18:00")],
            APRIL,
            adjustments,
        )

        assert record.period_start == date(2024, 3, 21)
        assert record.period_end == date(2024, 4, 20)
        assert record.bonuses == Decimal("500")
        assert record.deductions == Decimal("200.00")


class TestZeroAttendance:

    def test_produces_record_with_warning(self, captured_logs):
        with pytest.warns(ZeroAttendanceWarning):
            record = compute_payroll(make_employee(), [], START, END)

        assert record.warnings == ("ZERO_ATTENDANCE",)
        assert record.regular_hours == Decimal("0")
        assert record.gross_pay == Decimal("0")
        assert record.tax_deduction == Decimal("0.00")
        assert record.net_pay == Decimal("0.00")
        assert any(r["message"] == "payroll_zero_attendance" for r in captured_logs())

    def test_warning_points_at_caller(self):
        with pytest.warns(ZeroAttendanceWarning) as caught:
            compute_payroll(make_employee(), [], START, END)

        assert caught[0].filename == __file__

    def test_bonus_still_paid(self):
        with pytest.warns(ZeroAttendanceWarning):
            record = compute_payroll(
                make_employee(), [], START, END, adjustments=_balance(credits="500")
            )

        assert record.gross_pay == Decimal("500")
        assert record.net_pay == Decimal("475.00")


class TestValidation:

    def test_missing_salary(self, captured_logs):
        with pytest.raises(MissingSalaryError) as exc_info:
            compute_payroll(make_employee(salary=None), [make_attendance(WORK_DAY)], START, END)

        assert exc_info.value.employee_id == "EMP001"
        assert exc_info.value.code == "MISSING_SALARY"
        assert any(r["message"] == "payroll_missing_salary" for r in captured_logs())

    def test_period_start_after_end(self):
        with pytest.raises(InvalidPeriodRangeError):
            compute_payroll(make_employee(), [], END, START)

    def test_attendance_of_other_employee(self):
        with pytest.raises(AttendanceEmployeeMismatchError):
            compute_payroll(
                make_employee("EMP001"),
                [make_attendance(WORK_DAY, employee_id="EMP002")],
                START,
                END,
            )

    def test_attendance_outside_period(self):
        with pytest.raises(AttendanceOutsidePeriodError):
            compute_payroll(make_employee(), [make_attendance(date(2024, 4, 21))], START, END)

    def test_duplicate_date(self):
        with pytest.raises(DuplicateAttendanceError):
            compute_payroll(
                make_employee(),
                [make_attendance(WORK_DAY), make_attendance(WORK_DAY, "10:00", "16:00")],
                START,
                END,
            )


class TestDeterminism:

    def test_identical_inputs_give_identical_records(self):
        employee = make_employee(salary="31500")
        attendance = [
            make_attendance(date(2024, 3, 25), "08:45", "19:10", "EMP001", "12:00", "12:45"),
            make_attendance(date(2024, 4, 2), "09:00", "17:30"),
        ]
        balance = _balance(credits="750", debits="125.50")

        first = compute_payroll(employee, attendance, START, END, adjustments=balance)
        second = compute_payroll(employee, list(attendance), START, END, adjustments=balance)

        assert first == second
        assert payroll_fingerprint(first) == payroll_fingerprint(second)

    def test_fingerprint_ignores_lifecycle_fields(self):
        record = compute_payroll(make_employee(), [make_attendance(WORK_DAY)], START, END)
        paid = replace(record, payment_status=PaymentStatus.PAID, payment_date=END)

        assert payroll_fingerprint(paid) == payroll_fingerprint(record)

    def test_engine_trace_is_logged(self, captured_logs):
        compute_payroll(make_employee(), [make_attendance(WORK_DAY)], START, END)

        traces = [r for r in captured_logs() if r["message"] == "PAYROLL_ENGINE_TRACE"]
        assert traces
        assert traces[-1]["engine_name"] == "payroll"
        assert len(traces[-1]["input_fingerprint"]) == 16


class TestPayrollIdentities:

    @settings(max_examples=60, deadline=None)
    @given(
        salary=st.decimals(min_value=Decimal("0"), max_value=Decimal("300000"), places=2),
        checkouts=st.lists(st.integers(min_value=10, max_value=23), min_size=1, max_size=25),
        credits=st.decimals(min_value=Decimal("0"), max_value=Decimal("20000"), places=2),
        debits=st.decimals(min_value=Decimal("0"), max_value=Decimal("20000"), places=2),
    )
    def test_record_always_balances(self, salary, checkouts, credits, debits):
        attendance = [
            make_attendance(START + timedelta(days=i), "09:00", f"{hour:02d}:00")
            for i, hour in enumerate(checkouts)
        ]
        record = compute_payroll(
            make_employee(salary=str(salary)),
            attendance,
            START,
            END,
            adjustments=_balance(credits=str(credits), debits=str(debits)),
        )

        assert record.is_balanced
        assert record.tax_deduction == record.tax_deduction.quantize(Decimal("0.01"))
        assert record.tax_rate == tax_rate_for(record.gross_pay)
