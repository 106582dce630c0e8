"""
Tests for the attendance hours engine.

Covers:
- Net, regular and overtime hours from check-in/out and break times
- Zero hours for Absent/Leave records and records missing a time
- Rejection of negative durations and inverted breaks
- Status derivation and record enrichment
- Monthly attendance summary
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from payroll_engines.attendance import (
    AttendanceHours,
    compute_record_hours,
    derive_status,
    enrich_attendance_record,
    summarize_attendance,
)
from payroll_kernel.exceptions import InvalidBreakError, NegativeDurationError
from payroll_modules.hr.config import PayrollConfig
from payroll_modules.hr.models import AttendanceStatus
from tests.builders import make_attendance

DAY = date(2024, 3, 4)


class TestComputeRecordHours:

    def test_nine_hour_day_has_one_hour_overtime(self):
        hours = compute_record_hours(make_attendance(DAY, "09:00", "18:00"))

        assert hours.raw == Decimal("9")
        assert hours.net == Decimal("9")
        assert hours.regular == Decimal("8")
        assert hours.overtime == Decimal("1")

    def test_break_is_subtracted(self):
        record = make_attendance(DAY, "09:00", "18:00", break_start="12:00", break_end="13:00")
        hours = compute_record_hours(record)

        assert hours.break_hours == Decimal("1")
        assert hours.net == Decimal("8")
        assert hours.regular == Decimal("8")
        assert hours.overtime == Decimal("0")

    def test_half_break_ignored(self):
        record = make_attendance(DAY, "09:00", "17:00", break_start="12:00")
        assert compute_record_hours(record).net == Decimal("8")

    def test_break_longer_than_shift_clamps_to_zero(self):
        record = make_attendance(DAY, "09:00", "10:00", break_start="08:00", break_end="12:00")
        hours = compute_record_hours(record)

        assert hours.net == Decimal("0")
        assert hours.regular == Decimal("0")
        assert hours.overtime == Decimal("0")

    def test_check_out_before_check_in_rejected(self):
        with pytest.raises(NegativeDurationError) as exc_info:
            compute_record_hours(make_attendance(DAY, "18:00", "09:00"))

        assert exc_info.value.employee_id == "EMP001"
        assert exc_info.value.work_date == DAY

    def test_inverted_break_rejected(self):
        record = make_attendance(DAY, "09:00", "18:00", break_start="13:00", break_end="12:00")
        with pytest.raises(InvalidBreakError):
            compute_record_hours(record)

    @pytest.mark.parametrize("status", [AttendanceStatus.ABSENT, AttendanceStatus.LEAVE])
    def test_non_working_status_counts_zero(self, status):
        record = make_attendance(DAY, "09:00", "18:00", status=status)
        assert compute_record_hours(record) == AttendanceHours.zero()

    def test_missing_check_out_counts_zero(self):
        record = make_attendance(DAY, "09:00", None)
        assert compute_record_hours(record) == AttendanceHours.zero()

    def test_stored_hours_are_ignored(self):
        record = make_attendance(DAY, "09:00", "18:00")
        tampered = replace(record, hours_worked=Decimal("99"), overtime_hours=Decimal("9"))

        assert compute_record_hours(tampered).net == Decimal("9")

    def test_custom_standard_day(self):
        config = PayrollConfig(standard_daily_hours=Decimal("7"), half_day_hours=Decimal("3.5"))
        hours = compute_record_hours(make_attendance(DAY, "09:00", "18:00"), config)

        assert hours.regular == Decimal("7")
        assert hours.overtime == Decimal("2")


class TestDeriveStatus:

    def _status(self, record):
        return derive_status(record, compute_record_hours(record))

    def test_full_day_is_present(self):
        assert self._status(make_attendance(DAY, "09:00", "17:00")) is AttendanceStatus.PRESENT

    def test_check_in_after_nine_is_late(self):
        assert self._status(make_attendance(DAY, "09:15", "18:00")) is AttendanceStatus.LATE

    def test_four_hours_is_half_day(self):
        assert self._status(make_attendance(DAY, "09:00", "13:00")) is AttendanceStatus.HALF_DAY

    def test_short_day_is_partial(self):
        assert self._status(make_attendance(DAY, "09:00", "11:00")) is AttendanceStatus.PARTIAL

    @pytest.mark.parametrize(
        "status",
        [AttendanceStatus.ABSENT, AttendanceStatus.LEAVE, AttendanceStatus.HOLIDAY],
    )
    def test_entered_status_is_preserved(self, status):
        record = make_attendance(DAY, "10:00", "11:00", status=status)
        assert self._status(record) is status

    def test_no_in_time_means_never_late(self):
        config = PayrollConfig(standard_in_time=None)
        record = make_attendance(DAY, "10:00", "18:00")
        assert derive_status(record, compute_record_hours(record, config), config) is AttendanceStatus.PRESENT


class TestEnrichAttendanceRecord:

    def test_fills_rounded_hours(self):
        enriched = enrich_attendance_record(make_attendance(DAY, "09:00", "17:20"))

        assert enriched.hours_worked == Decimal("8.33")
        assert enriched.overtime_hours == Decimal("0.33")
        assert enriched.status is AttendanceStatus.PRESENT

    def test_original_is_unchanged(self):
        record = make_attendance(DAY, "09:00", "18:00")
        enrich_attendance_record(record)
        assert record.hours_worked is None


class TestSummarizeAttendance:

    def test_monthly_sheet_totals(self):
        records = [
            make_attendance(date(2024, 3, 4), "09:00", "18:00"),
            make_attendance(date(2024, 3, 5), "09:30", "18:00", status=AttendanceStatus.LATE),
            make_attendance(date(2024, 3, 6), None, None, status=AttendanceStatus.ABSENT),
            make_attendance(date(2024, 3, 7), None, None, status=AttendanceStatus.LEAVE),
            make_attendance(date(2024, 3, 8), "09:00", "13:00", status=AttendanceStatus.HALF_DAY),
        ]

        summary = summarize_attendance(records)

        assert summary.total_days == 5
        assert summary.present_days == 2
        assert summary.late_days == 1
        assert summary.absent_days == 1
        assert summary.leave_days == 1
        assert summary.half_days == 1
        assert summary.total_regular_hours == Decimal("20.00")
        assert summary.total_overtime_hours == Decimal("1.50")
        assert summary.average_hours_per_day == Decimal("7.17")

    def test_empty(self):
        summary = summarize_attendance([])

        assert summary.total_days == 0
        assert summary.average_hours_per_day == Decimal("0")
