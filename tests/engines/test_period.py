"""
Tests for the pay period resolver.

Covers:
- The day-20 / day-21 boundary
- December rollover into January of the next year
- Period start/end dates and codes
- Shifting and iterating periods
- current_period with an injected clock
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from payroll_engines.period import (
    PERIOD_CUTOFF_DAY,
    PayrollPeriod,
    current_period,
    iter_periods,
    period_bounds,
    period_for_month,
    resolve_period,
)
from payroll_kernel.domain.clock import DeterministicClock


class TestResolvePeriod:

    def test_day_twenty_stays_in_month(self):
        assert resolve_period(date(2024, 3, 20)) == PayrollPeriod(year=2024, month=3)

    def test_day_twenty_one_moves_to_next_month(self):
        assert resolve_period(date(2024, 3, 21)) == PayrollPeriod(year=2024, month=4)

    def test_december_rolls_into_next_year(self):
        assert resolve_period(date(2024, 12, 25)) == PayrollPeriod(year=2025, month=1)

    def test_december_twentieth_stays_in_december(self):
        assert resolve_period(date(2024, 12, 20)) == PayrollPeriod(year=2024, month=12)

    def test_first_of_month(self):
        assert resolve_period(date(2024, 1, 1)) == PayrollPeriod(year=2024, month=1)

    def test_month_end_of_february(self):
        assert resolve_period(date(2024, 2, 29)) == PayrollPeriod(year=2024, month=3)

    def test_datetime_is_reduced_to_its_date(self):
        moment = datetime(2024, 3, 21, 0, 30, tzinfo=timezone.utc)
        assert resolve_period(moment) == PayrollPeriod(year=2024, month=4)

    @given(st.dates(min_value=date(2000, 1, 1), max_value=date(2099, 12, 31)))
    def test_every_date_lies_within_its_period(self, d):
        period = resolve_period(d)
        assert period.start_date <= d <= period.end_date
        assert period.contains(d)

    @given(st.dates(min_value=date(2000, 1, 1), max_value=date(2099, 12, 30)))
    def test_period_changes_only_across_the_cutoff(self, d):
        following = d + timedelta(days=1)
        if following.day == PERIOD_CUTOFF_DAY + 1:
            assert resolve_period(following) == resolve_period(d).shift(1)
        else:
            assert resolve_period(following) == resolve_period(d)


class TestPayrollPeriod:

    def test_bounds(self):
        period = PayrollPeriod(year=2024, month=4)
        assert period.start_date == date(2024, 3, 21)
        assert period.end_date == date(2024, 4, 20)
        assert period_bounds(period) == (date(2024, 3, 21), date(2024, 4, 20))

    def test_january_starts_in_previous_december(self):
        period = PayrollPeriod(year=2025, month=1)
        assert period.start_date == date(2024, 12, 21)
        assert period.end_date == date(2025, 1, 20)

    def test_code_and_str(self):
        period = PayrollPeriod(year=2024, month=3)
        assert period.code == "2024-03"
        assert str(period) == "2024-03"

    def test_invalid_month_rejected(self):
        with pytest.raises(ValueError):
            PayrollPeriod(year=2024, month=13)

    def test_periods_sort_chronologically(self):
        periods = [
            PayrollPeriod(year=2025, month=1),
            PayrollPeriod(year=2024, month=12),
            PayrollPeriod(year=2024, month=2),
        ]
        assert sorted(periods) == [
            PayrollPeriod(year=2024, month=2),
            PayrollPeriod(year=2024, month=12),
            PayrollPeriod(year=2025, month=1),
        ]

    def test_shift_across_year(self):
        period = PayrollPeriod(year=2024, month=11)
        assert period.shift(3) == PayrollPeriod(year=2025, month=2)
        assert period.shift(-11) == PayrollPeriod(year=2023, month=12)

    def test_period_for_month(self):
        assert period_for_month(2024, 6) == PayrollPeriod(year=2024, month=6)

    def test_iter_periods(self):
        periods = list(iter_periods(PayrollPeriod(year=2024, month=11), 4))
        assert [p.code for p in periods] == ["2024-11", "2024-12", "2025-01", "2025-02"]


class TestCurrentPeriod:

    def test_uses_clock_date(self):
        clock = DeterministicClock(datetime(2024, 3, 25, 8, 0, tzinfo=timezone.utc))
        assert current_period(clock) == PayrollPeriod(year=2024, month=4)

    def test_follows_clock_advance(self):
        clock = DeterministicClock(datetime(2024, 3, 20, 23, 59, tzinfo=timezone.utc))
        assert current_period(clock) == PayrollPeriod(year=2024, month=3)
        clock.advance(120)
        assert current_period(clock) == PayrollPeriod(year=2024, month=4)
