"""
Tests for payroll configuration loading.

Covers:
- The bundled payroll rules and visit-type rate table
- Checksum determinism and PAYROLL_CONFIG_TRACE
- Missing sections, files and keys
- PayrollConfig validation
"""

from datetime import date, time
from decimal import Decimal
from pathlib import Path

import pytest

from payroll_config import get_active_config
from payroll_config.loader import (
    compute_checksum,
    load_payroll_config,
    load_visit_type_table,
    parse_visit_type_table,
)
from payroll_config.schema import VisitTypeRate, VisitTypeRateTable
from payroll_kernel.exceptions import ConfigurationError, UnknownVisitTypeError
from payroll_modules.hr.config import PayrollConfig, TaxBracket

EXPECTED_VISIT_TYPES = {
    "View car at shop – Not Completed": Decimal("150"),
    "View car at shop – Completed": Decimal("500"),
    "View car in Bangkok – Not Completed": Decimal("300"),
    "View car in Bangkok – Completed": Decimal("1300"),
    "View car in another province over 100 km (no overnight, not completed)": Decimal("1100"),
    "View car in another province over 100 km (no overnight, completed)": Decimal("2100"),
    "View car in another province over 100 km (overnight, not completed)": Decimal("1300"),
    "View car in another province over 100 km (overnight, completed)": Decimal("2300"),
}


def _write(directory: Path, name: str, text: str) -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


class TestActiveConfig:

    def test_bundled_payroll_rules_are_the_defaults(self):
        assert get_active_config().payroll == PayrollConfig.with_defaults()

    def test_bundled_visit_types(self):
        table = get_active_config().visit_types

        assert table.version == "2024.1"
        assert table.effective_from == date(2024, 1, 1)
        assert {r.name: r.amount for r in table.rates} == EXPECTED_VISIT_TYPES

    def test_checksum_is_stable(self):
        first = get_active_config().checksum
        assert len(first) == 64
        assert get_active_config().checksum == first

    def test_trace_logged(self, captured_logs):
        config = get_active_config()

        (trace,) = [r for r in captured_logs() if r["message"] == "PAYROLL_CONFIG_TRACE"]
        assert trace["checksum"] == config.checksum
        assert trace["visit_type_table_version"] == "2024.1"
        assert trace["visit_type_count"] == 8

    def test_custom_directory(self, tmp_path):
        _write(tmp_path, "payroll.yaml", 'payroll:\n  overtime_multiplier: "2"\n')
        _write(
            tmp_path,
            "visit_types.yaml",
            'visit_types:\n  version: "test"\n  effective_from: 2024-06-01\n'
            '  rates:\n    - name: "Walk-in"\n      amount: "50"\n',
        )

        config = get_active_config(tmp_path)

        assert config.payroll.overtime_multiplier == Decimal("2")
        assert config.payroll.standard_daily_hours == Decimal("8")
        assert config.visit_types.amount_for("Walk-in") == Decimal("50")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path)


class TestLoader:

    def test_missing_payroll_section(self, tmp_path):
        path = _write(tmp_path, "payroll.yaml", "other: 1\n")
        with pytest.raises(ConfigurationError):
            load_payroll_config(path)

    def test_missing_visit_types_section(self, tmp_path):
        path = _write(tmp_path, "visit_types.yaml", "")
        with pytest.raises(ConfigurationError):
            load_visit_type_table(path)

    def test_unquoted_in_time_rejected(self, tmp_path):
        path = _write(tmp_path, "payroll.yaml", "payroll:\n  standard_in_time: 8:30\n")
        with pytest.raises(ConfigurationError):
            load_payroll_config(path)

    def test_quoted_in_time(self, tmp_path):
        path = _write(tmp_path, "payroll.yaml", 'payroll:\n  standard_in_time: "08:30"\n')
        assert load_payroll_config(path).standard_in_time == time(8, 30)

    def test_unknown_key_rejected(self, tmp_path):
        path = _write(tmp_path, "payroll.yaml", "payroll:\n  weekly_hours: 40\n")
        with pytest.raises(ConfigurationError):
            load_payroll_config(path)

    def test_missing_rates_key(self):
        with pytest.raises(ConfigurationError):
            parse_visit_type_table({"version": "x", "effective_from": "2024-01-01"})

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})


class TestVisitTypeRateTable:

    def test_duplicate_names_rejected(self):
        rate = VisitTypeRate(name="Walk-in", amount=Decimal("50"))
        with pytest.raises(ConfigurationError):
            VisitTypeRateTable(version="x", effective_from=date(2024, 1, 1), rates=(rate, rate))

    def test_negative_amount_rejected(self):
        with pytest.raises(ConfigurationError):
            VisitTypeRate(name="Walk-in", amount=Decimal("-1"))

    def test_unknown_name(self):
        table = get_active_config().visit_types
        with pytest.raises(UnknownVisitTypeError) as exc_info:
            table.amount_for("Test drive")
        assert exc_info.value.table_version == "2024.1"


class TestPayrollConfig:

    def test_defaults(self):
        config = PayrollConfig.with_defaults()

        assert config.monthly_hours == Decimal("240")
        assert config.overtime_multiplier == Decimal("1.5")
        assert [b.rate for b in config.tax_brackets] == [Decimal("0.15"), Decimal("0.10")]
        assert config.base_tax_rate == Decimal("0.05")

    def test_brackets_must_be_descending(self):
        with pytest.raises(ConfigurationError):
            PayrollConfig(
                tax_brackets=(
                    TaxBracket(threshold=Decimal("3000"), rate=Decimal("0.10")),
                    TaxBracket(threshold=Decimal("5000"), rate=Decimal("0.15")),
                )
            )

    @pytest.mark.parametrize(
        "overrides",
        [
            {"standard_daily_hours": Decimal("0")},
            {"days_per_month": Decimal("-1")},
            {"overtime_multiplier": Decimal("0.5")},
            {"base_tax_rate": Decimal("1.5")},
            {"half_day_hours": Decimal("9")},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigurationError):
            PayrollConfig(**overrides)

    def test_bracket_rate_range(self):
        with pytest.raises(ConfigurationError):
            TaxBracket(threshold=Decimal("0"), rate=Decimal("2"))
