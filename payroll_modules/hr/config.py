"""
Payroll Configuration Schema.

Defines the structure and defaults of the payroll rules.  The defaults are
the dealership's fixed business rule (8-hour day, 30-day month, 1.5x
overtime, 5/10/15% stepped tax); overriding them is an explicit, loaded
configuration change, never a per-call tweak.
"""

from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal
from typing import Any, Self

from payroll_kernel.domain.validation import parse_time, to_decimal
from payroll_kernel.exceptions import ConfigurationError
from payroll_kernel.logging_config import get_logger

logger = get_logger("modules.hr.config")


@dataclass(frozen=True)
class TaxBracket:
    """Flat tax rate that applies when gross pay is strictly above ``threshold``."""
    threshold: Decimal
    rate: Decimal

    def __post_init__(self):
        if self.threshold < 0:
            raise ConfigurationError("tax bracket threshold cannot be negative")
        if not Decimal("0") <= self.rate <= Decimal("1"):
            raise ConfigurationError(f"tax bracket rate must be within 0..1, got {self.rate}")


def _default_tax_brackets() -> tuple[TaxBracket, ...]:
    return (
        TaxBracket(threshold=Decimal("5000"), rate=Decimal("0.15")),
        TaxBracket(threshold=Decimal("3000"), rate=Decimal("0.10")),
    )


@dataclass(frozen=True)
class PayrollConfig:
    """
    Configuration schema for payroll calculation.

        config = PayrollConfig.with_defaults()
        config = PayrollConfig.from_dict(load_yaml_file(path)["payroll"])
    """

    # Hours and rate derivation: hourly = salary / (days_per_month * standard_daily_hours)
    standard_daily_hours: Decimal = Decimal("8")
    days_per_month: Decimal = Decimal("30")

    # Overtime premium
    overtime_multiplier: Decimal = Decimal("1.5")

    # Stepped flat tax: first bracket whose threshold gross exceeds wins,
    # otherwise base_tax_rate.  Ordered by threshold, highest first.
    tax_brackets: tuple[TaxBracket, ...] = field(default_factory=_default_tax_brackets)
    base_tax_rate: Decimal = Decimal("0.05")

    # Rounding
    money_decimal_places: int = 2

    # Attendance: check-in after this time marks the day Late
    standard_in_time: time | None = time(9, 0)

    # Status thresholds (net hours)
    half_day_hours: Decimal = Decimal("4")

    def __post_init__(self):
        if self.standard_daily_hours <= 0:
            raise ConfigurationError("standard_daily_hours must be positive")
        if self.days_per_month <= 0:
            raise ConfigurationError("days_per_month must be positive")
        if self.overtime_multiplier < 1:
            raise ConfigurationError("overtime_multiplier cannot be below 1")
        if not Decimal("0") <= self.base_tax_rate <= Decimal("1"):
            raise ConfigurationError("base_tax_rate must be within 0..1")
        if self.money_decimal_places < 0:
            raise ConfigurationError("money_decimal_places cannot be negative")
        if not Decimal("0") < self.half_day_hours <= self.standard_daily_hours:
            raise ConfigurationError("half_day_hours must be within (0, standard_daily_hours]")

        thresholds = [b.threshold for b in self.tax_brackets]
        if thresholds != sorted(thresholds, reverse=True):
            raise ConfigurationError("tax_brackets must be sorted by threshold descending")

        logger.debug(
            "payroll_config_initialized",
            extra={
                "standard_daily_hours": str(self.standard_daily_hours),
                "days_per_month": str(self.days_per_month),
                "overtime_multiplier": str(self.overtime_multiplier),
                "tax_brackets_count": len(self.tax_brackets),
            },
        )

    @property
    def monthly_hours(self) -> Decimal:
        """Hours in the notional month used to derive the hourly rate."""
        return self.days_per_month * self.standard_daily_hours

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the dealership's standard rules."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from a dictionary (e.g. loaded from YAML)."""
        logger.info(
            "payroll_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        data = dict(data)
        for key in (
            "standard_daily_hours",
            "days_per_month",
            "overtime_multiplier",
            "base_tax_rate",
            "half_day_hours",
        ):
            if key in data:
                data[key] = to_decimal(data[key], key)
        if "tax_brackets" in data:
            data["tax_brackets"] = tuple(
                TaxBracket(
                    threshold=to_decimal(b["threshold"], "threshold"),
                    rate=to_decimal(b["rate"], "rate"),
                )
                if isinstance(b, dict) else b
                for b in data["tax_brackets"]
            )
        if "standard_in_time" in data:
            raw = data["standard_in_time"]
            if not isinstance(raw, (str, time, type(None))):
                # Unquoted 9:00 is a base-60 integer in YAML 1.1
                raise ConfigurationError(
                    f"standard_in_time must be a quoted HH:MM string, got {raw!r}",
                    source="payroll",
                )
            data["standard_in_time"] = parse_time(raw)
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(str(e), source="payroll") from e
