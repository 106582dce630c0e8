"""
Configuration Schema (``payroll_config.schema``).

Frozen dataclasses for the parsed configuration artifacts.  The payroll
rules themselves are ``payroll_modules.hr.config.PayrollConfig``; this
module adds the versioned visit-type rate table and the assembled
``ActivePayrollConfig`` returned by ``get_active_config()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from payroll_kernel.exceptions import ConfigurationError, UnknownVisitTypeError
from payroll_modules.hr.config import PayrollConfig


@dataclass(frozen=True)
class VisitTypeRate:
    """Fixed commission for one kind of customer vehicle viewing."""
    name: str
    amount: Decimal

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("visit type name cannot be empty", source="visit_types")
        if self.amount < 0:
            raise ConfigurationError(
                f"visit type {self.name!r} has a negative amount", source="visit_types"
            )


@dataclass(frozen=True)
class VisitTypeRateTable:
    """A versioned, business-negotiated set of visit-type commissions."""
    version: str
    effective_from: date
    rates: tuple[VisitTypeRate, ...]

    def __post_init__(self):
        names = [r.name for r in self.rates]
        if len(set(names)) != len(names):
            raise ConfigurationError(
                f"duplicate visit type in table {self.version}", source="visit_types"
            )

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(r.name for r in self.rates)

    def amount_for(self, visit_type: str) -> Decimal:
        """Fixed amount for ``visit_type``.

        Raises:
            UnknownVisitTypeError: if the name is not in this table.
        """
        for rate in self.rates:
            if rate.name == visit_type:
                return rate.amount
        raise UnknownVisitTypeError(visit_type, self.version)


@dataclass(frozen=True)
class ActivePayrollConfig:
    """Everything the payroll core reads from configuration, plus its identity."""
    payroll: PayrollConfig
    visit_types: VisitTypeRateTable
    checksum: str
