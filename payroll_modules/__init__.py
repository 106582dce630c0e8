"""
Payroll Modules.

Thin orchestration layers over the payroll kernel and engines.
Each module contains:
- Domain models (the nouns)
- Workflows (state machines)
- Configuration schemas (policy and settings)
- ORM, selectors and a service facade

Modules:
- HR: Employees, daily attendance, per-period payroll records
- Adjustments: Bonuses, additions, commissions, advances, deductions,
  employee expenses, visit-type commissions

Actual calculation logic lives in ``payroll_engines``.
"""

from payroll_modules import adjustments, hr

__all__ = ["adjustments", "hr"]
