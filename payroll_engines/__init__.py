"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure payroll
    calculation engines.  This is the canonical import surface for the
    services in ``payroll_modules``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import payroll_kernel and the DTO/config modules of payroll_modules
    (``*.models``, ``hr.config``).  MUST NOT import services, selectors or ORM.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      "Today" only enters through an injected ``Clock``.
    - Decimal-only arithmetic: money and hours are ``Decimal``; never float.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from payroll_engines import resolve_period, compute_payroll, reconcile
"""

from payroll_engines.attendance import (
    AttendanceHours,
    AttendanceSummary,
    compute_record_hours,
    derive_status,
    enrich_attendance_record,
    summarize_attendance,
)
from payroll_engines.finance_summary import FinanceSummary, summarize_period_finances
from payroll_engines.payroll import (
    compute_payroll,
    compute_payroll_for_period,
    compute_tax,
    hourly_rate_for,
    payroll_fingerprint,
    tax_rate_for,
)
from payroll_engines.period import (
    PayrollPeriod,
    current_period,
    iter_periods,
    period_bounds,
    period_for_month,
    resolve_period,
)
from payroll_engines.reconciliation import (
    AdjustmentAggregate,
    AdjustmentBalance,
    AdjustmentEntry,
    ReconciliationReport,
    aggregate_totals,
    expand_installments,
    expand_recipients,
    installment_slices,
    reconcile,
    reconcile_period,
)

__all__ = [
    # period
    "PayrollPeriod",
    "current_period",
    "iter_periods",
    "period_bounds",
    "period_for_month",
    "resolve_period",
    # attendance
    "AttendanceHours",
    "AttendanceSummary",
    "compute_record_hours",
    "derive_status",
    "enrich_attendance_record",
    "summarize_attendance",
    # payroll
    "compute_payroll",
    "compute_payroll_for_period",
    "compute_tax",
    "hourly_rate_for",
    "payroll_fingerprint",
    "tax_rate_for",
    # reconciliation
    "AdjustmentAggregate",
    "AdjustmentBalance",
    "AdjustmentEntry",
    "ReconciliationReport",
    "aggregate_totals",
    "expand_installments",
    "expand_recipients",
    "installment_slices",
    "reconcile",
    "reconcile_period",
    # finance summary
    "FinanceSummary",
    "summarize_period_finances",
]
