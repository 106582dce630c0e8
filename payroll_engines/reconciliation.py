"""
Adjustment Reconciler -- nets typed adjustments per employee per pay period.

Responsibility:
    Expand adjustments into per-employee, per-period entries and sum them
    into a credit/debit balance for each employee.  Financial statements use
    the aggregate view (amount x recipients) of the same adjustments.

Architecture position:
    Engines -- pure calculation, zero I/O.

Invariants enforced:
    - A multi-recipient adjustment gives EVERY recipient the full per-employee
      amount; it is never divided.  ``total_amount = amount x recipients``.
    - ``AdjustmentBalance.net == credits - debits``.
    - An Advance with N installments originating in period P (the resolved
      period of its date) contributes one debit slice in each of P..P+N-1
      and nothing afterwards.  Slices are amount / N rounded half-up to the
      cent; the last slice absorbs the remainder, so slices sum exactly to
      the advance.

Failure modes:
    - Bad amounts, recipients or installment counts are rejected when the
      ``Adjustment`` is constructed, before it reaches this engine.

Usage:
    from payroll_engines.reconciliation import reconcile

    balances = reconcile(adjustments, PayrollPeriod(year=2024, month=4))
    balances["EMP001"].net
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal

from payroll_engines.period import PayrollPeriod, resolve_period
from payroll_engines.tracer import traced_engine
from payroll_kernel.db.types import ZERO, round_money
from payroll_kernel.logging_config import get_logger
from payroll_kernel.utils.ids import installment_id
from payroll_modules.adjustments.models import Adjustment, AdjustmentType

logger = get_logger("engines.reconciliation")


@dataclass(frozen=True)
class AdjustmentEntry:
    """One employee's share of an adjustment in one pay period."""
    entry_id: str
    adjustment_id: str
    employee_id: str
    type: AdjustmentType
    amount: Decimal
    period: PayrollPeriod
    remarks: str = ""

    @property
    def is_credit(self) -> bool:
        return self.type.is_credit


@dataclass(frozen=True)
class AdjustmentBalance:
    """Credits, debits and their net for one employee in one period."""
    employee_id: str
    credits: Decimal
    debits: Decimal
    net: Decimal
    entries: tuple[AdjustmentEntry, ...] = field(default=(), compare=False)

    @classmethod
    def empty(cls, employee_id: str) -> AdjustmentBalance:
        return cls(employee_id=employee_id, credits=ZERO, debits=ZERO, net=ZERO)


@dataclass(frozen=True)
class AdjustmentAggregate:
    """Audit view of one adjustment: per-employee amount and the total."""
    adjustment_id: str
    type: AdjustmentType
    per_employee_amount: Decimal
    recipient_count: int
    total_amount: Decimal


@dataclass(frozen=True)
class ReconciliationReport:
    """Per-employee balances and per-adjustment aggregates for a period."""
    period: PayrollPeriod
    balances: Mapping[str, AdjustmentBalance]
    aggregates: tuple[AdjustmentAggregate, ...]

    @property
    def total_credits(self) -> Decimal:
        return sum((b.credits for b in self.balances.values()), ZERO)

    @property
    def total_debits(self) -> Decimal:
        return sum((b.debits for b in self.balances.values()), ZERO)


def expand_recipients(adjustment: Adjustment) -> list[AdjustmentEntry]:
    """One entry per recipient, at the full amount, in the originating period."""
    period = resolve_period(adjustment.adjustment_date)
    return [
        AdjustmentEntry(
            entry_id=adjustment.id,
            adjustment_id=adjustment.id,
            employee_id=employee_id,
            type=adjustment.type,
            amount=adjustment.amount,
            period=period,
            remarks=adjustment.remarks,
        )
        for employee_id in adjustment.employee_ids
    ]


def installment_slices(amount: Decimal, count: int) -> list[Decimal]:
    """Split ``amount`` into ``count`` cent-rounded slices that sum to it exactly."""
    amount = round_money(amount)
    if count == 1:
        return [amount]
    base = round_money(amount / count)
    if base * (count - 1) > amount:
        base = round_money(amount / count, rounding=ROUND_DOWN)
    return [base] * (count - 1) + [amount - base * (count - 1)]


def expand_installments(adjustment: Adjustment) -> list[AdjustmentEntry]:
    """
    Spread an Advance over its installment periods.

    Every recipient gets one slice per period P..P+N-1.  An adjustment
    without installments expands to its recipients in P only.
    """
    if adjustment.installments is None:
        return expand_recipients(adjustment)

    origin = resolve_period(adjustment.adjustment_date)
    count = adjustment.installments
    entries: list[AdjustmentEntry] = []
    for number, slice_amount in enumerate(installment_slices(adjustment.amount, count), start=1):
        period = origin.shift(number - 1)
        for employee_id in adjustment.employee_ids:
            entries.append(
                AdjustmentEntry(
                    entry_id=installment_id(adjustment.id, number),
                    adjustment_id=adjustment.id,
                    employee_id=employee_id,
                    type=adjustment.type,
                    amount=slice_amount,
                    period=period,
                    remarks=f"Advance Installment {number}/{count}",
                )
            )
    return entries


def entries_for_period(
    adjustments: Iterable[Adjustment],
    period: PayrollPeriod,
) -> list[AdjustmentEntry]:
    """All entries of ``adjustments`` that land in ``period``."""
    return [
        entry
        for adjustment in adjustments
        for entry in expand_installments(adjustment)
        if entry.period == period
    ]


@traced_engine("reconciliation", "1.0", fingerprint_fields=("adjustments", "period"))
def reconcile(
    adjustments: Iterable[Adjustment],
    period: PayrollPeriod,
) -> dict[str, AdjustmentBalance]:
    """
    Net the adjustments that land in ``period`` per employee.

    Employees with no entry in the period are absent from the result; use
    ``AdjustmentBalance.empty`` for them.
    """
    by_employee: dict[str, list[AdjustmentEntry]] = {}
    for entry in entries_for_period(list(adjustments), period):
        by_employee.setdefault(entry.employee_id, []).append(entry)

    balances: dict[str, AdjustmentBalance] = {}
    for employee_id, entries in by_employee.items():
        credits = sum((e.amount for e in entries if e.is_credit), ZERO)
        debits = sum((e.amount for e in entries if not e.is_credit), ZERO)
        balances[employee_id] = AdjustmentBalance(
            employee_id=employee_id,
            credits=credits,
            debits=debits,
            net=credits - debits,
            entries=tuple(entries),
        )

    logger.info(
        "adjustments_reconciled",
        extra={
            "period": period.code,
            "employee_count": len(balances),
            "entry_count": sum(len(b.entries) for b in balances.values()),
        },
    )
    return balances


def aggregate_totals(
    adjustments: Iterable[Adjustment],
    period: PayrollPeriod | None = None,
) -> list[AdjustmentAggregate]:
    """
    Aggregate view of each adjustment (optionally only those dated in ``period``).

    An installment Advance is reported once, at its full amount, in the
    period it originated in.
    """
    return [
        AdjustmentAggregate(
            adjustment_id=a.id,
            type=a.type,
            per_employee_amount=a.amount,
            recipient_count=a.recipient_count,
            total_amount=a.total_amount,
        )
        for a in adjustments
        if period is None or resolve_period(a.adjustment_date) == period
    ]


def reconcile_period(
    adjustments: Iterable[Adjustment],
    period: PayrollPeriod,
) -> ReconciliationReport:
    """Balances and aggregates for ``period`` in one report."""
    adjustments = list(adjustments)
    return ReconciliationReport(
        period=period,
        balances=reconcile(adjustments, period),
        aggregates=tuple(aggregate_totals(adjustments, period)),
    )
