"""
Visit-type commissions.

A commission recorded against a visit type is always worth the table's
fixed amount; whatever amount was typed in by hand is overwritten.  Older
adjustments carry the visit type only inside their remarks text, so
``match_visit_type`` recovers it from there.
"""

from __future__ import annotations

from dataclasses import replace

from payroll_config.schema import VisitTypeRateTable
from payroll_kernel.logging_config import get_logger
from payroll_modules.adjustments.models import Adjustment

logger = get_logger("modules.adjustments.visit_types")


def apply_visit_type(adjustment: Adjustment, table: VisitTypeRateTable) -> Adjustment:
    """Return ``adjustment`` with its amount set from ``table``.

    Adjustments without a visit type are returned unchanged.

    Raises:
        UnknownVisitTypeError: the visit type is not in ``table``.
    """
    if not adjustment.visit_type:
        return adjustment
    amount = table.amount_for(adjustment.visit_type)
    if amount != adjustment.amount:
        logger.info(
            "visit_type_amount_applied",
            extra={
                "adjustment_id": adjustment.id,
                "visit_type": adjustment.visit_type,
                "entered_amount": adjustment.amount,
                "table_amount": amount,
                "table_version": table.version,
            },
        )
    return replace(adjustment, amount=amount)


def match_visit_type(remarks: str, table: VisitTypeRateTable) -> str | None:
    """The visit type named inside ``remarks``, or None."""
    if not remarks:
        return None
    # Longest first so no name can shadow a longer one containing it
    for name in sorted(table.names, key=len, reverse=True):
        if name in remarks:
            return name
    return None
