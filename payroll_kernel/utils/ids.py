"""
Record identifier generation.

Formats:
    <PREFIX><ddmmyy><NN>        -- module records (purchase, maintenance,
                                   sale, bonus), serial restarts every day
    ADJ-<epoch milliseconds>     -- employee adjustments
    repay-<adjustment id>-<i>    -- advance installment slices
    payroll:<employee>:<start>:<end>
                                 -- uniqueness key of a payroll record
"""

from collections.abc import Iterable
from datetime import date

from payroll_kernel.domain.clock import Clock
from payroll_kernel.exceptions import InvalidRecordIdPrefixError

# PH = purchase, MT = maintenance, SL = sale, BN = bonus
RECORD_ID_PREFIXES: frozenset[str] = frozenset({"PH", "MT", "SL", "BN"})


def generate_record_id(prefix: str, existing_ids: Iterable[str], on_date: date) -> str:
    """
    Generate the next ``<PREFIX><ddmmyy><NN>`` id for ``on_date``.

    The serial is one more than the highest serial already issued for the
    same prefix and day; unparseable serials count as 0.

    Example:
        >>> generate_record_id("PH", ["PH15032401"], date(2024, 3, 15))
        'PH15032402'
    """
    if prefix not in RECORD_ID_PREFIXES:
        raise InvalidRecordIdPrefixError(prefix)

    id_prefix = f"{prefix}{on_date:%d%m%y}"
    max_serial = 0
    for existing in existing_ids:
        if not existing.startswith(id_prefix):
            continue
        serial = existing[len(id_prefix):]
        max_serial = max(max_serial, int(serial) if serial.isdigit() else 0)

    return f"{id_prefix}{max_serial + 1:02d}"


def adjustment_id(clock: Clock) -> str:
    """New adjustment id from the clock's epoch milliseconds."""
    return f"ADJ-{int(clock.now_utc().timestamp() * 1000)}"


def installment_id(parent_adjustment_id: str, number: int) -> str:
    """Id of the ``number``-th (1-based) installment slice of an advance."""
    return f"repay-{parent_adjustment_id}-{number}"


def payroll_key(employee_id: str, period_start: date, period_end: date) -> str:
    """Uniqueness key of a payroll record: one per employee per period."""
    return f"payroll:{employee_id}:{period_start.isoformat()}:{period_end.isoformat()}"
