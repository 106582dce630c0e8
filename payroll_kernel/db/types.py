"""
Module: payroll_kernel.db.types
Responsibility: Annotated column type aliases and the single sanctioned
    rounding function for money.

Invariants enforced:
    - round_money() is the ONLY rounding function for monetary values.  It
      rounds half-up ("standard rounding") to 2 places by default.
    - No floats anywhere.  All amounts and hours use Decimal.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String

# Monetary amount: 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

# Hours: 2 decimal places are displayed, 9 are stored
Hours = Annotated[Decimal, Numeric(38, 9)]

# Employee identifier (e.g. "EMP001")
EmployeeRef = Annotated[str, String(50)]

# Short identifier strings
ShortCode = Annotated[str, String(50)]

# Long text for remarks and notes
LongText = Annotated[str, String(4000)]


MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the given number of decimal places.

    This is the ONLY sanctioned rounding function for money.  Callers round
    once, at the end of each derived figure.

    Args:
        value: The Decimal value to round.
        decimal_places: Number of decimal places to round to.
        rounding: Rounding mode (default: ROUND_HALF_UP).

    Returns:
        Rounded Decimal value.
    """
    quantum = Decimal(1).scaleb(-decimal_places)
    return value.quantize(quantum, rounding=rounding)


def round_hours(value: Decimal) -> Decimal:
    """Round hours for storage/display (2 places, half-up)."""
    return round_money(value, 2)
