"""
Lightweight domain validation helpers.

Pure checks with no I/O, used at the I/O boundary where raw form or sheet
values (strings) become typed values.
"""

from __future__ import annotations

import re
from datetime import date, time
from decimal import Decimal, InvalidOperation
from typing import Any

from payroll_kernel.exceptions import (
    InvalidDateFormatError,
    InvalidTimeFormatError,
    NegativeAmountError,
)

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_time(value: str | time | None) -> time | None:
    """Parse ``HH:MM`` or ``HH:MM:SS``; empty values map to ``None``."""
    if value is None or isinstance(value, time):
        return value
    value = value.strip()
    if not value:
        return None
    match = _TIME_RE.match(value)
    if match is None:
        raise InvalidTimeFormatError(value)
    hour, minute, second = (int(g) if g else 0 for g in match.groups())
    try:
        return time(hour, minute, second)
    except ValueError as e:
        raise InvalidTimeFormatError(value) from e


def parse_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` date string."""
    if isinstance(value, date):
        return value
    if not _DATE_RE.match(value):
        raise InvalidDateFormatError(value)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateFormatError(value) from e


def to_decimal(value: Any, name: str = "amount") -> Decimal:
    """Convert int/str/Decimal to ``Decimal``. Floats go through ``str``."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"{name} is not a valid amount: {value!r}") from e


def require_non_negative(value: Decimal, name: str = "amount") -> Decimal:
    """Return ``value`` unchanged, or raise ``NegativeAmountError``."""
    if value < 0:
        raise NegativeAmountError(name, str(value))
    return value
