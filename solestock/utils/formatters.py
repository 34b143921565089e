"""
Presentation formatting for amounts and dates.

Computation keeps full Decimal precision; rounding to two places happens
only here, when a value is rendered for a client.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from datetime import date, datetime
from typing import Union

Number = Union[int, float, Decimal, str, None]


def money(value: Number) -> str:
    """
    Format an amount with thousands separators and exactly 2 decimals.

    Examples:
        money(1500) -> "1,500.00"
        money(Decimal('1234.565')) -> "1,234.57"
        money(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    return f"{num:,.2f}"


def iso_date(value: Union[date, datetime, None]) -> str:
    """Format a date as YYYY-MM-DD, or None when missing."""
    if value is None:
        return None

    if isinstance(value, datetime):
        value = value.date()

    return value.isoformat()
