from __future__ import annotations

import calendar
from datetime import date, datetime
from decimal import ROUND_FLOOR, Decimal
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month (month is 1..12)."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def format_clock(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def format_day_month_year(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_hours(value: Optional[Union[Decimal, float, int]]) -> Optional[str]:
    """Decimal hours -> HH:MM, minutes truncated (7.75 -> 07:45)."""
    if value is None:
        return None
    amount = Decimal(str(value))
    hours = int(amount.to_integral_value(rounding=ROUND_FLOOR))
    minutes = int(((amount - hours) * 60).to_integral_value(rounding=ROUND_FLOOR))
    return f"{hours:02d}:{minutes:02d}"
