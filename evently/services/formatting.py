"""Display formatting for event cards."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

# en-US names, independent of the process locale
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {meridiem}"


def _day(dt: datetime) -> str:
    return f"{_WEEKDAYS[dt.weekday()]}, {_MONTHS[dt.month - 1]} {dt.day}"


def format_date_time(dt: datetime) -> dict[str, str]:
    """Render *dt* the way event cards show it (en-US, 12-hour clock)."""
    return {
        "date_time": f"{_day(dt)}, {_clock(dt)}",
        "date_only": f"{_day(dt)}, {dt.year}",
        "time_only": _clock(dt),
    }


def format_price(price: str) -> str:
    try:
        amount = Decimal(price or "0")
    except InvalidOperation:
        amount = Decimal(0)
    return f"${amount:,.2f}"
