"""Utility functions."""
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]


def to_iso_date(value: DateLike) -> str:
    """Normalise a date, datetime or date string to YYYY-MM-DD."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    # Spreadsheet cells sometimes carry a time part ("2025-11-02 00:00:00")
    return datetime.fromisoformat(text).date().isoformat()


def format_booking_date(value: DateLike) -> str:
    """Format a date the way the site displays it ('2025-11-02' -> 'Sun, Nov 2')."""
    parsed = date.fromisoformat(to_iso_date(value))
    return f"{parsed:%a}, {parsed:%b} {parsed.day}"


def date_text_matches(displayed: str, expected: DateLike) -> bool:
    """Case-insensitive check that a displayed date label contains the expected date."""
    return format_booking_date(expected).lower() in (displayed or "").lower()


def stay_dates(today: date, stay_days: int) -> tuple[str, str]:
    """Check-in/check-out ISO dates for a stay starting today."""
    return today.isoformat(), (today + timedelta(days=stay_days)).isoformat()
