"""
Display Formatting

US-style dates and compact hour values used in notification text
and CSV exports.
"""
from datetime import date, datetime


def format_us_date(day: date) -> str:
    """1/5/2024 style, no zero padding."""
    return f"{day.month}/{day.day}/{day.year}"


def format_us_datetime(moment: datetime) -> str:
    """1/5/2024, 3:07:09 PM style."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{format_us_date(moment)}, {hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"


def format_hours(hours: float) -> str:
    """8.0 -> '8', 7.5 -> '7.5'"""
    return f"{hours:g}"
