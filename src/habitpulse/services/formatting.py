"""Small text helpers shared by listings."""

from __future__ import annotations

from datetime import date

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_short_date(day: date) -> str:
    """Return ``"Jan 5"`` style text without depending on the process locale."""

    return f"{MONTH_ABBR[day.month - 1]} {day.day}"


def format_streak(streak: int) -> str:
    return f"{streak} day{'' if streak == 1 else 's'}"


__all__ = ["format_short_date", "format_streak"]
