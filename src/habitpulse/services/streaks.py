"""Per-habit streak calculation."""

from __future__ import annotations

from datetime import date, timedelta

from ..models.history import HistoryLog


def compute_streak(history: HistoryLog, habit_id: str, today: date) -> int:
    """Return the number of consecutive completed days ending today.

    Walks backwards from ``today`` and stops at the first day whose entry is
    False or missing, so an unfinished today always yields 0.
    """

    streak = 0
    cursor = today
    while history.is_completed(cursor, habit_id):
        streak += 1
        cursor -= timedelta(days=1)
    return streak


__all__ = ["compute_streak"]
