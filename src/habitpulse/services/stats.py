"""Cross-habit statistics: progress, all-habit streaks, completion rates and series.

Everything here is a pure function of ``(habits, history, today)``. The
``StatsEngine`` wrapper only binds those inputs to a live ``HabitStore`` so a
presentation layer can pull fresh numbers after each mutation.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from ..clock import Clock
from ..models.habit import Habit
from ..models.history import HistoryLog
from .habit_store import HabitStore

DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEK_LENGTH = 7


@dataclass(frozen=True)
class TodayProgress:
    completed: int
    total: int
    percent: int


@dataclass(frozen=True)
class CompletionRate:
    completion_rate: int
    total_completed: int


@dataclass(frozen=True)
class WeekDay:
    """One bar of the trailing seven-day chart."""

    date: date
    day_label: str
    day_of_month: int
    percent: int
    completed: int
    total: int


@dataclass(frozen=True)
class HabitStat:
    id: str
    name: str
    category: str
    percent: int
    streak: int


@dataclass(frozen=True)
class StatsSummary:
    """The four headline figures of the statistics panel."""

    current_streak: int
    longest_streak: int
    completion_rate: int
    total_completed: int


@dataclass(frozen=True)
class CalendarDay:
    date: date
    is_today: bool
    has_data: bool
    percent: int
    level: str


def percent_of(part: int, whole: int) -> int:
    """Return ``round(100 * part / whole)`` rounding halves up; 0 when ``whole`` is 0."""

    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def _all_completed(habits: Sequence[Habit], history: HistoryLog, day: date) -> bool:
    return history.completed_count(day, [h.id for h in habits]) == len(habits)


def today_progress(habits: Sequence[Habit], history: HistoryLog, today: date) -> TodayProgress:
    total = len(habits)
    if total == 0:
        return TodayProgress(completed=0, total=0, percent=0)
    completed = history.completed_count(today, [h.id for h in habits])
    return TodayProgress(completed=completed, total=total, percent=percent_of(completed, total))


def current_all_streak(habits: Sequence[Habit], history: HistoryLog, today: date) -> int:
    """Consecutive days ending today on which every current habit was completed.

    A day without a history bucket ends the walk. No habits means no streak.
    """

    if not habits:
        return 0

    streak = 0
    cursor = today
    while history.has_bucket(cursor) and _all_completed(habits, history, cursor):
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_all_streak(habits: Sequence[Habit], history: HistoryLog) -> int:
    """Longest run of logged dates on which every current habit was completed.

    Only dates present in the log are scanned, in chronological order; two
    logged dates with unlogged days between them still count as adjacent.
    """

    if not habits:
        return 0

    longest = 0
    run = 0
    for day in history.dates():
        if _all_completed(habits, history, day):
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def lifetime_completion_rate(habits: Sequence[Habit], history: HistoryLog) -> CompletionRate:
    """Completed over possible slots, where a slot is a logged date a habit already existed on."""

    possible = 0
    completed = 0
    for day in history.dates():
        for habit in habits:
            if day >= habit.created_at:
                possible += 1
                if history.is_completed(day, habit.id):
                    completed += 1
    return CompletionRate(completion_rate=percent_of(completed, possible), total_completed=completed)


def week_series(habits: Sequence[Habit], history: HistoryLog, today: date) -> list[WeekDay]:
    """Seven entries from six days ago through today.

    ``total`` only counts habits that existed on that day.
    """

    series: list[WeekDay] = []
    for offset in range(WEEK_LENGTH - 1, -1, -1):
        day = today - timedelta(days=offset)
        active = [h.id for h in habits if h.created_at <= day]
        completed = history.completed_count(day, active)
        total = len(active)
        series.append(
            WeekDay(
                date=day,
                day_label=DAY_LABELS[day.weekday()],
                day_of_month=day.day,
                percent=percent_of(completed, total),
                completed=completed,
                total=total,
            )
        )
    return series


def per_habit_stats(habits: Sequence[Habit], history: HistoryLog) -> list[HabitStat]:
    """Completion percentage per habit over the logged dates since it was created."""

    logged = history.dates()
    stats: list[HabitStat] = []
    for habit in habits:
        tracked = [day for day in logged if day >= habit.created_at]
        completed = sum(1 for day in tracked if history.is_completed(day, habit.id))
        stats.append(
            HabitStat(
                id=habit.id,
                name=habit.name,
                category=habit.category,
                percent=percent_of(completed, len(tracked)),
                streak=habit.streak,
            )
        )
    return stats


def summary(habits: Sequence[Habit], history: HistoryLog, today: date) -> StatsSummary:
    if not habits:
        return StatsSummary(current_streak=0, longest_streak=0, completion_rate=0, total_completed=0)
    rate = lifetime_completion_rate(habits, history)
    return StatsSummary(
        current_streak=current_all_streak(habits, history, today),
        longest_streak=longest_all_streak(habits, history),
        completion_rate=rate.completion_rate,
        total_completed=rate.total_completed,
    )


def completion_level(completed: int, total: int) -> str:
    """Bucket a day's completion into ``high`` (>=80%), ``medium`` (>=50%), ``low`` or ``none``."""

    if total <= 0 or completed <= 0:
        return "none"
    if completed * 100 >= 80 * total:
        return "high"
    if completed * 100 >= 50 * total:
        return "medium"
    return "low"


def calendar_month(
    habits: Sequence[Habit],
    history: HistoryLog,
    today: date,
    year: int,
    month: int,
) -> list[CalendarDay]:
    """Per-day completion for every day of ``year``/``month``.

    Completion is measured against the current habit count, as the month
    calendar does not track when each habit was created.
    """

    _, days_in_month = monthrange(year, month)
    ids = [h.id for h in habits]
    total = len(ids)
    days: list[CalendarDay] = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        has_data = history.has_bucket(day) and total > 0
        completed = history.completed_count(day, ids) if has_data else 0
        days.append(
            CalendarDay(
                date=day,
                is_today=day == today,
                has_data=has_data,
                percent=percent_of(completed, total) if has_data else 0,
                level=completion_level(completed, total) if has_data else "none",
            )
        )
    return days


class StatsEngine:
    """Statistics bound to a live habit store."""

    def __init__(self, store: HabitStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock: Clock = clock or store.clock

    def _today(self) -> date:
        return self.clock.today()

    def today_progress(self) -> TodayProgress:
        return today_progress(self.store.habits, self.store.history, self._today())

    def current_all_streak(self) -> int:
        return current_all_streak(self.store.habits, self.store.history, self._today())

    def longest_all_streak(self) -> int:
        return longest_all_streak(self.store.habits, self.store.history)

    def lifetime_completion_rate(self) -> CompletionRate:
        return lifetime_completion_rate(self.store.habits, self.store.history)

    def week_series(self) -> list[WeekDay]:
        return week_series(self.store.habits, self.store.history, self._today())

    def per_habit_stats(self) -> list[HabitStat]:
        return per_habit_stats(self.store.habits, self.store.history)

    def summary(self) -> StatsSummary:
        return summary(self.store.habits, self.store.history, self._today())

    def calendar_month(self, year: Optional[int] = None, month: Optional[int] = None) -> list[CalendarDay]:
        today = self._today()
        return calendar_month(
            self.store.habits,
            self.store.history,
            today,
            year if year is not None else today.year,
            month if month is not None else today.month,
        )


__all__ = [
    "CalendarDay",
    "CompletionRate",
    "HabitStat",
    "StatsEngine",
    "StatsSummary",
    "TodayProgress",
    "WeekDay",
    "calendar_month",
    "completion_level",
    "current_all_streak",
    "lifetime_completion_rate",
    "longest_all_streak",
    "per_habit_stats",
    "percent_of",
    "summary",
    "today_progress",
    "week_series",
]
