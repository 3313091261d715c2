"""Filtered, grouped and counted views over the habit collection."""

from __future__ import annotations

from ..constants import ALL_CATEGORIES, CATEGORY_ORDER
from ..models.habit import Habit
from .habit_store import HabitStore


class QueryView:
    """Read-only projections used by listings and filter tabs."""

    def __init__(self, store: HabitStore):
        self.store = store

    def filtered(self, category: str = ALL_CATEGORIES) -> list[Habit]:
        """Habits in ``category`` (or every habit for ``"all"``), insertion order kept."""

        habits = self.store.habits
        if category == ALL_CATEGORIES:
            return habits
        return [h for h in habits if h.category == category]

    def grouped(self) -> dict[str, list[Habit]]:
        """Habits grouped by category in display order; empty groups are omitted."""

        groups: dict[str, list[Habit]] = {}
        for category in CATEGORY_ORDER:
            members = self.filtered(category)
            if members:
                groups[category] = members
        return groups

    def category_counts(self) -> dict[str, int]:
        habits = self.store.habits
        counts = {ALL_CATEGORIES: len(habits)}
        for category in CATEGORY_ORDER:
            counts[category] = sum(1 for h in habits if h.category == category)
        return counts


__all__ = ["QueryView"]
