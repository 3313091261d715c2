"""Habit store: owns the habit collection and history log and persists every change."""

from __future__ import annotations

import uuid
from typing import Any, Optional

from ..clock import Clock, SystemClock
from ..constants import HABIT_CATEGORIES, HABITS_KEY, HISTORY_KEY, is_valid_category
from ..domain.repositories.storage import KeyValueStore
from ..errors import NotFoundError, StorageError, ValidationError
from ..logging_config import get_logger
from ..models.habit import Habit
from ..models.history import HistoryLog
from .streaks import compute_streak

logger = get_logger("services.habit_store")


class HabitStore:
    """Single owner of the habits and the completion history.

    Each mutator changes the in-memory collections and then saves both of them
    in one ``save_many`` call before returning. When the save fails the
    ``StorageError`` propagates and the in-memory change is kept.
    """

    def __init__(self, kv_store: KeyValueStore, clock: Optional[Clock] = None):
        self.kv_store = kv_store
        self.clock: Clock = clock or SystemClock()
        self._habits: list[Habit] = []
        self._history = HistoryLog()

    # Loading / persistence
    def load(self) -> "HabitStore":
        """Replace in-memory state with whatever the key/value store holds."""

        raw_habits = self.kv_store.load(HABITS_KEY) or []
        raw_history = self.kv_store.load(HISTORY_KEY) or {}
        try:
            habits = [Habit.from_dict(item) for item in raw_habits]
            history = HistoryLog.from_dict(raw_history)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise StorageError("load", f"persisted habit data is malformed: {exc}") from exc

        self._habits = habits
        self._history = history
        logger.info(
            "Loaded habit store",
            extra={"habits": len(habits), "logged_days": len(history)},
        )
        return self

    def _persist(self) -> None:
        try:
            self.kv_store.save_many(
                {
                    HABITS_KEY: [habit.to_dict() for habit in self._habits],
                    HISTORY_KEY: self._history.to_dict(),
                }
            )
        except StorageError:
            logger.error("Failed to persist habit store", exc_info=True)
            raise

    # Reads
    @property
    def habits(self) -> list[Habit]:
        """Habits in insertion order (a new list; the records are live)."""

        return list(self._habits)

    @property
    def history(self) -> HistoryLog:
        return self._history

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        return None

    def _require(self, habit_id: str) -> Habit:
        habit = self.get_habit(habit_id)
        if habit is None:
            raise NotFoundError(habit_id)
        return habit

    def is_completed_today(self, habit_id: str) -> bool:
        """Return today's completion state for ``habit_id``."""

        self._require(habit_id)
        return self._history.is_completed(self.clock.today(), habit_id)

    # Mutations
    def add_habit(self, name: str, category: str) -> Habit:
        """Create a habit dated today with a zero streak.

        Raises:
            ValidationError: empty name or unknown category
            StorageError: the habit was added in memory but could not be saved
        """

        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name", "must not be empty")
        if not is_valid_category(category):
            raise ValidationError(
                "category", f"must be one of {', '.join(HABIT_CATEGORIES)}; got {category!r}"
            )

        habit = Habit(
            id=self._new_id(),
            name=name.strip(),
            category=category,
            created_at=self.clock.today(),
            streak=0,
        )
        self._habits.append(habit)
        logger.info(
            "Habit created",
            extra={"habit_id": habit.id, "category": habit.category},
        )
        self._persist()
        return habit

    def _new_id(self) -> str:
        existing = {habit.id for habit in self._habits}
        while True:
            candidate = uuid.uuid4().hex
            if candidate not in existing:
                return candidate

    def delete_habit(self, habit_id: str) -> None:
        """Remove a habit and every history entry that references it.

        Unknown ids are ignored.
        """

        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug("Delete ignored for unknown habit", extra={"habit_id": habit_id})
            return

        self._habits = [h for h in self._habits if h.id != habit_id]
        removed = self._history.remove_habit(habit_id)
        logger.info(
            "Habit deleted",
            extra={"habit_id": habit_id, "history_entries_removed": removed},
        )
        self._persist()

    def toggle_habit(self, habit_id: str) -> bool:
        """Flip today's completion for ``habit_id`` and return the new state.

        Raises:
            NotFoundError: ``habit_id`` is not a known habit
            StorageError: the toggle was applied in memory but could not be saved
        """

        habit = self._require(habit_id)
        today = self.clock.today()
        completed = self._history.toggle(today, habit_id)
        habit.streak = compute_streak(self._history, habit_id, today)
        logger.info(
            "Habit toggled",
            extra={"habit_id": habit_id, "completed": completed, "streak": habit.streak},
        )
        self._persist()
        return completed

    def refresh_streaks(self) -> bool:
        """Recompute every cached streak against today; persist if any changed.

        Returns True when at least one streak was updated.
        """

        today = self.clock.today()
        changed = False
        for habit in self._habits:
            streak = compute_streak(self._history, habit.id, today)
            if streak != habit.streak:
                habit.streak = streak
                changed = True
        if changed:
            logger.info("Refreshed stale streaks", extra={"day": today.isoformat()})
            self._persist()
        return changed

    # Export
    def export_snapshot(self) -> dict[str, Any]:
        """Return the full JSON-serializable state plus an export timestamp."""

        return {
            "habits": [habit.to_dict() for habit in self._habits],
            "history": self._history.to_dict(),
            "exportedAt": self.clock.now().isoformat(),
        }


__all__ = ["HabitStore"]
