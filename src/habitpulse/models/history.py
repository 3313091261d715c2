"""Date-indexed completion log."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterator, Mapping, Optional


class HistoryLog:
    """Completion state per calendar day and habit id.

    A missing day or missing id means nothing was recorded, which is kept
    distinct from an explicit ``False`` written by toggling a habit off.
    False entries are never pruned, and empty day buckets survive habit
    deletion.
    """

    def __init__(self, buckets: Optional[Mapping[date, Mapping[str, bool]]] = None):
        self._buckets: dict[date, dict[str, bool]] = {}
        for day, entries in (buckets or {}).items():
            self._buckets[day] = {str(hid): bool(done) for hid, done in entries.items()}

    def __contains__(self, day: object) -> bool:
        return day in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def __iter__(self) -> Iterator[date]:
        return iter(self.dates())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoryLog):
            return NotImplemented
        return self._buckets == other._buckets

    def __repr__(self) -> str:
        return f"HistoryLog({self.to_dict()!r})"

    def entry(self, day: date, habit_id: str) -> Optional[bool]:
        """Three-state read: True, False, or None when nothing is recorded."""

        bucket = self._buckets.get(day)
        if bucket is None:
            return None
        return bucket.get(habit_id)

    def is_completed(self, day: date, habit_id: str) -> bool:
        return self.entry(day, habit_id) is True

    def has_bucket(self, day: date) -> bool:
        return day in self._buckets

    def bucket(self, day: date) -> Optional[dict[str, bool]]:
        """Return a copy of the entries recorded for ``day``, or None."""

        entries = self._buckets.get(day)
        return dict(entries) if entries is not None else None

    def dates(self) -> list[date]:
        """Logged days in chronological order."""

        return sorted(self._buckets)

    def set_entry(self, day: date, habit_id: str, completed: bool) -> None:
        self._buckets.setdefault(day, {})[habit_id] = bool(completed)

    def toggle(self, day: date, habit_id: str) -> bool:
        """Flip the entry for ``habit_id`` on ``day`` and return the new state."""

        new_state = not self.is_completed(day, habit_id)
        self.set_entry(day, habit_id, new_state)
        return new_state

    def remove_habit(self, habit_id: str) -> int:
        """Drop ``habit_id`` from every bucket and return how many entries went."""

        removed = 0
        for entries in self._buckets.values():
            if entries.pop(habit_id, None) is not None:
                removed += 1
        return removed

    def completed_count(self, day: date, habit_ids: list[str]) -> int:
        bucket = self._buckets.get(day) or {}
        return sum(1 for hid in habit_ids if bucket.get(hid) is True)

    def to_dict(self) -> dict[str, dict[str, bool]]:
        """Serialize with ISO ``YYYY-MM-DD`` keys in chronological order."""

        return {day.isoformat(): dict(self._buckets[day]) for day in self.dates()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryLog":
        """Rebuild a log from its persisted form.

        Raises:
            ValueError: a key is not a canonical ``YYYY-MM-DD`` date or a bucket
                is not a mapping
        """

        buckets: dict[date, dict[str, bool]] = {}
        for key, entries in data.items():
            if not isinstance(entries, Mapping):
                raise ValueError(f"History bucket for {key!r} is not a mapping")
            day = date.fromisoformat(key)
            if day.isoformat() != key:
                raise ValueError(f"History key {key!r} is not a YYYY-MM-DD date")
            buckets[day] = {str(hid): bool(done) for hid, done in entries.items()}
        return cls(buckets)


__all__ = ["HistoryLog"]
