"""Habit tracking data structures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass
class Habit:
    """A user-defined habit the app tracks daily.

    ``streak`` is a cache of the current completion streak; the history log is
    the source of truth and the store recomputes it on every toggle.
    """

    id: str
    name: str
    category: str
    created_at: date
    streak: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready record used for persistence and exports."""

        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "createdAt": self.created_at.isoformat(),
            "streak": self.streak,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Habit":
        """Rebuild a habit from its persisted record.

        Raises:
            KeyError: a required field is missing
            ValueError: ``createdAt`` is not an ISO date
        """

        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=str(data["category"]),
            created_at=date.fromisoformat(data["createdAt"]),
            streak=int(data.get("streak", 0) or 0),
        )


__all__ = ["Habit"]
