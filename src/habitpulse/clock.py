"""Clock sources so every notion of "today" can be injected."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Source of the current calendar day and timestamp."""

    def today(self) -> date:
        ...

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the local system time."""

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class FixedClock:
    """Clock pinned to a given day; handy for tests and replaying history."""

    day: date
    moment: Optional[datetime] = None

    def today(self) -> date:
        return self.day

    def now(self) -> datetime:
        if self.moment is not None:
            return self.moment
        return datetime.combine(self.day, time(12, 0), tzinfo=timezone.utc)

    def advance(self, days: int = 1) -> None:
        """Move the pinned day forward (or backward with a negative value)."""

        self.day = date.fromordinal(self.day.toordinal() + days)
        self.moment = None


__all__ = ["Clock", "FixedClock", "SystemClock"]
