"""Domain records and SQLModel table exports."""

from .habit import Habit
from .history import HistoryLog
from .kv_entry import KeyValueEntry

__all__ = ["Habit", "HistoryLog", "KeyValueEntry"]
