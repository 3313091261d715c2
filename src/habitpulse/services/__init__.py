"""Service module exports.

``reports`` is left out so matplotlib is only imported when a chart is drawn.
"""

from . import export, formatting, habit_store, queries, stats, streaks

__all__ = [
    "export",
    "formatting",
    "habit_store",
    "queries",
    "stats",
    "streaks",
]
