"""Shared constants."""

from .categories import (
    ALL_CATEGORIES,
    CATEGORY_CONFIG,
    CATEGORY_ORDER,
    HABIT_CATEGORIES,
    category_emoji,
    category_label,
    is_valid_category,
)

HABITS_KEY = "habits"
HISTORY_KEY = "habitHistory"

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORY_CONFIG",
    "CATEGORY_ORDER",
    "HABITS_KEY",
    "HABIT_CATEGORIES",
    "HISTORY_KEY",
    "category_emoji",
    "category_label",
    "is_valid_category",
]
