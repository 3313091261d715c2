"""
Centralized habit category definitions.
The order below is the display order used by grouped listings.
"""

HABIT_CATEGORIES = [
    "health",
    "productivity",
    "learning",
    "wellness",
    "other",
]

CATEGORY_ORDER = tuple(HABIT_CATEGORIES)

ALL_CATEGORIES = "all"

CATEGORY_CONFIG = {
    "health": {"emoji": "\U0001F3C3", "label": "Health"},
    "productivity": {"emoji": "\U0001F4BC", "label": "Productivity"},
    "learning": {"emoji": "\U0001F4DA", "label": "Learning"},
    "wellness": {"emoji": "\U0001F9D8", "label": "Wellness"},
    "other": {"emoji": "\U0001F4CC", "label": "Other"},
}


def category_label(category: str) -> str:
    """Return the display label for a category, falling back to the raw value."""

    config = CATEGORY_CONFIG.get(category)
    return config["label"] if config else category


def category_emoji(category: str) -> str:
    config = CATEGORY_CONFIG.get(category)
    return config["emoji"] if config else ""


def is_valid_category(category: object) -> bool:
    return isinstance(category, str) and category in CATEGORY_CONFIG
