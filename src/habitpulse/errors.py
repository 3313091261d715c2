"""Exception types raised by the habit engine."""

from __future__ import annotations


class HabitPulseError(Exception):
    """Base exception for HabitPulse."""


class ValidationError(HabitPulseError):
    """Raised when habit input fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")


class NotFoundError(HabitPulseError):
    """Raised when an operation references an unknown habit id."""

    def __init__(self, habit_id: str):
        self.habit_id = habit_id
        super().__init__(f"Habit with ID {habit_id} not found")


class StorageError(HabitPulseError):
    """Raised when the persistence layer fails to load or save."""

    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Storage {operation} failed: {details}")


__all__ = ["HabitPulseError", "NotFoundError", "StorageError", "ValidationError"]
