"""Repository protocols."""

from .storage import KeyValueStore

__all__ = ["KeyValueStore"]
