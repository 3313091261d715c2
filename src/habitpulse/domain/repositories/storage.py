"""Key/value store protocol used to persist the habit collections."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class KeyValueStore(Protocol):
    """Durable store of JSON documents addressed by key."""

    def load(self, key: str) -> Optional[Any]:
        """Return the decoded JSON value for ``key`` or None if never saved."""
        ...

    def save(self, key: str, value: Any) -> None:
        """Persist a JSON-serializable value; raises StorageError on failure."""
        ...

    def save_many(self, items: Mapping[str, Any]) -> None:
        """Persist several keys in one atomic step."""
        ...
