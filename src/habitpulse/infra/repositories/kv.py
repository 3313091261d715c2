"""Key/value store implementations (SQLModel-backed and in-memory)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...errors import StorageError
from ...logging_config import get_logger
from ...models.kv_entry import KeyValueEntry

logger = get_logger("infra.kv")


def namespaced_key(key: str, namespace: Optional[str] = None) -> str:
    """Prefix ``key`` with the user namespace when one is configured."""

    return f"{namespace}:{key}" if namespace else key


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageError("serialize", f"{key}: {exc}") from exc


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise StorageError("load", f"{key}: stored value is not valid JSON ({exc})") from exc


class SQLModelKeyValueStore:
    """SQLModel-based key/value store writing JSON text into ``kv_entry``."""

    def __init__(self, session_factory: Callable[[], Session], *, namespace: Optional[str] = None):
        self.session_factory = session_factory
        self.namespace = namespace

    def load(self, key: str) -> Optional[Any]:
        full_key = namespaced_key(key, self.namespace)
        try:
            with self.session_factory() as session:
                row = session.exec(select(KeyValueEntry).where(KeyValueEntry.key == full_key)).first()
                raw = row.value if row else None
        except SQLAlchemyError as exc:
            raise StorageError("load", f"{full_key}: {exc}") from exc
        if raw is None:
            return None
        return _decode(full_key, raw)

    def save(self, key: str, value: Any) -> None:
        self.save_many({key: value})

    def save_many(self, items: Mapping[str, Any]) -> None:
        """Write every key inside a single session so the snapshot lands atomically."""

        encoded = {
            namespaced_key(key, self.namespace): _encode(key, value) for key, value in items.items()
        }
        now = datetime.now(timezone.utc)
        try:
            with self.session_factory() as session:
                for full_key, raw in encoded.items():
                    row = session.exec(
                        select(KeyValueEntry).where(KeyValueEntry.key == full_key)
                    ).first()
                    if row:
                        row.value = raw
                        row.updated_at = now
                    else:
                        row = KeyValueEntry(key=full_key, value=raw, updated_at=now)
                    session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("save", f"{', '.join(encoded)}: {exc}") from exc
        logger.debug("Saved keys", extra={"keys": list(encoded)})

    def delete(self, key: str) -> None:
        full_key = namespaced_key(key, self.namespace)
        try:
            with self.session_factory() as session:
                row = session.exec(select(KeyValueEntry).where(KeyValueEntry.key == full_key)).first()
                if row:
                    session.delete(row)
                    session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("delete", f"{full_key}: {exc}") from exc


class InMemoryKeyValueStore:
    """Dictionary-backed store that still round-trips values through JSON text."""

    def __init__(self, *, namespace: Optional[str] = None):
        self.namespace = namespace
        self._data: dict[str, str] = {}

    def load(self, key: str) -> Optional[Any]:
        full_key = namespaced_key(key, self.namespace)
        raw = self._data.get(full_key)
        if raw is None:
            return None
        return _decode(full_key, raw)

    def save(self, key: str, value: Any) -> None:
        self.save_many({key: value})

    def save_many(self, items: Mapping[str, Any]) -> None:
        encoded = {
            namespaced_key(key, self.namespace): _encode(key, value) for key, value in items.items()
        }
        self._data.update(encoded)

    def delete(self, key: str) -> None:
        self._data.pop(namespaced_key(key, self.namespace), None)

    def raw(self, key: str) -> Optional[str]:
        """Return the stored JSON text for ``key`` (no decoding)."""

        return self._data.get(namespaced_key(key, self.namespace))


__all__ = ["InMemoryKeyValueStore", "SQLModelKeyValueStore", "namespaced_key"]
