"""Key/value rows backing the durable store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(SQLModel, table=True):
    """One persisted JSON document addressed by key."""

    __tablename__: ClassVar[str] = "kv_entry"

    key: str = Field(primary_key=True, max_length=128)
    value: str = Field(nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
