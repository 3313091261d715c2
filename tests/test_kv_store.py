"""Tests for the SQLModel and in-memory key/value stores."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from habitpulse.errors import StorageError
from habitpulse.infra.database import bootstrap_database
from habitpulse.infra.repositories import InMemoryKeyValueStore, SQLModelKeyValueStore, namespaced_key
from habitpulse.models.kv_entry import KeyValueEntry
from habitpulse.services.habit_store import HabitStore


def test_namespaced_key():
    assert namespaced_key("habits") == "habits"
    assert namespaced_key("habits", "alice") == "alice:habits"


class TestSQLModelKeyValueStore:
    def test_missing_key_loads_none(self, session_factory):
        assert SQLModelKeyValueStore(session_factory).load("habits") is None

    def test_save_then_load_round_trips(self, session_factory):
        kv = SQLModelKeyValueStore(session_factory)
        value = [{"id": "a", "name": "Läufe ✓", "streak": 3, "done": True, "nested": {"x": None}}]

        kv.save("habits", value)

        assert kv.load("habits") == value

    def test_save_overwrites_existing_row(self, session_factory):
        kv = SQLModelKeyValueStore(session_factory)
        kv.save("habitHistory", {"2024-01-01": {"a": True}})
        kv.save("habitHistory", {"2024-01-01": {"a": False}})

        assert kv.load("habitHistory") == {"2024-01-01": {"a": False}}
        with session_factory() as session:
            rows = session.exec(select(KeyValueEntry)).all()
        assert len(rows) == 1

    def test_save_many_writes_all_keys(self, session_factory):
        kv = SQLModelKeyValueStore(session_factory)
        kv.save_many({"habits": [], "habitHistory": {}})

        with session_factory() as session:
            keys = sorted(row.key for row in session.exec(select(KeyValueEntry)).all())
        assert keys == ["habitHistory", "habits"]

    def test_namespaces_are_isolated(self, session_factory):
        alice = SQLModelKeyValueStore(session_factory, namespace="alice")
        bob = SQLModelKeyValueStore(session_factory, namespace="bob")

        alice.save("habits", ["a"])

        assert alice.load("habits") == ["a"]
        assert bob.load("habits") is None

    def test_unserializable_value_raises_storage_error(self, session_factory):
        kv = SQLModelKeyValueStore(session_factory)
        with pytest.raises(StorageError) as excinfo:
            kv.save("habits", {"bad": object()})
        assert excinfo.value.operation == "serialize"

    def test_corrupt_row_raises_storage_error(self, session_factory):
        with session_factory() as session:
            session.add(KeyValueEntry(key="habits", value="{not json"))
        with pytest.raises(StorageError) as excinfo:
            SQLModelKeyValueStore(session_factory).load("habits")
        assert excinfo.value.operation == "load"

    def test_database_errors_are_wrapped(self):
        def broken_factory():
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        kv = SQLModelKeyValueStore(broken_factory)
        with pytest.raises(StorageError) as excinfo:
            kv.save("habits", [])
        assert excinfo.value.operation == "save"
        with pytest.raises(StorageError):
            kv.load("habits")

    def test_delete_removes_key(self, session_factory):
        kv = SQLModelKeyValueStore(session_factory)
        kv.save("habits", [1])
        kv.delete("habits")
        kv.delete("habits")
        assert kv.load("habits") is None

    def test_store_survives_reopen(self, tmp_path, monkeypatch, clock):
        from habitpulse.config import BaseConfig

        monkeypatch.setenv("HABITPULSE_DATABASE_URL", f"sqlite:///{tmp_path / 'habits.db'}")
        _, factory = bootstrap_database(BaseConfig())
        first = HabitStore(SQLModelKeyValueStore(factory), clock=clock).load()
        habit = first.add_habit("Floss", "health")
        first.toggle_habit(habit.id)

        _, factory_again = bootstrap_database(BaseConfig())
        second = HabitStore(SQLModelKeyValueStore(factory_again), clock=clock).load()

        assert [h.to_dict() for h in second.habits] == [habit.to_dict()]
        assert second.is_completed_today(habit.id) is True


class TestInMemoryKeyValueStore:
    def test_values_are_copied_through_json(self):
        kv = InMemoryKeyValueStore()
        value = {"a": [1, 2]}
        kv.save("k", value)
        value["a"].append(3)

        assert kv.load("k") == {"a": [1, 2]}
        assert kv.raw("k") == '{"a": [1, 2]}'

    def test_namespace_prefixes_keys(self):
        kv = InMemoryKeyValueStore(namespace="u1")
        kv.save_many({"habits": [], "habitHistory": {}})
        assert kv.raw("habits") == "[]"
        assert kv._data.keys() == {"u1:habits", "u1:habitHistory"}

    def test_delete(self):
        kv = InMemoryKeyValueStore()
        kv.save("k", 1)
        kv.delete("k")
        assert kv.load("k") is None
