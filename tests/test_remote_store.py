"""Tests for the hosted session store against a fake query builder."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from pomoflow.errors import PersistenceError, SessionNotFound
from pomoflow.sessions.models import TimerSession
from pomoflow.sessions.remote import SupabaseSessionStore

T0 = datetime(2024, 6, 1, 7, 30, tzinfo=timezone.utc)

ROW = {
    "id": "s1",
    "user_id": "u1",
    "title": "Focus",
    "duration_seconds": 1500,
    "started_at": "2024-06-01T07:30:00+00:00",
    "completed": False,
    "created_at": "2024-06-01T07:30:00.123Z",
    "completed_at": None,
}


class FakeQuery:
    """Records the builder calls and returns canned rows on execute()."""

    def __init__(self, data=None, error=None):
        self.calls = []
        self.data = data if data is not None else []
        self.error = error

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        if self.error:
            raise self.error
        return SimpleNamespace(data=self.data)


class FakeClient:
    def __init__(self, query):
        self.query = query
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


def _store(data=None, error=None):
    query = FakeQuery(data, error)
    client = FakeClient(query)
    return SupabaseSessionStore(client), query, client


class TestInsert:

    def test_insert_sends_row(self):
        store, query, client = _store([ROW])
        session = TimerSession(
            id="s1", user_id="u1", title="Focus",
            duration_seconds=1500, started_at=T0,
        )
        saved = store.insert(session)

        assert client.tables == ["timer_sessions"]
        name, args, _ = query.calls[0]
        assert name == "insert"
        assert args[0] == {
            "id": "s1",
            "user_id": "u1",
            "title": "Focus",
            "duration_seconds": 1500,
            "started_at": T0.isoformat(),
            "completed": False,
        }
        assert saved.started_at == T0
        assert saved.created_at.tzinfo is not None

    def test_insert_without_returned_row(self):
        store, _, _ = _store([])
        with pytest.raises(PersistenceError):
            store.insert(TimerSession("s1", "u1", "x", 60, T0))

    def test_client_error_wrapped(self):
        store, _, _ = _store(error=RuntimeError("503"))
        with pytest.raises(PersistenceError, match="503"):
            store.insert(TimerSession("s1", "u1", "x", 60, T0))


class TestUpdateDelete:

    def test_update_is_owner_scoped(self):
        store, query, _ = _store([dict(ROW, completed=True)])
        store.update("u1", "s1", completed=True, completed_at=T0)
        assert query.calls == [
            ("update", ({"completed": True, "completed_at": T0.isoformat()},), {}),
            ("eq", ("id", "s1"), {}),
            ("eq", ("user_id", "u1"), {}),
        ]

    def test_update_nothing_matched(self):
        store, _, _ = _store([])
        with pytest.raises(SessionNotFound):
            store.update("u1", "s1", completed=True)

    def test_delete(self):
        store, query, _ = _store([ROW])
        assert store.delete("u1", "s1") is True
        assert query.calls[0][0] == "delete"

    def test_delete_nothing_matched(self):
        store, _, _ = _store([])
        assert store.delete("u1", "s1") is False


class TestSelect:

    def test_select_all_newest_first(self):
        store, query, _ = _store([ROW])
        (session,) = store.select("u1")
        assert session.id == "s1"
        assert ("eq", ("user_id", "u1"), {}) in query.calls
        assert ("order", ("started_at",), {"desc": True}) in query.calls
        assert not any(c[0] == "eq" and c[1][0] == "completed" for c in query.calls)

    def test_select_completed_filter_and_limit(self):
        store, query, _ = _store([])
        store.select("u1", completed=True, limit=10)
        assert ("eq", ("completed", True), {}) in query.calls
        assert ("limit", (10,), {}) in query.calls

    def test_select_error_wrapped(self):
        store, _, _ = _store(error=RuntimeError("timeout"))
        with pytest.raises(PersistenceError):
            store.select("u1")

    def test_get_missing(self):
        store, _, _ = _store([])
        with pytest.raises(SessionNotFound):
            store.get("u1", "nope")


class TestMalformedRows:

    BROKEN = {"id": "s1", "user_id": "u1", "started_at": "not-a-timestamp"}

    def test_insert_with_undecodable_row(self):
        store, _, _ = _store([self.BROKEN])
        with pytest.raises(PersistenceError, match="Malformed session row"):
            store.insert(TimerSession("s1", "u1", "x", 60, T0))

    def test_update_with_undecodable_row(self):
        store, _, _ = _store([dict(ROW, started_at="yesterday")])
        with pytest.raises(PersistenceError):
            store.update("u1", "s1", completed=True)

    def test_select_with_undecodable_row(self):
        store, _, _ = _store([ROW, dict(ROW, duration_seconds=None)])
        with pytest.raises(PersistenceError):
            store.select("u1")

    def test_get_with_undecodable_row(self):
        store, _, _ = _store(["not a row"])
        with pytest.raises(PersistenceError):
            store.get("u1", "s1")

    def test_five_digit_fraction_is_accepted(self):
        store, _, _ = _store([dict(ROW, created_at="2024-06-01T07:30:00.12345+00:00")])
        (session,) = store.select("u1")
        assert session.created_at == datetime(2024, 6, 1, 7, 30, 0, 123450, tzinfo=timezone.utc)
