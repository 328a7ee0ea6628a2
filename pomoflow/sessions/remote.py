"""Sessions stored in the hosted ``timer_sessions`` table.

Hides the Supabase query builder from the rest of the app; anything the
client raises comes back out as :class:`PersistenceError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from supabase import Client

from ..errors import PersistenceError, SessionNotFound
from .models import TimerSession, parse_timestamp
from .store import SessionStore

logger = logging.getLogger(__name__)

TABLE_NAME = "timer_sessions"


def _to_row(session: TimerSession) -> Dict[str, Any]:
    row = {
        "id": session.id,
        "user_id": session.user_id,
        "title": session.title,
        "duration_seconds": session.duration_seconds,
        "started_at": session.started_at.isoformat(),
        "completed": session.completed,
    }
    if session.completed_at is not None:
        row["completed_at"] = session.completed_at.isoformat()
    return row


def _to_session(data: Dict[str, Any]) -> TimerSession:
    """Decode one returned row; a row that cannot be decoded is a
    :class:`PersistenceError` like any other backend failure."""
    try:
        started_at = parse_timestamp(data.get("started_at") or data.get("created_at"))
        if started_at is None:
            raise ValueError("row has no started_at")
        return TimerSession(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            title=data.get("title") or "",
            duration_seconds=int(data["duration_seconds"]),
            started_at=started_at,
            completed=bool(data.get("completed")),
            created_at=parse_timestamp(data.get("created_at")),
            completed_at=parse_timestamp(data.get("completed_at")),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(f"Malformed session row: {exc!r}") from exc


def _serialize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.isoformat() if hasattr(value, "isoformat") else value
        for key, value in changes.items()
    }


class SupabaseSessionStore(SessionStore):
    """Sessions kept in a Supabase table, scoped by ``user_id``."""

    def __init__(self, client: Client, table_name: str = TABLE_NAME):
        self._client = client
        self._table_name = table_name

    def _table(self):
        return self._client.table(self._table_name)

    def insert(self, session: TimerSession) -> TimerSession:
        try:
            response = self._table().insert(_to_row(session)).execute()
        except Exception as exc:
            raise PersistenceError(f"Could not insert session {session.id}: {exc}") from exc
        if not response.data:
            raise PersistenceError(f"Insert of session {session.id} returned no row")
        return _to_session(response.data[0])

    def update(self, user_id: str, session_id: str, **changes) -> TimerSession:
        self._check_changes(changes)
        try:
            response = (
                self._table()
                .update(_serialize_changes(changes))
                .eq("id", session_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as exc:
            raise PersistenceError(f"Could not update session {session_id}: {exc}") from exc
        if not response.data:
            raise SessionNotFound(session_id)
        return _to_session(response.data[0])

    def delete(self, user_id: str, session_id: str) -> bool:
        try:
            response = (
                self._table()
                .delete()
                .eq("id", session_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as exc:
            raise PersistenceError(f"Could not delete session {session_id}: {exc}") from exc
        return len(response.data or []) > 0

    def select(
        self, user_id: str, *, completed: bool | None = None,
        limit: int | None = None,
    ) -> List[TimerSession]:
        query = self._table().select("*").eq("user_id", user_id)
        if completed is not None:
            query = query.eq("completed", completed)
        query = query.order("started_at", desc=True)
        if limit:
            query = query.limit(limit)
        try:
            response = query.execute()
        except Exception as exc:
            raise PersistenceError(f"Could not list sessions: {exc}") from exc
        return [_to_session(item) for item in response.data or []]

    def get(self, user_id: str, session_id: str) -> TimerSession:
        try:
            response = (
                self._table()
                .select("*")
                .eq("id", session_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as exc:
            raise PersistenceError(f"Could not load session {session_id}: {exc}") from exc
        if not response.data:
            raise SessionNotFound(session_id)
        return _to_session(response.data[0])
