"""Owner-scoped session storage.

Every operation takes the owning user's id; a row owned by somebody else
behaves exactly like a missing row.
"""

from __future__ import annotations

import abc
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from ..database.db import get_session
from ..database.models import TimerSessionRow
from ..errors import PersistenceError, SessionNotFound
from .models import TimerSession, as_utc

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"title", "duration_seconds", "started_at", "completed", "completed_at"}
)


class SessionStore(abc.ABC):
    """Table-like store for :class:`TimerSession` rows."""

    @abc.abstractmethod
    def insert(self, session: TimerSession) -> TimerSession:
        ...

    @abc.abstractmethod
    def update(self, user_id: str, session_id: str, **changes) -> TimerSession:
        """Apply ``changes`` to one row; raise :class:`SessionNotFound`."""

    @abc.abstractmethod
    def delete(self, user_id: str, session_id: str) -> bool:
        """Delete one row; return False when nothing matched."""

    @abc.abstractmethod
    def select(
        self, user_id: str, *, completed: bool | None = None,
        limit: int | None = None,
    ) -> list[TimerSession]:
        """Rows owned by ``user_id``, newest ``started_at`` first."""

    def get(self, user_id: str, session_id: str) -> TimerSession:
        for session in self.select(user_id):
            if session.id == session_id:
                return session
        raise SessionNotFound(session_id)

    @staticmethod
    def _check_changes(changes: dict) -> None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update {', '.join(sorted(unknown))}")


def _to_session(row: TimerSessionRow) -> TimerSession:
    return TimerSession(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        duration_seconds=row.duration_seconds,
        started_at=as_utc(row.started_at),
        completed=bool(row.completed),
        created_at=as_utc(row.created_at),
        completed_at=as_utc(row.completed_at),
    )


class SqlSessionStore(SessionStore):
    """Sessions in the local SQLAlchemy database."""

    def insert(self, session: TimerSession) -> TimerSession:
        try:
            with get_session() as db:
                row = TimerSessionRow(
                    id=session.id,
                    user_id=session.user_id,
                    title=session.title,
                    duration_seconds=session.duration_seconds,
                    started_at=session.started_at,
                    completed=session.completed,
                    created_at=session.created_at or datetime.now(timezone.utc),
                    completed_at=session.completed_at,
                )
                db.add(row)
                db.flush()
                return _to_session(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not insert session {session.id}: {exc}") from exc

    def update(self, user_id: str, session_id: str, **changes) -> TimerSession:
        self._check_changes(changes)
        try:
            with get_session() as db:
                row = db.get(TimerSessionRow, session_id)
                if row is None or row.user_id != user_id:
                    raise SessionNotFound(session_id)
                for key, value in changes.items():
                    setattr(row, key, value)
                db.flush()
                return _to_session(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not update session {session_id}: {exc}") from exc

    def delete(self, user_id: str, session_id: str) -> bool:
        try:
            with get_session() as db:
                row = db.get(TimerSessionRow, session_id)
                if row is None or row.user_id != user_id:
                    return False
                db.delete(row)
                return True
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not delete session {session_id}: {exc}") from exc

    def select(
        self, user_id: str, *, completed: bool | None = None,
        limit: int | None = None,
    ) -> list[TimerSession]:
        try:
            with get_session() as db:
                query = db.query(TimerSessionRow).filter(
                    TimerSessionRow.user_id == user_id,
                )
                if completed is not None:
                    query = query.filter(TimerSessionRow.completed == completed)
                query = query.order_by(TimerSessionRow.started_at.desc())
                if limit:
                    query = query.limit(limit)
                return [_to_session(row) for row in query.all()]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not list sessions: {exc}") from exc

    def get(self, user_id: str, session_id: str) -> TimerSession:
        try:
            with get_session() as db:
                row = db.get(TimerSessionRow, session_id)
                if row is None or row.user_id != user_id:
                    raise SessionNotFound(session_id)
                return _to_session(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load session {session_id}: {exc}") from exc
