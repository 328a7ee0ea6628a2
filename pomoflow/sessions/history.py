"""Read-only access to the signed-in user's session history."""

from __future__ import annotations

import logging
from datetime import datetime

from ..errors import PersistenceError, SessionNotFound
from .models import SessionFilter, TimerSession
from .store import SessionStore

logger = logging.getLogger(__name__)


def format_duration(seconds: int) -> str:
    """``3723`` → ``"1h 2m 3s"``, ``125`` → ``"2m 5s"``, ``7`` → ``"7s"``."""
    hours, rest = divmod(max(0, int(seconds)), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


class SessionHistory:
    """Queries over persisted sessions, scoped to the current principal."""

    def __init__(self, store: SessionStore, auth) -> None:
        self._store = store
        self._auth = auth

    def list_sessions(
        self, session_filter: SessionFilter = SessionFilter.ALL,
        *, limit: int | None = None,
    ) -> list[TimerSession]:
        """Newest first.  Empty when nobody is signed in."""
        user = self._auth.current_user
        if user is None:
            return []
        try:
            return self._store.select(
                user.id, completed=session_filter.completed, limit=limit,
            )
        except PersistenceError as exc:
            logger.error("Error fetching timer sessions: %s", exc)
            raise

    def load_session(self, session_id: str) -> TimerSession:
        """Fetch one of the current user's sessions for resuming.

        Raises :class:`SessionNotFound` when the id is unknown, belongs to
        another user, or nobody is signed in.
        """
        user = self._auth.current_user
        if user is None:
            raise SessionNotFound(session_id)
        return self._store.get(user.id, session_id)

    def completed_today(self, now: datetime | None = None) -> int:
        """Number of sessions completed on the local calendar day of ``now``."""
        now = now or datetime.now().astimezone()
        today = now.date()
        count = 0
        for session in self.list_sessions(SessionFilter.COMPLETED):
            finished = session.completed_at or session.started_at
            if finished.astimezone(now.tzinfo).date() == today:
                count += 1
        return count
