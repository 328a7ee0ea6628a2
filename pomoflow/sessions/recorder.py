"""Applies session events to a store outside the engine's transitions.

``submit`` only queues; the queue drains on the next turn of the Qt event
loop.  A failed write is logged and reported on ``write_failed``; it is
never raised back into the engine and nothing is rolled back.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..errors import PersistenceError
from .events import SessionCompleted, SessionEvent, SessionOpened, SessionResumed
from .models import TimerSession
from .store import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    event: SessionEvent
    ok: bool
    error: PersistenceError | None = None


class SessionRecorder(QObject):
    """Best-effort writer for :mod:`pomoflow.sessions.events`.

    Signals
    -------
    write_finished(result: WriteResult)
        Emitted after every attempted write, successful or not.
    write_failed(result: WriteResult)
        Emitted only for failed writes.
    """

    write_finished = pyqtSignal(object)
    write_failed = pyqtSignal(object)

    def __init__(self, store: SessionStore, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._store = store
        self._pending: deque[SessionEvent] = deque()
        self._flush_scheduled = False

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, event: SessionEvent) -> None:
        self._pending.append(event)
        if not self._flush_scheduled:
            self._flush_scheduled = True
            QTimer.singleShot(0, self.flush)

    def flush(self) -> list[WriteResult]:
        """Write every queued event in order and return the outcomes."""
        self._flush_scheduled = False
        results = []
        while self._pending:
            results.append(self._apply(self._pending.popleft()))
        return results

    def discard_pending(self) -> None:
        if self._pending:
            logger.debug("Dropping %d unsent session events", len(self._pending))
        self._pending.clear()

    # ── internals ─────────────────────────────────────────────────────

    def _apply(self, event: SessionEvent) -> WriteResult:
        try:
            self._write(event)
        except PersistenceError as exc:
            logger.error("Error recording timer session %s: %s", event.session_id, exc)
            result = WriteResult(event, ok=False, error=exc)
            self.write_finished.emit(result)
            self.write_failed.emit(result)
            return result

        result = WriteResult(event, ok=True)
        self.write_finished.emit(result)
        return result

    def _write(self, event: SessionEvent) -> None:
        if isinstance(event, SessionOpened):
            self._store.insert(TimerSession(
                id=event.session_id,
                user_id=event.user_id,
                title=event.title,
                duration_seconds=event.duration_seconds,
                started_at=event.started_at,
                completed=False,
                created_at=event.started_at,
            ))
        elif isinstance(event, SessionResumed):
            self._store.update(
                event.user_id, event.session_id,
                started_at=event.started_at, completed=False, completed_at=None,
            )
        elif isinstance(event, SessionCompleted):
            self._store.update(
                event.user_id, event.session_id,
                completed=True, completed_at=event.completed_at,
            )
        else:
            raise TypeError(f"Unknown session event {event!r}")
