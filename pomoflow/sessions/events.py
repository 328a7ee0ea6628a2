"""Session events emitted by the timer engine.

The engine never talks to a store directly: it describes what happened
and a :class:`~pomoflow.sessions.recorder.SessionRecorder` applies it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionOpened:
    """A new pomodoro countdown started; insert a fresh row."""

    session_id: str
    user_id: str
    title: str
    duration_seconds: int
    started_at: datetime


@dataclass(frozen=True)
class SessionResumed:
    """A session loaded from history was started again."""

    session_id: str
    user_id: str
    started_at: datetime


@dataclass(frozen=True)
class SessionCompleted:
    """The pomodoro countdown for this session reached zero."""

    session_id: str
    user_id: str
    completed_at: datetime


SessionEvent = SessionOpened | SessionResumed | SessionCompleted
