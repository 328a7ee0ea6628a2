"""Session package: stored pomodoro attempts and the writer that fills them."""

from .events import SessionCompleted, SessionOpened, SessionResumed
from .history import SessionHistory, format_duration
from .models import DEFAULT_TITLE, SessionFilter, TimerSession
from .recorder import SessionRecorder, WriteResult
from .store import SessionStore, SqlSessionStore

__all__ = [
    "DEFAULT_TITLE",
    "SessionCompleted",
    "SessionFilter",
    "SessionHistory",
    "SessionOpened",
    "SessionRecorder",
    "SessionResumed",
    "SessionStore",
    "SqlSessionStore",
    "TimerSession",
    "WriteResult",
    "format_duration",
]
