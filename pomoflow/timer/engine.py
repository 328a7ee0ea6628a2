"""Pomodoro state machine for PomoFlow.

Modes
-----
POMODORO      Focused work countdown.  Opens a session when started.
SHORT_BREAK   Short rest.  Never recorded.
LONG_BREAK    Long rest after every 4th completed pomodoro.  Never recorded.

Transitions
-----------
set_mode(m)                     any → m         (stops a running countdown)
start / pause / stop            toggle ``running`` within the current mode
countdown hits 0 in POMODORO    → LONG_BREAK if completed % 4 == 0
                                  else SHORT_BREAK
countdown hits 0 in a break     → POMODORO

After a countdown finishes the next mode starts by itself when the
matching auto-start flag (``auto_start_breaks`` / ``auto_start_pomodoros``)
is on.

Persistence is fire-and-forget: the engine hands session events to the
recorder and carries on.  The completed-pomodoro counter lives in memory
only and starts from zero with every new engine.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..sessions.events import SessionCompleted, SessionOpened, SessionResumed
from ..sessions.models import DEFAULT_TITLE, TimerSession
from .context import TimerContext

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerMode(Enum):
    POMODORO = "pomodoro"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def settings_field(self) -> str:
        return _SETTINGS_FIELDS[self]

    @property
    def is_break(self) -> bool:
        return self is not TimerMode.POMODORO


_SETTINGS_FIELDS: dict[TimerMode, str] = {
    TimerMode.POMODORO: "pomodoro_minutes",
    TimerMode.SHORT_BREAK: "short_break_minutes",
    TimerMode.LONG_BREAK: "long_break_minutes",
}

# ── constants ─────────────────────────────────────────────────────────────

POMODOROS_PER_LONG_BREAK = 4
TICK_INTERVAL_MS = 1000


@dataclass(frozen=True)
class OpenSession:
    """The session the running (or paused) pomodoro belongs to."""

    id: str
    user_id: str
    started_at: datetime


# ── engine ────────────────────────────────────────────────────────────────


class PomodoroEngine(QObject):
    """Qt-based Pomodoro countdown with mode transitions and session events.

    Signals
    -------
    ticked(remaining_seconds: int)
        Emitted after every one-second decrement.
    running_changed(running: bool)
        Emitted when the countdown starts or stops moving.
    mode_changed(mode: TimerMode)
        Emitted whenever the mode is (re)entered.
    completed(finished_mode: TimerMode)
        Emitted once per countdown that reaches zero, before any
        auto-start of the next mode.
    pomodoro_count_changed(count: int)
        Emitted after each completed pomodoro.
    """

    ticked = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    mode_changed = pyqtSignal(object)
    completed = pyqtSignal(object)
    pomodoro_count_changed = pyqtSignal(int)

    def __init__(self, context: TimerContext, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._ctx = context

        # ── countdown state ───────────────────────────────────────────
        self._mode: TimerMode = TimerMode.POMODORO
        self._remaining: int = context.settings.duration_seconds(self._mode)
        self._run_duration: int = self._remaining
        self._running: bool = False
        self._started_at: datetime | None = None
        self._completed_pomodoros: int = 0
        self._title: str = ""

        # ── session tracking ──────────────────────────────────────────
        self._session: OpenSession | None = None
        self._loaded: TimerSession | None = None

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self.tick)

        context.settings.changed.connect(self._on_settings_changed)
        context.auth.principal_changed.connect(self._on_principal_changed)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current countdown."""
        if self._run_duration <= 0:
            return 0.0
        elapsed = self._run_duration - self._remaining
        return max(0.0, min(1.0, elapsed / self._run_duration))

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def completed_pomodoros(self) -> int:
        return self._completed_pomodoros

    @property
    def started_at(self) -> datetime | None:
        """Wall-clock instant of the most recent ``start``."""
        return self._started_at

    @property
    def current_session_id(self) -> str | None:
        return self._session.id if self._session else None

    @property
    def loaded_session(self) -> TimerSession | None:
        return self._loaded

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = value.strip()

    @property
    def tick_scheduled(self) -> bool:
        """True while the one-second schedule is armed."""
        return self._qt_timer.isActive()

    def duration_for(self, mode: TimerMode) -> int:
        return self._ctx.settings.duration_seconds(mode)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def set_mode(self, mode: TimerMode) -> None:
        """Switch mode.  A running countdown is stopped first."""
        if self._running:
            self.stop()
        self._enter_mode(mode)

    def start(self) -> None:
        """Start (or resume) the countdown in the current mode.

        Silently ignored when nobody is signed in.
        """
        if self._running:
            return
        user = self._ctx.auth.current_user
        if user is None:
            logger.debug("Ignoring start: no signed-in user")
            return
        if self._remaining <= 0:
            return

        self._running = True
        self._started_at = datetime.now(timezone.utc)

        if self._mode is TimerMode.POMODORO and self._session is None:
            self._open_session(user.id)

        self._qt_timer.start()
        self.running_changed.emit(True)

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self._running or self._remaining <= 0:
            return
        self._remaining -= 1
        self.ticked.emit(self._remaining)
        if self._remaining == 0:
            self._on_complete()

    def pause(self) -> None:
        """Freeze the countdown.  The open session stays open."""
        self._qt_timer.stop()
        if not self._running:
            return
        self._running = False
        self.running_changed.emit(False)

    def stop(self) -> None:
        """Pause, abandon the open session, and rewind the countdown."""
        self.pause()
        self._clear_session()
        self._started_at = None
        self._rewind()

    def reset(self) -> None:
        self.stop()

    def load_session(self, session: TimerSession) -> None:
        """Prepare to resume ``session``: the next pomodoro ``start`` reuses
        its id and counts down its stored duration."""
        self.set_mode(TimerMode.POMODORO)
        self._loaded = session
        self._title = session.title
        self._rewind()

    def shutdown(self) -> None:
        """Teardown: cancel ticking and drop session refs without writing."""
        self.pause()
        self._clear_session()
        self._started_at = None

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: countdown mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_complete(self) -> None:
        self.pause()
        finished = self._mode

        if finished is TimerMode.POMODORO:
            if self._session is not None:
                self._ctx.recorder.submit(SessionCompleted(
                    session_id=self._session.id,
                    user_id=self._session.user_id,
                    completed_at=datetime.now(timezone.utc),
                ))
            self._completed_pomodoros += 1
            if self._completed_pomodoros % POMODOROS_PER_LONG_BREAK == 0:
                next_mode = TimerMode.LONG_BREAK
            else:
                next_mode = TimerMode.SHORT_BREAK
            self.pomodoro_count_changed.emit(self._completed_pomodoros)
        else:
            next_mode = TimerMode.POMODORO

        self._clear_session()
        self._started_at = None
        logger.info("%s finished; next up %s", finished.value, next_mode.value)
        self.completed.emit(finished)
        self._enter_mode(next_mode)

        settings = self._ctx.settings.get()
        auto = (
            settings.auto_start_breaks if next_mode.is_break
            else settings.auto_start_pomodoros
        )
        if auto:
            self.start()

    def _enter_mode(self, mode: TimerMode) -> None:
        self._mode = mode
        self._clear_session()
        self._rewind()
        self.mode_changed.emit(mode)

    def _rewind(self) -> None:
        if self._loaded is not None and self._mode is TimerMode.POMODORO:
            self._run_duration = self._loaded.duration_seconds
        else:
            self._run_duration = self.duration_for(self._mode)
        self._remaining = self._run_duration
        self.ticked.emit(self._remaining)

    def _clear_session(self) -> None:
        self._session = None
        self._loaded = None

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: session events
    # ══════════════════════════════════════════════════════════════════

    def _open_session(self, user_id: str) -> None:
        started_at = self._started_at
        if self._loaded is not None:
            session_id = self._loaded.id
            self._ctx.recorder.submit(SessionResumed(
                session_id=session_id,
                user_id=user_id,
                started_at=started_at,
            ))
        else:
            session_id = str(uuid.uuid4())
            self._ctx.recorder.submit(SessionOpened(
                session_id=session_id,
                user_id=user_id,
                title=self._title or DEFAULT_TITLE,
                duration_seconds=self._run_duration,
                started_at=started_at,
            ))
        self._session = OpenSession(session_id, user_id, started_at)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: collaborator notifications
    # ══════════════════════════════════════════════════════════════════

    def _on_settings_changed(self, _settings) -> None:
        # A running countdown keeps its length; only future entries change.
        if self._running:
            return
        self._clear_session()
        self._rewind()

    def _on_principal_changed(self, principal) -> None:
        if principal is None:
            self.stop()
