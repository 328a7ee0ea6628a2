"""Main application window for PomoFlow."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QTabWidget, QStatusBar

from .audio.sounds import SoundManager
from .auth import AuthService
from .errors import PersistenceError, SessionNotFound
from .sessions.history import SessionHistory
from .sessions.recorder import SessionRecorder, WriteResult
from .sessions.store import SessionStore
from .settings import SettingsManager, TimerSettings
from .timer.context import TimerContext
from .timer.engine import PomodoroEngine, TimerMode
from .ui.auth_dialog import AuthDialog
from .ui.session_history import SessionHistoryWidget
from .ui.settings_dialog import SettingsDialog
from .ui.styles import build_stylesheet, palette_for
from .ui.timer_widget import TimerWidget

logger = logging.getLogger(__name__)

TIMER_TAB = 0
HISTORY_TAB = 1


class PomoFlowApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        auth: AuthService,
        store: SessionStore,
        settings: SettingsManager,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("PomoFlow")
        self.setMinimumSize(480, 560)

        # ── services ──────────────────────────────────────────────────
        self._auth = auth
        self._settings = settings
        self._recorder = SessionRecorder(store, parent=self)
        self._history = SessionHistory(store, auth)
        self._engine = PomodoroEngine(
            TimerContext(settings=settings, auth=auth, recorder=self._recorder),
            parent=self,
        )
        self._sounds = SoundManager(self, sounds_dir=sounds_dir)
        self._sounds.set_enabled(settings.get().sound_enabled)

        # ── widgets ───────────────────────────────────────────────────
        self._tabs = QTabWidget(self)
        self._timer_widget = TimerWidget(self._engine, self)
        self._history_widget = SessionHistoryWidget(self._history, self)
        self._tabs.addTab(self._timer_widget, "Timer")
        self._tabs.addTab(self._history_widget, "History")
        self.setCentralWidget(self._tabs)
        self.setStatusBar(QStatusBar(self))

        self._build_menu()
        self._connect_signals()
        self._apply_theme(self._engine.mode)
        self._on_principal_changed(auth.current_user)

    # ── build ─────────────────────────────────────────────────────────

    def _build_menu(self) -> None:
        account_menu = self.menuBar().addMenu("&Account")

        self._sign_in_action = QAction("Sign In…", self)
        self._sign_in_action.triggered.connect(self.prompt_sign_in)
        account_menu.addAction(self._sign_in_action)

        self._sign_out_action = QAction("Sign Out", self)
        self._sign_out_action.triggered.connect(self._auth.sign_out)
        account_menu.addAction(self._sign_out_action)

        timer_menu = self.menuBar().addMenu("&Timer")
        settings_action = QAction("Settings…", self)
        settings_action.setShortcut(QKeySequence("Ctrl+,"))
        settings_action.triggered.connect(self.open_settings)
        timer_menu.addAction(settings_action)

    def _connect_signals(self) -> None:
        self._auth.principal_changed.connect(self._on_principal_changed)
        self._settings.changed.connect(self._on_settings_changed)
        self._recorder.write_failed.connect(self._on_write_failed)
        self._recorder.write_finished.connect(self._on_write_finished)
        self._history_widget.session_selected.connect(self.resume_session)
        self._tabs.currentChanged.connect(self._on_tab_changed)
        self._engine.mode_changed.connect(self._apply_theme)
        self._engine.completed.connect(self._on_timer_completed)

    # ── actions ───────────────────────────────────────────────────────

    def prompt_sign_in(self) -> None:
        AuthDialog(self._auth, self).exec()

    def open_settings(self) -> None:
        SettingsDialog(self._settings, self).exec()

    def resume_session(self, session_id: str) -> bool:
        """Fetch ``session_id`` from the store, load it into the timer and
        switch to the Timer tab.  Failures are shown under the history table."""
        try:
            session = self._history.load_session(session_id)
        except SessionNotFound:
            self._history_widget.show_error("That session no longer exists.")
            return False
        except PersistenceError as exc:
            self._history_widget.show_error(f"Could not load the session: {exc}")
            return False

        self._engine.load_session(session)
        self._timer_widget.show_loaded_title()
        self._tabs.setCurrentIndex(TIMER_TAB)
        return True

    # ── slots ─────────────────────────────────────────────────────────

    def _on_principal_changed(self, principal) -> None:
        signed_in = principal is not None
        self._sign_in_action.setVisible(not signed_in)
        self._sign_out_action.setVisible(signed_in)
        if signed_in:
            self.statusBar().showMessage(f"Signed in as {principal.email}")
            self._history_widget.refresh()
        else:
            self.statusBar().showMessage("Not signed in")
            self._history_widget.clear()
        self._refresh_today()

    def _on_settings_changed(self, settings: TimerSettings) -> None:
        self._sounds.set_enabled(settings.sound_enabled)

    def _on_timer_completed(self, finished: TimerMode) -> None:
        if finished is TimerMode.POMODORO:
            self._sounds.play("pomodoro_complete")
        else:
            self._sounds.play("break_complete")

    def _on_write_failed(self, result: WriteResult) -> None:
        self.statusBar().showMessage(
            "Could not save the session; the timer keeps running.", 5000,
        )

    def _on_write_finished(self, result: WriteResult) -> None:
        if not result.ok:
            return
        self._refresh_today()
        if self._tabs.currentIndex() == HISTORY_TAB:
            self._history_widget.refresh()

    def _refresh_today(self) -> None:
        if not self._auth.is_authenticated:
            self._timer_widget.set_completed_today(0)
            return
        try:
            count = self._history.completed_today()
        except PersistenceError:
            # already logged by SessionHistory; keep the last count
            return
        self._timer_widget.set_completed_today(count)

    def _apply_theme(self, mode: TimerMode) -> None:
        self.setStyleSheet(build_stylesheet(palette_for(mode)))

    def _on_tab_changed(self, index: int) -> None:
        if index == HISTORY_TAB and self._auth.is_authenticated:
            self._history_widget.refresh()

    # ── lifecycle ─────────────────────────────────────────────────────

    def closeEvent(self, event) -> None:
        self._engine.shutdown()
        self._recorder.flush()
        super().closeEvent(event)

    # ── inspection ────────────────────────────────────────────────────

    @property
    def engine(self) -> PomodoroEngine:
        return self._engine

    @property
    def recorder(self) -> SessionRecorder:
        return self._recorder

    @property
    def sounds(self) -> SoundManager:
        return self._sounds

    @property
    def timer_widget(self) -> TimerWidget:
        return self._timer_widget

    @property
    def history_widget(self) -> SessionHistoryWidget:
        return self._history_widget

    @property
    def current_tab(self) -> int:
        return self._tabs.currentIndex()
