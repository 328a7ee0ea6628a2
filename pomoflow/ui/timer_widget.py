"""Main timer display widget for the Timer tab.

Layout (top → bottom):
    - Mode buttons (Pomodoro / Short Break / Long Break)
    - Title input (pomodoro mode only)
    - Large mm:ss countdown and progress bar
    - Start/Pause + Reset
    - Completed pomodoro counters (this run, today)
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QLineEdit, QFrame, QProgressBar,
)

from ..timer.engine import PomodoroEngine, TimerMode


MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.POMODORO:    "Pomodoro",
    TimerMode.SHORT_BREAK: "Short Break",
    TimerMode.LONG_BREAK:  "Long Break",
}

PROGRESS_STEPS = 1000


def format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class TimerWidget(QWidget):
    """The timer card shown in the Timer tab."""

    def __init__(self, engine: PomodoroEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._on_mode_changed(engine.mode)
        self._on_running_changed(engine.is_running)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setSpacing(12)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── mode buttons ─────────────────────────────────────────────
        mode_row = QHBoxLayout()
        mode_row.setSpacing(8)
        self._mode_buttons: dict[TimerMode, QPushButton] = {}
        for mode, text in MODE_LABELS.items():
            btn = QPushButton(text, card)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked, m=mode: self._engine.set_mode(m))
            self._mode_buttons[mode] = btn
            mode_row.addWidget(btn)
        layout.addLayout(mode_row)

        # ── title input ──────────────────────────────────────────────
        self._title_input = QLineEdit(card)
        self._title_input.setPlaceholderText("What are you working on?")
        self._title_input.setMaxLength(255)
        layout.addWidget(self._title_input)

        # ── countdown ────────────────────────────────────────────────
        self._time_label = QLabel(format_clock(self._engine.remaining), card)
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time_label.setStyleSheet("font-size: 64px; font-weight: 700;")
        layout.addWidget(self._time_label)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, PROGRESS_STEPS)
        self._progress.setTextVisible(False)
        layout.addWidget(self._progress)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")
        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("dangerButton")

        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._reset_btn)
        layout.addLayout(btn_row)

        self._count_label = QLabel(card)
        self._count_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._count_label)
        self._on_count_changed(self._engine.completed_pomodoros)

        self._today_label = QLabel(card)
        self._today_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._today_label)
        self.set_completed_today(0)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self._on_start_pause)
        self._reset_btn.clicked.connect(self._engine.reset)

        self._engine.ticked.connect(self._refresh_display)
        self._engine.mode_changed.connect(self._on_mode_changed)
        self._engine.running_changed.connect(self._on_running_changed)
        self._engine.pomodoro_count_changed.connect(self._on_count_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_start_pause(self) -> None:
        if self._engine.is_running:
            self._engine.pause()
        else:
            if self._engine.current_session_id is None:
                self._engine.title = self._title_input.text()
            self._engine.start()

    def _on_mode_changed(self, mode: TimerMode) -> None:
        for m, btn in self._mode_buttons.items():
            btn.setChecked(m is mode)
        self._title_input.setVisible(mode is TimerMode.POMODORO)
        self._refresh_display(self._engine.remaining)

    def _on_running_changed(self, running: bool) -> None:
        self._start_pause_btn.setText("Pause" if running else "Start")
        self._title_input.setEnabled(not running)

    def _on_count_changed(self, count: int) -> None:
        self._count_label.setText(f"Pomodoros completed: {count}")

    def _refresh_display(self, remaining: int) -> None:
        self._time_label.setText(format_clock(remaining))
        self._progress.setValue(round(self._engine.percent_complete * PROGRESS_STEPS))

    # ── public ────────────────────────────────────────────────────────────

    def set_completed_today(self, count: int) -> None:
        self._today_label.setText(f"Completed today: {count}")

    def show_loaded_title(self) -> None:
        """Copy a resumed session's title into the input."""
        self._title_input.setText(self._engine.title)

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def start_pause_text(self) -> str:
        return self._start_pause_btn.text()

    @property
    def progress_value(self) -> int:
        return self._progress.value()

    @property
    def today_text(self) -> str:
        return self._today_label.text()
