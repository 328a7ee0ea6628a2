"""Session history widget for the History tab.

Lists the signed-in user's pomodoro sessions, newest first, with an
All / Completed / Incomplete filter.  Double-clicking a row emits
``session_selected(session_id)`` so the window can resume it.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox,
    QTableWidget, QTableWidgetItem, QHeaderView, QAbstractItemView,
)

from ..errors import PersistenceError
from ..sessions.history import SessionHistory, format_duration
from ..sessions.models import SessionFilter, TimerSession

FILTER_LABELS: dict[SessionFilter, str] = {
    SessionFilter.ALL: "All Sessions",
    SessionFilter.COMPLETED: "Completed",
    SessionFilter.INCOMPLETE: "Incomplete",
}

COLUMNS = ("Title", "Duration", "Started At", "Status")


class SessionHistoryWidget(QWidget):
    """Table of persisted sessions with a status filter."""

    session_selected = pyqtSignal(str)

    def __init__(self, history: SessionHistory, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._history = history
        self._sessions: list[TimerSession] = []
        self._build_ui()

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(6)

        header_row = QHBoxLayout()
        header = QLabel("Timer History")
        header.setStyleSheet("font-size: 15px; font-weight: 700;")
        header_row.addWidget(header)
        header_row.addStretch()

        self._filter_combo = QComboBox(self)
        for session_filter, text in FILTER_LABELS.items():
            self._filter_combo.addItem(text, session_filter.value)
        self._filter_combo.currentIndexChanged.connect(lambda _i: self.refresh())
        header_row.addWidget(self._filter_combo)
        layout.addLayout(header_row)

        self._table = QTableWidget(0, len(COLUMNS), self)
        self._table.setHorizontalHeaderLabels(COLUMNS)
        self._table.horizontalHeader().setSectionResizeMode(
            0, QHeaderView.ResizeMode.Stretch,
        )
        self._table.verticalHeader().setVisible(False)
        self._table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._table.cellDoubleClicked.connect(self._on_row_activated)
        layout.addWidget(self._table)

        self._message_label = QLabel("")
        self._message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._message_label.setWordWrap(True)
        layout.addWidget(self._message_label)

    # ── refresh ───────────────────────────────────────────────────────

    @property
    def session_filter(self) -> SessionFilter:
        return SessionFilter(self._filter_combo.currentData())

    def set_filter(self, session_filter: SessionFilter) -> None:
        index = self._filter_combo.findData(session_filter.value)
        self._filter_combo.setCurrentIndex(index)

    def refresh(self) -> None:
        """Reload sessions from the store.  Errors show inline."""
        self._table.setRowCount(0)
        self._sessions = []

        try:
            sessions = self._history.list_sessions(self.session_filter)
        except PersistenceError as exc:
            self._message_label.setText(f"Could not load sessions: {exc}")
            return

        if not sessions:
            self._message_label.setText(
                "No timer sessions found. Start a timer to track your productivity!"
            )
            return

        self._message_label.setText("")
        self._sessions = sessions
        self._table.setRowCount(len(sessions))
        for row, sess in enumerate(sessions):
            started = sess.started_at.astimezone().strftime("%Y-%m-%d %H:%M")
            cells = (
                sess.title,
                format_duration(sess.duration_seconds),
                started,
                "Completed" if sess.completed else "Incomplete",
            )
            for col, text in enumerate(cells):
                self._table.setItem(row, col, QTableWidgetItem(text))

    def show_error(self, text: str) -> None:
        """Report a problem under the table without touching the rows."""
        self._message_label.setText(text)

    def clear(self) -> None:
        self._table.setRowCount(0)
        self._sessions = []
        self._message_label.setText("Please sign in to view your timer history.")

    # ── slots ─────────────────────────────────────────────────────────

    def _on_row_activated(self, row: int, _column: int) -> None:
        if 0 <= row < len(self._sessions):
            self.session_selected.emit(self._sessions[row].id)

    # ── inspection ────────────────────────────────────────────────────

    @property
    def row_count(self) -> int:
        return self._table.rowCount()

    def cell_text(self, row: int, column: int) -> str:
        item = self._table.item(row, column)
        return item.text() if item else ""

    @property
    def message(self) -> str:
        return self._message_label.text()
