"""Timer settings dialog.

Edits durations, auto-start flags and the completion sound.  Nothing is
written until the user clicks Save; invalid values are reported inline and
the dialog stays open.
"""

from __future__ import annotations

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QCheckBox, QPushButton, QWidget,
)

from ..errors import SettingsError
from ..settings import SettingsManager


class SettingsDialog(QDialog):
    """Modal dialog for the timer preferences."""

    def __init__(self, manager: SettingsManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Timer Settings")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._manager = manager

        self._build_ui()
        self._populate()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        form = QFormLayout()
        form.setHorizontalSpacing(20)
        form.setVerticalSpacing(10)

        self._pomodoro_spin = self._minutes_spin(120)
        form.addRow("Pomodoro length:", self._pomodoro_spin)

        self._short_spin = self._minutes_spin(60)
        form.addRow("Short break length:", self._short_spin)

        self._long_spin = self._minutes_spin(60)
        form.addRow("Long break length:", self._long_spin)

        self._auto_breaks_cb = QCheckBox("Auto-start breaks")
        form.addRow("", self._auto_breaks_cb)

        self._auto_pomodoros_cb = QCheckBox("Auto-start pomodoros")
        form.addRow("", self._auto_pomodoros_cb)

        self._sound_cb = QCheckBox("Play a sound when a countdown ends")
        form.addRow("", self._sound_cb)

        root.addLayout(form)

        self._error_label = QLabel("")
        self._error_label.setStyleSheet("color: #E06C75;")
        self._error_label.setVisible(False)
        root.addWidget(self._error_label)

        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.setObjectName("secondaryButton")
        cancel_btn.clicked.connect(self.reject)
        save_btn = QPushButton("Save")
        save_btn.setObjectName("primaryButton")
        save_btn.clicked.connect(self.save)
        btn_row.addWidget(cancel_btn)
        btn_row.addWidget(save_btn)
        root.addLayout(btn_row)

    @staticmethod
    def _minutes_spin(maximum: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(1, maximum)
        spin.setSuffix(" min")
        return spin

    def _populate(self) -> None:
        s = self._manager.get()
        self._pomodoro_spin.setValue(s.pomodoro_minutes)
        self._short_spin.setValue(s.short_break_minutes)
        self._long_spin.setValue(s.long_break_minutes)
        self._auto_breaks_cb.setChecked(s.auto_start_breaks)
        self._auto_pomodoros_cb.setChecked(s.auto_start_pomodoros)
        self._sound_cb.setChecked(s.sound_enabled)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    def values(self) -> dict:
        return {
            "pomodoro_minutes": self._pomodoro_spin.value(),
            "short_break_minutes": self._short_spin.value(),
            "long_break_minutes": self._long_spin.value(),
            "auto_start_breaks": self._auto_breaks_cb.isChecked(),
            "auto_start_pomodoros": self._auto_pomodoros_cb.isChecked(),
            "sound_enabled": self._sound_cb.isChecked(),
        }

    def save(self) -> bool:
        try:
            self._manager.update(**self.values())
        except SettingsError as exc:
            self._error_label.setText(str(exc))
            self._error_label.setVisible(True)
            return False
        self.accept()
        return True

    @property
    def error_text(self) -> str:
        return self._error_label.text()
