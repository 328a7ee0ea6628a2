"""Timer settings with JSON persistence.

Settings are stored at ``<POMOFLOW_HOME>/settings.json``.

Usage::

    manager = SettingsManager()
    manager.update(pomodoro_minutes=50)
    manager.get().pomodoro_minutes    # 50, already on disk
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path

from PyQt6.QtCore import QObject, pyqtSignal

from .config import DEFAULT_HOME
from .errors import SettingsError

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = DEFAULT_HOME
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

_DURATION_FIELDS = ("pomodoro_minutes", "short_break_minutes", "long_break_minutes")


@dataclass(frozen=True)
class TimerSettings:
    """User-configurable timer preferences."""

    pomodoro_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    auto_start_breaks: bool = True
    auto_start_pomodoros: bool = True
    sound_enabled: bool = True

    def validate(self) -> None:
        for name in _DURATION_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise SettingsError(f"{name} must be a positive integer, got {value!r}")
        for name in ("auto_start_breaks", "auto_start_pomodoros", "sound_enabled"):
            if not isinstance(getattr(self, name), bool):
                raise SettingsError(f"{name} must be true or false")


def load_settings(path: Path | None = None) -> TimerSettings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    if not path.exists():
        return TimerSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(TimerSettings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        settings = TimerSettings(**filtered)
        settings.validate()
        return settings
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
    return TimerSettings()


def save_settings(settings: TimerSettings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )


class SettingsManager(QObject):
    """Owns the current :class:`TimerSettings` and keeps the file in sync.

    Signals
    -------
    changed(settings: TimerSettings)
        Emitted after every successful :meth:`update`.
    """

    changed = pyqtSignal(object)

    def __init__(
        self,
        path: Path | None = None,
        parent: QObject | None = None,
        *,
        persist: bool = True,
    ) -> None:
        super().__init__(parent)
        self._path = path or SETTINGS_PATH
        self._persist = persist
        self._settings = load_settings(self._path) if persist else TimerSettings()

    def get(self) -> TimerSettings:
        return self._settings

    def update(self, **partial) -> TimerSettings:
        """Merge ``partial`` into the current settings and save.

        Raises :class:`SettingsError` for unknown keys or invalid values;
        the current settings are left untouched in that case.
        """
        valid_keys = {f.name for f in fields(TimerSettings)}
        unknown = set(partial) - valid_keys
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(sorted(unknown))}")

        merged = replace(self._settings, **partial)
        merged.validate()
        if merged == self._settings:
            return merged

        self._settings = merged
        if self._persist:
            save_settings(merged, self._path)
        logger.debug("Timer settings updated: %s", merged)
        self.changed.emit(merged)
        return merged

    def duration_seconds(self, mode) -> int:
        """Configured length of ``mode`` (a :class:`TimerMode`) in seconds."""
        minutes = getattr(self._settings, mode.settings_field)
        return minutes * 60
