"""UI package."""

from .auth_dialog import AuthDialog
from .session_history import SessionHistoryWidget
from .settings_dialog import SettingsDialog
from .timer_widget import TimerWidget

__all__ = [
    "AuthDialog",
    "SessionHistoryWidget",
    "SettingsDialog",
    "TimerWidget",
]
