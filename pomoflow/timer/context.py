"""Everything the timer engine depends on, passed in explicitly."""

from __future__ import annotations

from dataclasses import dataclass

from ..auth import AuthService
from ..sessions.recorder import SessionRecorder
from ..settings import SettingsManager


@dataclass
class TimerContext:
    settings: SettingsManager
    auth: AuthService
    recorder: SessionRecorder
