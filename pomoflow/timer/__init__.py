"""Timer package."""

from .context import TimerContext
from .engine import (
    PomodoroEngine,
    TimerMode,
    POMODOROS_PER_LONG_BREAK,
    TICK_INTERVAL_MS,
)

__all__ = [
    "PomodoroEngine",
    "TimerContext",
    "TimerMode",
    "POMODOROS_PER_LONG_BREAK",
    "TICK_INTERVAL_MS",
]
