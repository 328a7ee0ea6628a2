"""PomoFlow: a Pomodoro timer with persisted session tracking."""

__version__ = "0.1.0"
