"""Shared test helpers for PomoFlow."""

from pomoflow.sessions.store import SessionStore
from pomoflow.errors import PersistenceError
from pomoflow.timer.engine import PomodoroEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def complete_session(engine: PomodoroEngine) -> None:
    """Fast-complete the current countdown by jumping to the last tick."""
    engine._remaining = 1
    engine.tick()


def run_ticks(engine: PomodoroEngine, count: int) -> None:
    for _ in range(count):
        engine.tick()


class FailingStore(SessionStore):
    """A store whose every call fails, like an unreachable backend."""

    def __init__(self):
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        raise PersistenceError("backend unreachable")

    insert = update = delete = select = get = _fail
