"""Shared pytest fixtures for PomoFlow tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from pomoflow.auth import LocalAuthService  # noqa: E402
from pomoflow.database.db import configure_engine, init_db  # noqa: E402
from pomoflow.sessions.recorder import SessionRecorder  # noqa: E402
from pomoflow.sessions.store import SqlSessionStore  # noqa: E402
from pomoflow.settings import SettingsManager  # noqa: E402
from pomoflow.timer.context import TimerContext  # noqa: E402
from pomoflow.timer.engine import PomodoroEngine  # noqa: E402

TEST_EMAIL = "ada@example.com"
TEST_PASSWORD = "correct horse"


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def settings(qapp, tmp_path):
    """Settings stored under tmp_path, auto-start OFF."""
    manager = SettingsManager(tmp_path / "settings.json")
    manager.update(auto_start_breaks=False, auto_start_pomodoros=False)
    return manager


@pytest.fixture
def auth(qapp):
    """Local auth service with nobody signed in (cheap hashing)."""
    return LocalAuthService(iterations=1_000)


@pytest.fixture
def user(auth):
    """Sign up and sign in the default test user."""
    return auth.sign_up(TEST_EMAIL, TEST_PASSWORD)


@pytest.fixture
def store():
    return SqlSessionStore()


@pytest.fixture
def recorder(qapp, store):
    rec = SessionRecorder(store)
    yield rec
    rec.discard_pending()


@pytest.fixture
def make_engine(settings, auth, recorder):
    """Factory so tests can build engines against the shared services."""
    engines = []

    def _make(**overrides):
        ctx = TimerContext(
            settings=overrides.get("settings", settings),
            auth=overrides.get("auth", auth),
            recorder=overrides.get("recorder", recorder),
        )
        eng = PomodoroEngine(ctx)
        engines.append(eng)
        return eng

    yield _make
    for eng in engines:
        eng.shutdown()


@pytest.fixture
def engine(make_engine, user):
    """Engine with a signed-in user, auto-start OFF."""
    return make_engine()


@pytest.fixture
def engine_auto(make_engine, settings, user):
    """Engine with a signed-in user, both auto-start flags ON."""
    settings.update(auto_start_breaks=True, auto_start_pomodoros=True)
    return make_engine()


@pytest.fixture
def engine_signed_out(make_engine):
    """Engine with nobody signed in."""
    return make_engine()
