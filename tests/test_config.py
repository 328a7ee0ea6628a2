"""Tests for environment configuration and backend selection."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pomoflow.auth import LocalAuthService, SupabaseAuthService
from pomoflow.config import AppConfig, build_services, configure_logging
from pomoflow.sessions.remote import SupabaseSessionStore
from pomoflow.sessions.store import SqlSessionStore

ENV_VARS = (
    "POMOFLOW_HOME", "POMOFLOW_DB_URL", "POMOFLOW_LOG_LEVEL",
    "SUPABASE_URL", "SUPABASE_ANON_KEY",
)


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so values loaded from .env are undone at teardown
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestAppConfig:

    def test_defaults(self, clean_env):
        config = AppConfig.from_env(dotenv=False)
        assert config.home == Path.home() / ".pomoflow"
        assert config.log_level == "INFO"
        assert config.uses_supabase is False
        assert config.database_url.endswith("pomoflow.db")
        assert config.settings_path.name == "settings.json"

    def test_reads_environment(self, clean_env, tmp_path):
        clean_env.setenv("POMOFLOW_HOME", str(tmp_path))
        clean_env.setenv("POMOFLOW_LOG_LEVEL", "debug")
        clean_env.setenv("POMOFLOW_DB_URL", "sqlite:///:memory:")
        config = AppConfig.from_env(dotenv=False)
        assert config.home == tmp_path
        assert config.log_level == "DEBUG"
        assert config.database_url == "sqlite:///:memory:"
        assert config.settings_path == tmp_path / "settings.json"

    def test_supabase_needs_both_variables(self, clean_env):
        clean_env.setenv("SUPABASE_URL", "https://example.supabase.co")
        assert AppConfig.from_env(dotenv=False).uses_supabase is False
        clean_env.setenv("SUPABASE_ANON_KEY", "anon")
        assert AppConfig.from_env(dotenv=False).uses_supabase is True

    def test_dotenv_file_is_loaded(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("POMOFLOW_LOG_LEVEL=WARNING\n")
        clean_env.chdir(tmp_path)
        assert AppConfig.from_env().log_level == "WARNING"


class TestBuildServices:

    def test_local_backend(self, qapp, tmp_path):
        config = AppConfig(home=tmp_path, db_url="sqlite:///:memory:")
        auth, store = build_services(config)
        assert isinstance(auth, LocalAuthService)
        assert isinstance(store, SqlSessionStore)
        auth.sign_up("ada@example.com", "lovelace")
        assert store.select(auth.current_user.id) == []

    def test_hosted_backend(self, qapp, monkeypatch):
        client = MagicMock()
        create = MagicMock(return_value=client)
        monkeypatch.setattr("supabase.create_client", create)
        config = AppConfig(supabase_url="https://example.supabase.co", supabase_key="anon")

        auth, store = build_services(config)

        create.assert_called_once_with("https://example.supabase.co", "anon")
        assert isinstance(auth, SupabaseAuthService)
        assert isinstance(store, SupabaseSessionStore)


def test_configure_logging_sets_level():
    configure_logging("warning")
    assert logging.getLogger().level == logging.WARNING
    configure_logging("INFO")
