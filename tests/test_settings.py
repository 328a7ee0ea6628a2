"""Tests for timer settings: defaults, JSON persistence, merging updates,
validation and fallback for unreadable files."""

import json
import logging

import pytest

from pomoflow.errors import SettingsError
from pomoflow.settings import (
    SettingsManager, TimerSettings, load_settings, save_settings,
)
from pomoflow.timer.engine import TimerMode

from helpers import SignalCollector


class TestDefaults:

    def test_defaults(self):
        s = TimerSettings()
        assert s.pomodoro_minutes == 25
        assert s.short_break_minutes == 5
        assert s.long_break_minutes == 15
        assert s.auto_start_breaks is True
        assert s.auto_start_pomodoros is True
        assert s.sound_enabled is True

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.json") == TimerSettings()


class TestPersistence:

    def test_round_trip(self, tmp_path):
        path = tmp_path / "settings.json"
        original = TimerSettings(
            pomodoro_minutes=50, short_break_minutes=10,
            long_break_minutes=30, auto_start_breaks=False,
        )
        save_settings(original, path)
        assert load_settings(path) == original

    def test_save_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "settings.json"
        save_settings(TimerSettings(), path)
        assert path.exists()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"pomodoro_minutes": 40, "theme": "dark"}))
        assert load_settings(path).pomodoro_minutes == 40

    @pytest.mark.parametrize("content", [
        "{not json",
        "[1, 2, 3]",
        json.dumps({"pomodoro_minutes": 0}),
        json.dumps({"short_break_minutes": "five"}),
        json.dumps({"auto_start_breaks": "yes"}),
    ])
    def test_malformed_file_falls_back_to_defaults(self, tmp_path, caplog, content):
        path = tmp_path / "settings.json"
        path.write_text(content)
        with caplog.at_level(logging.WARNING, logger="pomoflow.settings"):
            assert load_settings(path) == TimerSettings()
        assert "Ignoring unreadable settings file" in caplog.text


@pytest.mark.usefixtures("qapp")
class TestSettingsManager:

    def test_loads_existing_file(self, tmp_path):
        path = tmp_path / "settings.json"
        save_settings(TimerSettings(pomodoro_minutes=45), path)
        assert SettingsManager(path).get().pomodoro_minutes == 45

    def test_update_merges_and_persists(self, tmp_path):
        path = tmp_path / "settings.json"
        manager = SettingsManager(path)
        manager.update(long_break_minutes=20)
        current = manager.get()
        assert current.long_break_minutes == 20
        assert current.pomodoro_minutes == 25
        assert load_settings(path) == current

    def test_update_emits_changed(self, tmp_path):
        manager = SettingsManager(tmp_path / "settings.json")
        c = SignalCollector()
        manager.changed.connect(c)
        manager.update(pomodoro_minutes=30)
        assert c.last.pomodoro_minutes == 30

    def test_noop_update_does_not_emit(self, tmp_path):
        manager = SettingsManager(tmp_path / "settings.json")
        c = SignalCollector()
        manager.changed.connect(c)
        manager.update(pomodoro_minutes=25)
        assert len(c) == 0

    @pytest.mark.parametrize("changes", [
        {"pomodoro_minutes": 0},
        {"short_break_minutes": -5},
        {"long_break_minutes": 2.5},
        {"pomodoro_minutes": True},
        {"auto_start_breaks": 1},
        {"sound_enabled": "off"},
    ])
    def test_invalid_update_rejected(self, tmp_path, changes):
        path = tmp_path / "settings.json"
        manager = SettingsManager(path)
        with pytest.raises(SettingsError):
            manager.update(**changes)
        assert manager.get() == TimerSettings()
        assert not path.exists()

    def test_unknown_key_rejected(self, tmp_path):
        manager = SettingsManager(tmp_path / "settings.json")
        with pytest.raises(SettingsError, match="Unknown settings: volume"):
            manager.update(volume=10)

    def test_settings_error_is_value_error(self, tmp_path):
        manager = SettingsManager(tmp_path / "settings.json")
        with pytest.raises(ValueError):
            manager.update(pomodoro_minutes=-1)

    def test_non_persistent_manager_writes_nothing(self, tmp_path):
        path = tmp_path / "settings.json"
        manager = SettingsManager(path, persist=False)
        manager.update(pomodoro_minutes=10)
        assert manager.get().pomodoro_minutes == 10
        assert not path.exists()

    @pytest.mark.parametrize("mode, seconds", [
        (TimerMode.POMODORO, 25 * 60),
        (TimerMode.SHORT_BREAK, 5 * 60),
        (TimerMode.LONG_BREAK, 15 * 60),
    ])
    def test_duration_seconds(self, tmp_path, mode, seconds):
        manager = SettingsManager(tmp_path / "settings.json")
        assert manager.duration_seconds(mode) == seconds
