"""Tests for JSON-persisted settings."""

import json

import pytest

from timerwidget.settings import Settings, load_settings, save_settings


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr("timerwidget.settings.SETTINGS_PATH", path)
    return path


class TestSettingsDefaults:

    def test_defaults(self):
        s = Settings()
        assert s.always_on_top is True
        assert s.window_x is None
        assert s.window_y is None
        assert s.db_path is None
        assert s.log_level == "INFO"


class TestSettingsPersistence:

    def test_missing_file_gives_defaults(self, settings_path):
        assert load_settings() == Settings()

    def test_round_trip(self, settings_path):
        save_settings(Settings(always_on_top=False, window_x=10, window_y=20, log_level="DEBUG"))
        loaded = load_settings()
        assert loaded.always_on_top is False
        assert (loaded.window_x, loaded.window_y) == (10, 20)
        assert loaded.log_level == "DEBUG"

    def test_unknown_keys_ignored(self, settings_path):
        settings_path.write_text(json.dumps({"window_x": 5, "theme": "neon"}))
        loaded = load_settings()
        assert loaded.window_x == 5

    def test_corrupt_file_gives_defaults(self, settings_path):
        settings_path.write_text("{oops")
        assert load_settings() == Settings()

    def test_non_object_gives_defaults(self, settings_path):
        settings_path.write_text("[1, 2]")
        assert load_settings() == Settings()

    def test_bad_log_level_falls_back(self, settings_path):
        settings_path.write_text(json.dumps({"log_level": "LOUD"}))
        assert load_settings().log_level == "INFO"

    def test_save_creates_directory(self, tmp_path, monkeypatch):
        path = tmp_path / "nested" / "settings.json"
        monkeypatch.setattr("timerwidget.settings.SETTINGS_PATH", path)
        save_settings(Settings())
        assert path.exists()
