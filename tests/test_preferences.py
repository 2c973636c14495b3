"""
Tests for preferences.py - JSON-backed key-value store.
"""

import json
import logging

import preferences
from preferences import (
    HIGH_SCORE_KEY,
    PREFS_ENV_VAR,
    MemoryPreferences,
    Preferences,
    default_prefs_path,
)


class TestMemoryPreferences:
    def test_get_int_default(self):
        assert MemoryPreferences().get_int(HIGH_SCORE_KEY) == 0
        assert MemoryPreferences().get_int(HIGH_SCORE_KEY, 5) == 5

    def test_put_then_get(self):
        prefs = MemoryPreferences()
        prefs.put_int(HIGH_SCORE_KEY, 12)
        assert prefs.get_int(HIGH_SCORE_KEY) == 12

    def test_non_integer_values_fall_back_to_default(self):
        prefs = MemoryPreferences({"a": "12", "b": True, "c": 1.5})
        assert prefs.get_int("a") == 0
        assert prefs.get_int("b") == 0
        assert prefs.get_int("c", 3) == 3
        assert prefs.get("a") == "12"


class TestPreferences:
    def test_missing_file_reads_defaults(self, tmp_path):
        prefs = Preferences(tmp_path / "prefs.json")
        assert prefs.get_int(HIGH_SCORE_KEY) == 0

    def test_value_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "prefs.json"
        Preferences(path).put_int(HIGH_SCORE_KEY, 33)
        assert json.loads(path.read_text(encoding="utf-8")) == {HIGH_SCORE_KEY: 33}
        assert Preferences(path).get_int(HIGH_SCORE_KEY) == 33

    def test_other_keys_are_kept(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({"volume": 3}), encoding="utf-8")
        prefs = Preferences(path)
        prefs.put_int(HIGH_SCORE_KEY, 4)
        assert json.loads(path.read_text(encoding="utf-8")) == {"volume": 3, HIGH_SCORE_KEY: 4}

    def test_corrupt_file_reads_as_empty(self, tmp_path, caplog):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="preferences"):
            prefs = Preferences(path)
        assert prefs.get_int(HIGH_SCORE_KEY) == 0
        assert "Could not read preferences" in caplog.text

    def test_non_object_file_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert Preferences(path).get_int(HIGH_SCORE_KEY) == 0

    def test_failed_write_keeps_value_in_memory(self, tmp_path, caplog):
        # The parent "directory" is a plain file, so the write fails.
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        prefs = Preferences(blocker / "prefs.json")
        with caplog.at_level(logging.WARNING, logger="preferences"):
            prefs.put_int(HIGH_SCORE_KEY, 9)
        assert prefs.get_int(HIGH_SCORE_KEY) == 9
        assert "Could not write preferences" in caplog.text


    def test_failed_replace_removes_temp_file(self, tmp_path, monkeypatch):
        path = tmp_path / "prefs.json"
        prefs = Preferences(path)

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(preferences.os, "replace", fail_replace)
        prefs.put_int(HIGH_SCORE_KEY, 5)
        assert prefs.get_int(HIGH_SCORE_KEY) == 5
        assert not (tmp_path / "prefs.json.tmp").exists()
        assert not path.exists()


class TestDefaultPath:
    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv(PREFS_ENV_VAR, str(tmp_path / "custom.json"))
        assert default_prefs_path() == tmp_path / "custom.json"

    def test_home_default(self, monkeypatch):
        monkeypatch.delenv(PREFS_ENV_VAR, raising=False)
        assert default_prefs_path().name == ".snake_game_prefs.json"
