"""
Small key-value preference store used to keep the high score between runs.

Values live in a JSON object on disk. Storage problems never reach the
game: an unreadable file reads as empty and a failed write keeps the value
in memory only. Both cases are logged.
"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

PREFS_ENV_VAR = "SNAKE_PREFS_PATH"
DEFAULT_PREFS_FILE = Path.home() / ".snake_game_prefs.json"
HIGH_SCORE_KEY = "high_score"


def default_prefs_path():
    """Resolve the preference file, honouring the SNAKE_PREFS_PATH override."""
    override = os.environ.get(PREFS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_PREFS_FILE


class MemoryPreferences:
    """In-memory store; also the base for the file-backed one."""

    def __init__(self, values=None):
        self._values = dict(values or {})

    def get(self, key, default=None):
        return self._values.get(key, default)

    def set(self, key, value):
        self._values[key] = value
        self.save()

    def get_int(self, key, default=0):
        value = self._values.get(key, default)
        # bool is an int subclass but never a valid stored score
        if isinstance(value, bool) or not isinstance(value, int):
            return default
        return value

    def put_int(self, key, value):
        self.set(key, int(value))

    def save(self):
        """Nothing to persist for the in-memory store."""


class Preferences(MemoryPreferences):
    """JSON-file backed store. Every write is flushed immediately."""

    def __init__(self, path=None):
        self.path = Path(path) if path is not None else default_prefs_path()
        super().__init__(self._load())

    def _load(self):
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read preferences from %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences in %s: expected a JSON object", self.path)
            return {}
        return data

    def save(self):
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._values, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning("Could not write preferences to %s: %s", self.path, exc)
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
            return
        logger.debug("Saved preferences to %s", self.path)
