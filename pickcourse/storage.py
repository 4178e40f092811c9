"""
Persistent user settings for the picker, and the `study` tool's state.

This module manages the files:

    ~/.config/study/pick-course.json   (ours, read/write)
    ~/.config/study/state.toml         (written by `study`, read only here)

Design rationale:
- pick-course.json is the settings mechanism of this host; it stores the
  `coursesDir` preference which overrides the global config.toml
- state.toml belongs to the `study` tool; we only read `last_course`
  so the picker can mark the course studied last
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pickcourse.config import study_config_dir
from pickcourse.model import StudyState

PREF_COURSES_DIR = "coursesDir"


def _default_preferences_path() -> Path:
    """
    Return the default path of pick-course.json.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    return study_config_dir() / "pick-course.json"


def _default_state_path() -> Path:
    return study_config_dir() / "state.toml"


def load_preferences(path: str | Path | None = None) -> dict[str, Any]:
    """
    Load preferences from pick-course.json.

    Returns an empty dict if the file does not exist or is invalid.

    This function is deliberately defensive:
    it never crashes the application if the file is missing or corrupted.
    """
    prefs_path = Path(path) if path is not None else _default_preferences_path()

    # First run: file does not exist yet → no preferences
    if not prefs_path.exists():
        return {}

    try:
        data = json.loads(prefs_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def save_preferences(prefs: Mapping[str, Any], path: str | Path | None = None) -> None:
    """
    Save preferences to pick-course.json.

    Creates parent directories if needed. Empty string values are dropped
    so that "unset" and "empty" mean the same thing on the next load.
    """
    prefs_path = Path(path) if path is not None else _default_preferences_path()
    prefs_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {k: v for k, v in prefs.items() if not (isinstance(v, str) and not v.strip())}

    prefs_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True), encoding="utf-8")


def load_courses_dir_preference(path: str | Path | None = None) -> str | None:
    value = load_preferences(path).get(PREF_COURSES_DIR)
    if isinstance(value, str) and value.strip():
        return value
    return None


def load_study_state(path: str | Path | None = None) -> StudyState:
    """
    Read `last_course` from the study tool's state.toml.

    Missing or broken files give an empty StudyState.
    """
    state_path = Path(path) if path is not None else _default_state_path()
    try:
        data = tomllib.loads(state_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return StudyState()

    last = data.get("last_course")
    return StudyState(last_course=last if isinstance(last, str) and last else None)
