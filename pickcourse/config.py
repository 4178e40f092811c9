"""
Courses root resolution.

The courses root is recomputed on every invocation from (first match wins):

    1. the user preference `coursesDir` (CLI flag or pick-course.json)
    2. `courses_dir` in ~/.config/study/config.toml
    3. ~/courses

Every source is optional; a missing or broken source is skipped silently.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

SOURCE_PREFERENCE = "preference"
SOURCE_CONFIG = "config"
SOURCE_DEFAULT = "default"


def _home(home: str | Path | None) -> Path:
    return Path(home) if home is not None else Path.home()


def study_config_dir(home: str | Path | None = None) -> Path:
    """
    Return ~/.config/study, the directory shared with the `study` tool.
    """
    return _home(home) / ".config" / "study"


def global_config_path(home: str | Path | None = None) -> Path:
    return study_config_dir(home) / "config.toml"


def expand_tilde(value: str, home: str | Path | None = None) -> Path:
    """
    Replace a leading "~/" (or a bare "~") with the home directory.

    "~user/..." forms are left alone.
    """
    if value == "~":
        return _home(home)
    if value.startswith("~/"):
        return _home(home) / value[2:]
    return Path(value)


def load_global_config(path: str | Path) -> dict[str, Any]:
    """
    Load the global TOML config.

    Returns {} if the file is missing, unreadable or not valid TOML.
    """
    try:
        return tomllib.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.debug("Ignoring global config %s: %s", path, e)
        return {}


def _non_empty(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def resolve_courses_dir_source(
    preference: Optional[str] = None,
    config_path: str | Path | None = None,
    home: str | Path | None = None,
) -> tuple[Path, str]:
    """
    Resolve the courses root and report which source it came from
    (SOURCE_PREFERENCE, SOURCE_CONFIG or SOURCE_DEFAULT).
    """
    pref = _non_empty(preference)
    if pref:
        return expand_tilde(pref, home).absolute(), SOURCE_PREFERENCE

    cfg_path = Path(config_path) if config_path is not None else global_config_path(home)
    configured = _non_empty(load_global_config(cfg_path).get("courses_dir"))
    if configured:
        return expand_tilde(configured, home).absolute(), SOURCE_CONFIG

    return (_home(home) / "courses").absolute(), SOURCE_DEFAULT


def resolve_courses_dir(
    preference: Optional[str] = None,
    config_path: str | Path | None = None,
    home: str | Path | None = None,
) -> Path:
    """
    Return the absolute courses root. Never raises.

    `config_path` and `home` exist so tests (and callers with their own
    settings layout) can replace the default ~/.config/study/config.toml.
    """
    path, _source = resolve_courses_dir_source(preference, config_path=config_path, home=home)
    return path
