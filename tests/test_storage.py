"""
Unit tests for the preferences file and the study state reader.

Storage contract:
- Missing/invalid file -> empty preferences / empty state
- Empty string values are not persisted
"""

import json
import tempfile
import unittest
from pathlib import Path

from pickcourse.storage import (
    PREF_COURSES_DIR,
    load_courses_dir_preference,
    load_preferences,
    load_study_state,
    save_preferences,
)


class TestPreferences(unittest.TestCase):
    def test_load_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "missing.json"
            self.assertEqual(load_preferences(p), {})
            self.assertIsNone(load_courses_dir_preference(p))

    def test_load_invalid_json_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "prefs.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_preferences(p), {})

            p.write_text('["a list"]', encoding="utf-8")
            self.assertEqual(load_preferences(p), {})

    def test_save_and_load_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "pick-course.json"
            save_preferences({PREF_COURSES_DIR: "~/uni"}, p)

            self.assertEqual(load_courses_dir_preference(p), "~/uni")
            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(data, {"coursesDir": "~/uni"})

    def test_empty_value_is_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "pick-course.json"
            save_preferences({PREF_COURSES_DIR: "  "}, p)
            self.assertEqual(load_preferences(p), {})
            self.assertIsNone(load_courses_dir_preference(p))


class TestStudyState(unittest.TestCase):
    def test_last_course_read(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "state.toml"
            p.write_text('last_course = "CS101"\n\n[last_exercises]\nCS101 = "hw1"\n', encoding="utf-8")
            self.assertEqual(load_study_state(p).last_course, "CS101")

    def test_missing_or_broken_state(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "state.toml"
            self.assertIsNone(load_study_state(p).last_course)
            p.write_text("last_course = ", encoding="utf-8")
            self.assertIsNone(load_study_state(p).last_course)


if __name__ == "__main__":
    unittest.main()
