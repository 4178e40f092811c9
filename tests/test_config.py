"""
Unit tests for courses root resolution.

Precedence (first match wins):
- coursesDir preference
- courses_dir in the global config.toml
- <home>/courses
"""

import tempfile
import unittest
from pathlib import Path

from pickcourse.config import (
    SOURCE_CONFIG,
    SOURCE_DEFAULT,
    SOURCE_PREFERENCE,
    expand_tilde,
    global_config_path,
    load_global_config,
    resolve_courses_dir,
    resolve_courses_dir_source,
)


class TestExpandTilde(unittest.TestCase):
    def test_tilde_prefix_uses_home(self) -> None:
        self.assertEqual(expand_tilde("~/x", home="/home/u"), Path("/home/u/x"))

    def test_bare_tilde_is_home(self) -> None:
        self.assertEqual(expand_tilde("~", home="/home/u"), Path("/home/u"))

    def test_other_paths_unchanged(self) -> None:
        self.assertEqual(expand_tilde("/srv/courses", home="/home/u"), Path("/srv/courses"))
        # only "~/" is expanded, not "~user/"
        self.assertEqual(expand_tilde("~bob/x", home="/home/u"), Path("~bob/x"))


class TestResolveCoursesDir(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.home = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write_config(self, text: str) -> Path:
        path = global_config_path(self.home)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def test_global_config_path_location(self) -> None:
        self.assertEqual(global_config_path("/home/u"), Path("/home/u/.config/study/config.toml"))

    def test_preference_tilde_expanded(self) -> None:
        self.assertEqual(resolve_courses_dir("~/x", home="/home/u"), Path("/home/u/x"))

    def test_preference_beats_config(self) -> None:
        self._write_config('courses_dir = "/from/config"\n')
        path, source = resolve_courses_dir_source("/from/pref", home=self.home)
        self.assertEqual(path, Path("/from/pref"))
        self.assertEqual(source, SOURCE_PREFERENCE)

    def test_config_used_without_preference(self) -> None:
        self._write_config('courses_dir = "~/uni"\n')
        path, source = resolve_courses_dir_source(None, home=self.home)
        self.assertEqual(path, self.home / "uni")
        self.assertEqual(source, SOURCE_CONFIG)

    def test_empty_preference_is_ignored(self) -> None:
        self._write_config('courses_dir = "/from/config"\n')
        self.assertEqual(resolve_courses_dir("  ", home=self.home), Path("/from/config"))

    def test_preference_not_stripped(self) -> None:
        # only the emptiness check strips; the value itself is used as given
        self.assertEqual(resolve_courses_dir("/srv/x ", home=self.home), Path("/srv/x "))

    def test_default_without_any_source(self) -> None:
        path, source = resolve_courses_dir_source(None, home=self.home)
        self.assertEqual(path, self.home / "courses")
        self.assertEqual(source, SOURCE_DEFAULT)

    def test_malformed_config_falls_through(self) -> None:
        self._write_config("courses_dir = \n[[[")
        self.assertEqual(resolve_courses_dir(None, home=self.home), self.home / "courses")

    def test_config_without_key_falls_through(self) -> None:
        self._write_config('default_template_dir = "~/.config/study/templates"\n')
        self.assertEqual(resolve_courses_dir(None, home=self.home), self.home / "courses")

    def test_non_string_key_falls_through(self) -> None:
        self._write_config("courses_dir = 42\n")
        self.assertEqual(resolve_courses_dir(None, home=self.home), self.home / "courses")

    def test_explicit_config_path(self) -> None:
        other = self.home / "elsewhere.toml"
        other.write_text('courses_dir = "/explicit"\n', encoding="utf-8")
        self.assertEqual(resolve_courses_dir(None, config_path=other, home=self.home), Path("/explicit"))

    def test_load_global_config_missing_file(self) -> None:
        self.assertEqual(load_global_config(self.home / "nope.toml"), {})


if __name__ == "__main__":
    unittest.main()
