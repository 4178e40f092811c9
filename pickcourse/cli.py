"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    pick-course list
    pick-course path <course>
    pick-course open <course>
    pick-course copy <course>
    pick-course study <course>
    pick-course skipped
    pick-course config [--set-courses-dir DIR | --unset-courses-dir]
    pick-course interactive

<course> is a course code (case-insensitive), a course name, or
"<faculty>/<directory>".

Note:
- The interactive picker lives in pickcourse/interactive.py
- This CLI prints plain text (no rich formatting) so it can be piped
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from pickcourse.config import resolve_courses_dir_source
from pickcourse.launch import HostActions
from pickcourse.logging_config import setup_logging
from pickcourse.model import Course, ScanOutcome
from pickcourse.scan import find_course, group_by_faculty, scan_courses, scan_outcomes
from pickcourse.storage import (
    PREF_COURSES_DIR,
    load_courses_dir_preference,
    load_preferences,
    load_study_state,
    save_preferences,
)

logger = logging.getLogger(__name__)


def _courses_root(args: argparse.Namespace) -> tuple[Path, str]:
    """
    Resolve the courses root for this invocation.

    --courses-dir beats the stored preference; both count as "preference".
    """
    preference = args.courses_dir or load_courses_dir_preference(args.prefs)
    return resolve_courses_dir_source(preference, config_path=args.config)


def _lookup(args: argparse.Namespace, courses: list[Course]) -> Optional[Course]:
    query = (args.course or "").strip()
    if not query:
        print("Please provide a course.")
        return None

    course = find_course(courses, query)
    if course is None:
        print(f"Course not found: {query}")
        return None

    # Codes are only unique within a faculty.
    same_code = [c for c in courses if c.code.lower() == query.lower()]
    if len(same_code) > 1:
        others = ", ".join(f"{c.faculty}/{c.path.name}" for c in same_code if c is not course)
        print(
            f"Note: {len(same_code)} courses use code {course.code}; using {course.faculty}/{course.path.name}.",
            file=sys.stderr,
        )
        print(f"Pass <faculty>/<dir> to pick another: {others}", file=sys.stderr)
    return course


def _cmd_list(args: argparse.Namespace, courses: list[Course]) -> int:
    """
    Print courses grouped by faculty.
    """
    if not courses:
        root, _source = _courses_root(args)
        print(f"No courses found under {root}")
        return 0

    last = load_study_state(args.state).last_course

    for faculty, faculty_courses in group_by_faculty(courses).items():
        print(faculty.upper())
        for c in faculty_courses:
            marker = "*" if last and c.code == last else " "
            print(f" {marker} {c.label} | {c.path}")

    return 0


def _cmd_path(args: argparse.Namespace, courses: list[Course]) -> int:
    course = _lookup(args, courses)
    if course is None:
        return 1
    print(course.path)
    return 0


def _cmd_open(args: argparse.Namespace, courses: list[Course], actions: HostActions) -> int:
    course = _lookup(args, courses)
    if course is None:
        return 1
    if not actions.open_path(course.path):
        print(f"Could not open {course.path}")
        return 1
    return 0


def _cmd_copy(args: argparse.Namespace, courses: list[Course], actions: HostActions) -> int:
    course = _lookup(args, courses)
    if course is None:
        return 1
    if not actions.copy(str(course.path)):
        print(f"Could not copy to clipboard. Path: {course.path}")
        return 1
    print(f"Copied: {course.path}")
    return 0


def _cmd_study(args: argparse.Namespace, courses: list[Course], actions: HostActions) -> int:
    """
    Start `study <code>`.

    A launch failure is logged by the task itself and does not change the exit code.
    """
    course = _lookup(args, courses)
    if course is None:
        return 1

    print(f"Starting study for {course.label}...")
    task = actions.study(course.code)
    # The process is about to exit; let the launch finish first.
    if task is not None:
        task.join()
    return 0


def _cmd_skipped(args: argparse.Namespace) -> int:
    """
    Print every directory the scan skipped, with the reason.
    """
    root, _source = _courses_root(args)
    skipped: list[ScanOutcome] = [o for o in scan_outcomes(root) if not o.ok]
    if not skipped:
        print("No skipped directories.")
        return 0

    print(f"Skipped directories: {len(skipped)}")
    for o in skipped:
        print(f"- {o.path}: {o.reason}")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    """
    Show (or change) where the courses root comes from.
    """
    if args.set_courses_dir is not None or args.unset_courses_dir:
        prefs = load_preferences(args.prefs)
        if args.unset_courses_dir:
            prefs.pop(PREF_COURSES_DIR, None)
        else:
            prefs[PREF_COURSES_DIR] = args.set_courses_dir
        save_preferences(prefs, args.prefs)

    root, source = _courses_root(args)
    print(f"courses_dir: {root} (from {source})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="pick-course", description="Pick a course and open or study it")
    parser.add_argument("--courses-dir", type=str, default=None, help="Courses root (overrides all settings)")
    parser.add_argument("--config", type=Path, default=None, help="Global config.toml to read courses_dir from")
    parser.add_argument("--prefs", type=Path, default=None, help="Preferences file (default: pick-course.json)")
    parser.add_argument("--state", type=Path, default=None, help="study state.toml (default: ~/.config/study)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped directories and launches")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List courses grouped by faculty")

    for name, help_text in (
        ("path", "Print the directory of a course"),
        ("open", "Open the directory of a course"),
        ("copy", "Copy the directory of a course to the clipboard"),
        ("study", "Run `study <code>` for a course"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("course", type=str, help="Course code, name or faculty/dir (e.g. CS101 or cs/101; faculty/dir is unambiguous)")

    sub.add_parser("skipped", help="Show directories without a usable course.toml")

    p_config = sub.add_parser("config", help="Show the resolved courses root")
    group = p_config.add_mutually_exclusive_group()
    group.add_argument("--set-courses-dir", type=str, default=None, help="Store the coursesDir preference")
    group.add_argument("--unset-courses-dir", action="store_true", help="Remove the coursesDir preference")

    sub.add_parser("interactive", help="Interactive picker")

    return parser


def main(argv: list[str] | None = None, actions: HostActions | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    actions = actions or HostActions()

    if args.command == "skipped":
        raise SystemExit(_cmd_skipped(args))
    if args.command == "config":
        raise SystemExit(_cmd_config(args))

    root, source = _courses_root(args)
    logger.debug("Courses root %s (from %s)", root, source)
    courses = scan_courses(root)

    if args.command == "list":
        raise SystemExit(_cmd_list(args, courses))
    if args.command == "path":
        raise SystemExit(_cmd_path(args, courses))
    if args.command == "open":
        raise SystemExit(_cmd_open(args, courses, actions))
    if args.command == "copy":
        raise SystemExit(_cmd_copy(args, courses, actions))
    if args.command == "study":
        raise SystemExit(_cmd_study(args, courses, actions))

    if args.command == "interactive":
        from pickcourse.interactive import run_interactive

        run_interactive(
            lambda: scan_courses(_courses_root(args)[0]),
            actions=actions,
            state_path=args.state,
        )
        raise SystemExit(0)

    raise SystemExit(2)
