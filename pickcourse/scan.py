"""
Course discovery (directory tree -> Course records).

- Walks <root>/<faculty>/<course-dir>/ (exactly two levels)
- Reads <course-dir>/course.toml and takes [course] code / name
- Produces a flat list of Course records, grouped by faculty for display

Important rules:
- A broken or missing course.toml never raises; the directory is skipped
- Result order is the order of the directory listing. It is NOT sorted and
  depends on the filesystem, so it may differ between platforms
- No caching: every call reads the disk again
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from pickcourse.config import resolve_courses_dir
from pickcourse.model import Course, CourseDescriptor, ScanOutcome
from pickcourse.storage import load_courses_dir_preference

logger = logging.getLogger(__name__)

COURSE_CONFIG_FILENAME = "course.toml"


class DescriptorError(ValueError):
    """
    Raised when a course.toml cannot be used. The message is the skip reason.
    """


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _subdirs(directory: Path) -> list[str]:
    """
    Names of the immediate subdirectories of `directory`.

    Files are ignored and symlinks are not followed.
    Raises OSError if the directory cannot be listed.
    """
    with os.scandir(directory) as it:
        return [e.name for e in it if e.is_dir(follow_symlinks=False)]


# ---------------------------------------------------------------------------
# Descriptor parsing
# ---------------------------------------------------------------------------


def parse_descriptor(text: str) -> CourseDescriptor:
    """
    Parse the text of a course.toml into a CourseDescriptor.

    Only the [course] table is looked at; any other keys are ignored.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise DescriptorError(f"invalid TOML: {e}") from e

    course = data.get("course")
    if not isinstance(course, dict):
        raise DescriptorError("missing [course] section")

    code = course.get("code")
    if code is None:
        raise DescriptorError("missing course.code")
    if not isinstance(code, str) or not code.strip():
        raise DescriptorError("course.code must be a non-empty string")

    name = course.get("name")
    if not isinstance(name, str):
        name = None

    return CourseDescriptor(code=code, name=name)


def load_descriptor(course_dir: str | Path) -> CourseDescriptor:
    """
    Read and parse <course_dir>/course.toml.
    """
    path = Path(course_dir) / COURSE_CONFIG_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DescriptorError(f"missing {COURSE_CONFIG_FILENAME}") from e
    except UnicodeDecodeError as e:
        raise DescriptorError(f"{COURSE_CONFIG_FILENAME} is not UTF-8") from e
    except OSError as e:
        raise DescriptorError(f"unreadable {COURSE_CONFIG_FILENAME}: {e.strerror or e}") from e

    return parse_descriptor(text)


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def scan_outcomes(root: str | Path) -> Iterator[ScanOutcome]:
    """
    Yield one ScanOutcome per candidate course directory under `root`.

    Root or faculty directories that cannot be listed produce a single
    failed outcome for that directory and nothing below it.
    """
    root_path = Path(root).absolute()

    try:
        faculties = _subdirs(root_path)
    except OSError as e:
        yield ScanOutcome(path=root_path, reason=f"cannot list directory: {e.strerror or e}")
        return

    for faculty in faculties:
        faculty_path = root_path / faculty
        try:
            entries = _subdirs(faculty_path)
        except OSError as e:
            yield ScanOutcome(path=faculty_path, reason=f"cannot list directory: {e.strerror or e}")
            continue

        for entry in entries:
            course_path = faculty_path / entry
            try:
                descriptor = load_descriptor(course_path)
            except DescriptorError as e:
                yield ScanOutcome(path=course_path, reason=str(e))
                continue

            course = Course(
                faculty=faculty,
                code=descriptor.code,
                name=descriptor.name,
                path=course_path,
            )
            yield ScanOutcome(path=course_path, course=course)


def scan_courses(
    root: str | Path | None = None,
    on_skip: Optional[Callable[[ScanOutcome], None]] = None,
) -> list[Course]:
    """
    Return all courses under `root` in traversal order. Never raises
    for filesystem or descriptor problems.

    Without `root` the courses root is resolved from the stored
    preference, the global config and the default, in that order.

    Skipped directories are silent unless `on_skip` is given; they are
    also logged at DEBUG level.
    """
    if root is None:
        root = resolve_courses_dir(load_courses_dir_preference())

    courses: list[Course] = []
    for outcome in scan_outcomes(root):
        if outcome.course is not None:
            courses.append(outcome.course)
            continue
        logger.debug("Skipping %s: %s", outcome.path, outcome.reason)
        if on_skip is not None:
            on_skip(outcome)
    return courses


# ---------------------------------------------------------------------------
# Grouping & lookup
# ---------------------------------------------------------------------------


def group_by_faculty(courses: Iterable[Course]) -> dict[str, list[Course]]:
    """
    faculty -> courses, keeping first-seen faculty order and the
    order of courses within each faculty.
    """
    groups: dict[str, list[Course]] = {}
    for course in courses:
        groups.setdefault(course.faculty, []).append(course)
    return groups


def flatten(groups: dict[str, list[Course]]) -> list[Course]:
    """
    Inverse of group_by_faculty (faculty order, then insertion order).
    """
    out: list[Course] = []
    for faculty_courses in groups.values():
        out.extend(faculty_courses)
    return out


def find_course(courses: Iterable[Course], query: str) -> Optional[Course]:
    """
    Find a course by code (case-insensitive), then by exact name,
    then by "<faculty>/<directory name>".
    """
    q = (query or "").strip()
    if not q:
        return None

    candidates = list(courses)

    for c in candidates:
        if c.code.lower() == q.lower():
            return c
    for c in candidates:
        if c.name is not None and c.name == q:
            return c
    for c in candidates:
        if f"{c.faculty}/{c.path.name}" == q.strip("/"):
            return c
    return None
