"""
Central data model definitions used across the project.

This module defines the canonical structure of Course objects and the
per-directory scan results so that:
- the scanner, the CLI and the interactive picker share the same field names
- "skipped, and why" is a value that can be inspected instead of a silent drop
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Course:
    """
    Represents one course directory: <root>/<faculty>/<dir>/course.toml.

    `path` is absolute and identifies the course. `code` is the display key
    but is not guaranteed to be unique across faculties.
    """

    faculty: str
    code: str
    name: Optional[str]
    path: Path

    @property
    def label(self) -> str:
        return f"{self.code} {self.name}" if self.name else self.code


@dataclass(frozen=True)
class CourseDescriptor:
    """
    The [course] table of a course.toml file.
    """

    code: str
    name: Optional[str] = None


@dataclass(frozen=True)
class ScanOutcome:
    """
    Result of looking at one directory during a scan.

    Exactly one of `course` / `reason` is set.
    """

    path: Path
    course: Optional[Course] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.course is not None


@dataclass(frozen=True)
class StudyState:
    """
    The parts of the `study` tool's state.toml we read.
    """

    last_course: Optional[str] = None
