from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pickcourse.launch import HostActions
from pickcourse.model import Course
from pickcourse.scan import group_by_faculty
from pickcourse.storage import load_study_state


class Picker:
    """
    Terminal version of the course picker panel: a numbered list of courses,
    one section per faculty, and an action menu for the chosen course.
    """

    def __init__(
        self,
        load_courses: Callable[[], list[Course]],
        actions: HostActions,
        console: Optional[Console] = None,
        prompt_fn: Optional[Callable[[str], str]] = None,
        state_path: Optional[Path] = None,
    ) -> None:
        self.load_courses = load_courses
        self.actions = actions
        self.console = console or Console()
        self._prompt_fn = prompt_fn
        self.state_path = state_path
        self.courses: list[Course] = []

    def _println(self, msg: str = "") -> None:
        self.console.print(msg)

    def _prompt(self, msg: str) -> str:
        if self._prompt_fn is not None:
            return self._prompt_fn(msg)
        return self.console.input(escape(msg))

    def reload(self) -> None:
        self.courses = self.load_courses()

    def _filter(self, query: str) -> list[Course]:
        q = query.lower()
        out: list[Course] = []
        for c in self.courses:
            hay = f"{c.faculty} {c.code} {c.name or ''}".lower()
            if q in hay:
                out.append(c)
        return out

    def render(self, courses: list[Course], title: str = "Courses") -> list[Course]:
        """
        Print the table and return the courses in the numbered order shown.
        """
        last = load_study_state(self.state_path).last_course

        table = Table(title=title, box=box.SIMPLE)
        table.add_column("#", justify="right")
        table.add_column("Course")
        table.add_column("Path", style="dim")

        numbered: list[Course] = []
        for faculty, faculty_courses in group_by_faculty(courses).items():
            table.add_row("", f"[bold magenta]{escape(faculty.upper())}[/]", "")
            for c in faculty_courses:
                numbered.append(c)
                label = f"[bold cyan]{escape(c.code)}[/]"
                if c.name:
                    label += f" {escape(c.name)}"
                if last and c.code == last:
                    label += " [yellow](last)[/]"
                table.add_row(str(len(numbered)), label, escape(str(c.path)))
            table.add_section()

        self.console.print(table)
        return numbered

    def run(self) -> None:
        """
        Main loop. Blank input exits.
        """
        self.reload()
        shown = self.courses
        title = "Courses"

        while True:
            if not self.courses:
                self._println("No courses found.")
                numbered: list[Course] = []
            else:
                numbered = self.render(shown, title=title)

            choice = self._prompt("Number or search text [r = rescan, blank = exit]: ").strip()

            if not choice:
                self._println("Bye.")
                return

            if choice.lower() == "r":
                self.reload()
                shown, title = self.courses, "Courses"
                continue

            if not choice.isdigit():
                matches = self._filter(choice)
                if not matches:
                    self._println("No results.")
                    shown, title = self.courses, "Courses"
                else:
                    shown, title = matches, f"Search: {escape(choice)}"
                continue

            i = int(choice)
            if not (1 <= i <= len(numbered)):
                self._println("Out of range.")
                continue

            self._flow_actions(numbered[i - 1])
            shown, title = self.courses, "Courses"

    def _flow_actions(self, course: Course) -> None:
        self._println(f"\n[bold cyan]{escape(course.label)}[/] ({escape(str(course.path))})")
        action = self._prompt("[o] Open directory  [s] Study  [c] Copy path  [blank = back]: ").strip().lower()

        if action == "o":
            if not self.actions.open_path(course.path):
                self._println("Could not open directory.")
        elif action == "s":
            # Fire-and-forget: the picker does not wait for `study`.
            self.actions.study(course.code)
            self._println(f"Started study for {escape(course.code)}.")
        elif action == "c":
            if self.actions.copy(str(course.path)):
                self._println("Path copied.")
            else:
                self._println(f"Could not copy. Path: {escape(str(course.path))}")
        elif action:
            self._println("Invalid choice.")


def run_interactive(
    load_courses: Callable[[], list[Course]],
    actions: Optional[HostActions] = None,
    state_path: Optional[Path] = None,
) -> None:
    Picker(load_courses, actions or HostActions(), state_path=state_path).run()
