"""Everyone the tutor has had bookings with"""

from typing import List

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_datetime, status_badge
from learnlink.exceptions import ValidationError
from learnlink.models import Student
from learnlink.roles import Role
from learnlink.screens.base import Screen, action

STATUS_FILTERS = ("all", "requested", "confirmed", "completed")


def latest_status(student: Student) -> str:
    return student.latest_booking.status if student.latest_booking else ""


def filter_students(students: List[Student], status: str = "all", search: str = "") -> List[Student]:
    term = search.lower()

    def matches(s: Student) -> bool:
        if status != "all" and latest_status(s) != status:
            return False
        if not term:
            return True
        return any(term in (value or "").lower() for value in (s.parent_name, s.child_name, s.subject))

    return [s for s in students if matches(s)]


class TutorStudentsScreen(Screen):
    title = "My Students"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.students: List[Student] = []
        self.status = "all"
        self.search = ""

    async def load(self) -> None:
        self.students = await self.api.tutor.students()

    @action("filter", usage="filter <all|requested|confirmed|completed>")
    async def set_filter(self, args: str) -> None:
        """Filter by latest booking status"""
        status = args.strip() or "all"
        if status not in STATUS_FILTERS:
            raise ValidationError("Filter must be one of: " + ", ".join(STATUS_FILTERS))
        self.status = status

    @action("search", usage="search [text]")
    async def set_search(self, args: str) -> None:
        """Search parent name, student name or subject"""
        self.search = args.strip()

    def visible(self) -> List[Student]:
        return filter_students(self.students, self.status, self.search)

    def body(self):
        counts = {s: sum(1 for st in self.students if latest_status(st) == s) for s in STATUS_FILTERS[1:]}
        summary = Text(f"Total {len(self.students)}  " + "  ".join(
            f"{name.title()} {count}" for name, count in counts.items()))

        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("Parent")
        table.add_column("Student")
        table.add_column("Age/Grade")
        table.add_column("Subject")
        table.add_column("Sessions", justify="right")
        table.add_column("Latest")
        table.add_column("Status")
        rows = self.visible()
        for s in rows:
            age = " / ".join(str(v) for v in (s.child_age, s.child_grade) if v)
            latest = format_datetime(s.latest_booking.session_time) if s.latest_booking else ""
            table.add_row(s.parent_name or "", s.child_name or "", age, s.subject or "",
                          str(s.total_sessions), latest, status_badge(latest_status(s)))
        if not rows:
            table.add_row(Text("No students match", style="dim"), "", "", "", "", "", "")

        shown = f"Filter: {self.status}" + (f"  Search: {self.search}" if self.search else "")
        return Group(summary, Text(shown, style="dim"), table)
