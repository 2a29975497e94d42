"""Book a session with a tutor"""

from datetime import datetime
from typing import Any, Iterable, List, Optional

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_datetime, money, parse_datetime
from learnlink.exceptions import ValidationError
from learnlink.models import TutorSubject, User
from learnlink.roles import Role
from learnlink.screens.base import FormField, FormScreen, action

SLOT_TAKEN = "This time slot is already booked. Please choose another time."


def busy_slots(entries: Iterable[Any]) -> List[datetime]:
    """Busy entries may be bare timestamps or objects carrying sessionTime"""
    slots = []
    for entry in entries:
        value = entry.get("sessionTime") if isinstance(entry, dict) else entry
        parsed = parse_datetime(value) if isinstance(value, str) else None
        if parsed is not None:
            slots.append(parsed)
    return slots


def same_minute(a: datetime, b: datetime) -> bool:
    if (a.tzinfo is None) != (b.tzinfo is None):
        a, b = a.replace(tzinfo=None), b.replace(tzinfo=None)
    return a.replace(second=0, microsecond=0) == b.replace(second=0, microsecond=0)


class ParentBookSessionScreen(FormScreen):
    title = "Book a Session"
    allowed_roles = (Role.PARENT,)
    fields = (
        FormField("sessionTime", "Date and time (YYYY-MM-DDTHH:MM)"),
        FormField("notes", "Notes for the tutor"),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tutor: Optional[User] = None
        if self.query.get("datetime"):
            self.values["sessionTime"] = self.query["datetime"]

    @property
    def tutor_id(self) -> str:
        return self.params.get("tutorId", "")

    @property
    def subject_id(self) -> str:
        return self.params.get("subjectId", "")

    @property
    def entry(self) -> Optional[TutorSubject]:
        if self.tutor is None:
            return None
        return next((s for s in self.tutor.subjects if s.subject_id == self.subject_id), None)

    async def load(self) -> None:
        if not self.tutor_id:
            raise ValidationError("No Tutor ID provided.")
        self.tutor = await self.api.parent.tutor(self.tutor_id)

    def busy(self) -> List[datetime]:
        return busy_slots(self.ctx.navbar.busy_times_for(self.tutor_id))

    @action("submit")
    async def submit(self, args: str) -> None:
        """Request the session"""
        if not self.tutor_id:
            raise ValidationError("No Tutor ID provided.")
        raw = self.values.get("sessionTime", "")
        when = parse_datetime(raw)
        if when is None:
            raise ValidationError("Please choose a valid date and time", field="sessionTime")
        if any(same_minute(when, slot) for slot in self.busy()):
            raise ValidationError(SLOT_TAKEN, field="sessionTime")

        self.success = await self.api.parent.book_session(
            self.tutor_id, when.isoformat(), self.subject_id, self.values.get("notes", "")
        )
        self.go("/parent/bookings")

    def body(self):
        parts: List[Any] = []
        if self.tutor is not None:
            entry = self.entry
            subject = entry.subject_name if entry else "Subject"
            rate = f" at {money(entry.hourly_rate)}/hr" if entry else ""
            parts.append(Text(f"{self.tutor.display_name}: {subject}{rate}", style="bold"))

        busy = self.busy()
        if busy:
            table = Table(title="Already booked", show_header=False, box=None, title_justify="left")
            table.add_column(style="red")
            for slot in sorted(busy):
                table.add_row(format_datetime(slot.isoformat()))
            parts.append(table)

        parts.append(self.form_table())
        parts.append(Text("set sessionTime 2025-01-31T16:00, then submit", style="dim"))
        return Group(*parts)
