"""Weekly availability"""

import re
from typing import Dict, List

from rich.table import Table
from rich.console import Group
from rich.text import Text

from learnlink.exceptions import ValidationError
from learnlink.models import AvailabilitySlot
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args

DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class DaySlot:
    def __init__(self, day: str, start_time: str = "", end_time: str = "", available: bool = False):
        self.day = day
        self.start_time = start_time
        self.end_time = end_time
        self.available = available

    @property
    def complete(self) -> bool:
        return self.available and bool(self.start_time) and bool(self.end_time)


def slots_to_send(days: Dict[str, DaySlot]) -> List[AvailabilitySlot]:
    """Only days switched on with both times set"""
    return [
        AvailabilitySlot(day=d.day, start_time=d.start_time, end_time=d.end_time)
        for d in (days[name] for name in DAYS)
        if d.complete
    ]


class TutorAvailabilityScreen(Screen):
    title = "Availability"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.days: Dict[str, DaySlot] = {day: DaySlot(day) for day in DAYS}

    async def load(self) -> None:
        profile = await self.api.tutor.profile()
        self.days = {day: DaySlot(day) for day in DAYS}
        for slot in profile.availability:
            day = slot.day.lower()
            if day in self.days:
                self.days[day] = DaySlot(day, slot.start_time or "", slot.end_time or "", available=True)

    def day(self, name: str) -> DaySlot:
        name = name.lower()
        if name not in self.days:
            raise ValidationError("Day must be one of: " + ", ".join(DAYS))
        return self.days[name]

    @action("set", usage="set <day> <HH:MM> <HH:MM>")
    async def set_day(self, args: str) -> None:
        """Make a day available between two times"""
        parts = require_args(args, 3, "set <day> <HH:MM> <HH:MM>")
        slot = self.day(parts[0])
        for value in parts[1:3]:
            if not TIME.match(value):
                raise ValidationError(f"Invalid time '{value}', use HH:MM")
        slot.start_time, slot.end_time, slot.available = parts[1], parts[2], True

    @action("off", usage="off <day>")
    async def day_off(self, args: str) -> None:
        """Mark a day unavailable"""
        slot = self.day(require_args(args, 1, "off <day>")[0])
        slot.available = False
        slot.start_time = slot.end_time = ""

    @action("save")
    async def save(self, args: str) -> None:
        """Save the week"""
        self.success = await self.api.tutor.save_availability(slots_to_send(self.days))

    def body(self):
        table = Table(show_header=True, header_style="bold")
        table.add_column("Day")
        table.add_column("Available")
        table.add_column("From")
        table.add_column("To")
        for name in DAYS:
            d = self.days[name]
            table.add_row(name.title(), Text("yes", style="green") if d.available else Text("no", style="dim"),
                          d.start_time, d.end_time)
        hint = Text("set <day> <HH:MM> <HH:MM>, off <day>, then save", style="dim")
        return Group(table, hint)
