"""Parents waiting for a slot with the tutor"""

from typing import List

from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_date, format_datetime, parse_datetime, status_badge
from learnlink.exceptions import ValidationError
from learnlink.models import WaitlistEntry, ref_name
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args


class TutorWaitlistScreen(Screen):
    title = "Waitlist"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.entries: List[WaitlistEntry] = []

    async def load(self) -> None:
        self.entries = await self.api.tutor.waitlist()

    @action("accept", usage="accept <waitlist id> <YYYY-MM-DDTHH:MM>")
    async def accept(self, args: str) -> None:
        """Turn an entry into a booking at the given time"""
        parts = require_args(args, 2, "accept <waitlist id> <YYYY-MM-DDTHH:MM>")
        when = parse_datetime(parts[1])
        if when is None:
            raise ValidationError("Please choose a valid date and time")
        await self.api.tutor.accept_waitlist(parts[0], when.isoformat())
        self.entries = await self.api.tutor.waitlist()
        self.success = "The waitlist entry has been accepted and converted to a booking."

    @action("remove", usage="remove <waitlist id>")
    async def remove(self, args: str) -> None:
        """Remove an entry"""
        entry_id = require_args(args, 1, "remove <waitlist id>")[0]
        if not self.ctx.confirm(
            "Are you sure you want to remove this waitlist entry? This action cannot be undone."
        ):
            return
        self.success = await self.api.tutor.remove_waitlist(entry_id)
        self.entries = [e for e in self.entries if e.id != entry_id]

    def body(self):
        if not self.entries:
            return Text("Nobody is on your waitlist.", style="dim")
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Parent")
        table.add_column("Subject")
        table.add_column("Preferred time")
        table.add_column("Status")
        table.add_column("Joined")
        for e in self.entries:
            table.add_row(e.id, ref_name(e.parent_id, "Parent"), ref_name(e.subject, "Subject"),
                          format_datetime(e.preferred_time), status_badge(e.status), format_date(e.created_at))
        return table
