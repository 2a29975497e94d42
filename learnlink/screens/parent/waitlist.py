"""The parent's waitlist entries"""

from typing import List

from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_date, format_datetime, status_badge
from learnlink.models import WaitlistEntry, ref_name
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args


class ParentWaitlistScreen(Screen):
    title = "My Waitlist"
    allowed_roles = (Role.PARENT,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.entries: List[WaitlistEntry] = []

    async def load(self) -> None:
        self.entries = await self.api.parent.waitlist()

    @action("cancel", usage="cancel <waitlist id>")
    async def cancel(self, args: str) -> None:
        """Leave a tutor's waitlist"""
        entry_id = require_args(args, 1, "cancel <waitlist id>")[0]
        if not self.ctx.confirm(
            "Are you sure you want to cancel this waitlist entry? This action cannot be undone."
        ):
            return
        await self.api.parent.cancel_waitlist(entry_id)
        self.entries = [e for e in self.entries if e.id != entry_id]
        self.success = "Your waitlist entry has been cancelled successfully."

    def body(self):
        if not self.entries:
            return Text("You are not on any waitlists.", style="dim")
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Tutor")
        table.add_column("Subject")
        table.add_column("Preferred time")
        table.add_column("Status")
        table.add_column("Joined")
        for e in self.entries:
            table.add_row(e.id, ref_name(e.tutor_id, "Tutor"), ref_name(e.subject, "Subject"),
                          format_datetime(e.preferred_time), status_badge(e.status), format_date(e.created_at))
        return table
