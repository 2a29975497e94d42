"""File and follow disputes"""

import asyncio
from typing import List

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.components.cards import dispute_card
from learnlink.components.format import format_datetime
from learnlink.exceptions import ValidationError
from learnlink.models import Booking, Dispute, ref_name
from learnlink.roles import Role
from learnlink.screens.admin.disputes import DISPUTE_TYPES
from learnlink.screens.base import FormField, FormScreen, action


class ParentDisputesScreen(FormScreen):
    title = "My Disputes"
    allowed_roles = (Role.PARENT,)
    fields = (
        FormField("bookingId", "Booking"),
        FormField("disputeType", "Type (" + ", ".join(DISPUTE_TYPES) + ")"),
        FormField("title", "Title"),
        FormField("description", "Description"),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.disputes: List[Dispute] = []
        self.bookings: List[Booking] = []

    async def load(self) -> None:
        self.disputes, self.bookings = await asyncio.gather(
            self.api.parent.disputes(),
            self.api.parent.bookings_for_dispute(),
        )

    @action("submit")
    async def submit(self, args: str) -> None:
        """File a dispute about a booking"""
        missing = [name for name in self.field_names() if not self.values.get(name)]
        if missing:
            raise ValidationError("Please fill in all required fields", field=missing[0])
        if self.values["disputeType"] not in DISPUTE_TYPES:
            raise ValidationError("Type must be one of: " + ", ".join(DISPUTE_TYPES), field="disputeType")

        await self.api.parent.create_dispute(
            self.values["bookingId"], self.values["disputeType"],
            self.values["title"], self.values["description"],
        )
        self.values.clear()
        self.disputes = await self.api.parent.disputes()
        self.success = "Your dispute has been created successfully and is under review."

    @action("message", usage="message <dispute id> <text>")
    async def message(self, args: str) -> None:
        """Add a message to a dispute"""
        parts = args.strip().split(maxsplit=1)
        if len(parts) < 2:
            raise ValidationError("Usage: message <dispute id> <text>")
        await self.api.parent.add_dispute_message(parts[0], parts[1])
        self.disputes = await self.api.parent.disputes()
        self.success = "Your message has been sent successfully."

    def body(self):
        bookings = Table(title="Bookings you can dispute", show_header=True, header_style="bold",
                         title_justify="left")
        bookings.add_column("ID", style="dim")
        bookings.add_column("Tutor")
        bookings.add_column("Subject")
        bookings.add_column("When")
        for b in self.bookings:
            bookings.add_row(b.id, ref_name(b.tutor_id, "Tutor"), b.subject_name, format_datetime(b.session_time))

        parts = [Text("New dispute", style="bold underline"), bookings, self.form_table(),
                 Text("Your disputes", style="bold underline")]
        if not self.disputes:
            parts.append(Text("You have not filed any disputes.", style="dim"))
        parts.extend(dispute_card(d) for d in self.disputes)
        return Group(*parts)
