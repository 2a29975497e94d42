"""Confirmed sessions and booking requests"""

from typing import List

from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_datetime, status_badge
from learnlink.exceptions import ValidationError
from learnlink.models import Booking, ref_id, ref_name
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args

RESCHEDULE_MESSAGE = (
    "Hi! I would like to reschedule our session. Could you please suggest an "
    "alternative time and date for our {subject} session?"
)


def bookings_table(bookings: List[Booking], empty: str) -> Table:
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Parent")
    table.add_column("Student")
    table.add_column("Subject")
    table.add_column("When")
    table.add_column("Status")
    table.add_column("Notes", style="dim")
    for b in bookings:
        child = getattr(b.parent_id, "child_name", None) or ""
        table.add_row(b.id, ref_name(b.parent_id, "Parent"), child, b.subject_name,
                      format_datetime(b.session_time), status_badge(b.status), b.notes or "")
    if not bookings:
        table.add_row("", Text(empty, style="dim"), "", "", "", "", "")
    return table


class TutorBookingsScreen(Screen):
    title = "My Bookings"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.bookings: List[Booking] = []

    async def load(self) -> None:
        self.bookings = await self.api.tutor.bookings(status="confirmed")

    @action("complete", usage="complete <booking id>")
    async def complete(self, args: str) -> None:
        """Mark a session as completed"""
        booking_id = require_args(args, 1, "complete <booking id>")[0]
        self.success = await self.api.tutor.complete_booking(booking_id)
        self.bookings = [b for b in self.bookings if b.id != booking_id]

    def body(self):
        return bookings_table(self.bookings, "No confirmed bookings")


class TutorBookingRequestsScreen(Screen):
    title = "Booking Requests"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.requests: List[Booking] = []

    async def load(self) -> None:
        self.requests = await self.api.tutor.bookings(status="requested")

    def find(self, booking_id: str) -> Booking:
        booking = next((b for b in self.requests if b.id == booking_id), None)
        if booking is None:
            raise ValidationError(f"No booking request with id {booking_id}")
        return booking

    async def respond(self, args: str, verb: str) -> None:
        booking_id = require_args(args, 1, f"{verb} <booking id>")[0]
        self.success = await self.api.tutor.respond_to_booking(booking_id, verb)
        self.requests = await self.api.tutor.bookings(status="requested")

    @action("accept", usage="accept <booking id>")
    async def accept(self, args: str) -> None:
        """Accept a request"""
        await self.respond(args, "accept")

    @action("decline", usage="decline <booking id>")
    async def decline(self, args: str) -> None:
        """Decline a request"""
        await self.respond(args, "decline")

    @action("reschedule", usage="reschedule <booking id>")
    async def reschedule(self, args: str) -> None:
        """Ask the parent for another time"""
        booking = self.find(require_args(args, 1, "reschedule <booking id>")[0])
        parent_id = ref_id(booking.parent_id)
        if not parent_id:
            raise ValidationError("This booking has no parent to message")
        await self.api.tutor.send_message(parent_id, RESCHEDULE_MESSAGE.format(subject=booking.subject_name))
        self.success = "Reschedule message sent to parent successfully!"

    def body(self):
        return bookings_table(self.requests, "No pending booking requests")
