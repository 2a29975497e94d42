"""The parent's bookings"""

from typing import List

from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_datetime, status_badge
from learnlink.exceptions import ValidationError
from learnlink.models import Booking, ref_name
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args

UNCANCELLABLE = ("confirmed", "completed")


class ParentBookingsScreen(Screen):
    title = "My Bookings"
    allowed_roles = (Role.PARENT,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.bookings: List[Booking] = []

    async def load(self) -> None:
        self.bookings = await self.api.parent.bookings()

    def find(self, booking_id: str) -> Booking:
        booking = next((b for b in self.bookings if b.id == booking_id), None)
        if booking is None:
            raise ValidationError(f"No booking with id {booking_id}")
        return booking

    @action("cancel", usage="cancel <booking id>")
    async def cancel(self, args: str) -> None:
        """Cancel a booking that is not yet confirmed"""
        booking = self.find(require_args(args, 1, "cancel <booking id>")[0])
        if booking.status in UNCANCELLABLE:
            raise ValidationError(f"A {booking.status} booking cannot be cancelled")
        if not self.ctx.confirm(
            "Are you sure you want to cancel this booking? This action cannot be undone."
        ):
            return

        await self.api.parent.cancel_booking(booking.id)
        self.bookings = [b for b in self.bookings if b.id != booking.id]
        self.success = "Your booking has been cancelled successfully."

    @action("review", usage="review <booking id>")
    async def review(self, args: str) -> None:
        """Review a completed session"""
        booking = self.find(require_args(args, 1, "review <booking id>")[0])
        if booking.status != "completed":
            raise ValidationError("Only completed sessions can be reviewed")
        self.go(f"/parent/add-review/{booking.id}")

    def body(self):
        if not self.bookings:
            return Text("No bookings yet. Find a tutor with /go /parent/search-tutors", style="dim")

        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Tutor")
        table.add_column("Subject")
        table.add_column("When")
        table.add_column("Status")
        table.add_column("Actions", style="dim")
        for b in self.bookings:
            actions = []
            if b.status not in UNCANCELLABLE:
                actions.append("cancel")
            if b.status == "completed":
                actions.append("review")
            table.add_row(b.id, ref_name(b.tutor_id, "Tutor"), b.subject_name,
                          format_datetime(b.session_time), status_badge(b.status), ", ".join(actions))
        return table
