"""Review one completed booking"""

from typing import Optional

from rich.console import Group
from rich.text import Text

from learnlink.components.format import stars
from learnlink.models import Booking, ref_id, ref_name
from learnlink.roles import Role
from learnlink.screens.base import FormField, FormScreen, action
from learnlink.screens.parent.tutor_profile import parse_rating


class ParentAddReviewScreen(FormScreen):
    title = "Add Review"
    allowed_roles = (Role.PARENT,)
    fields = (
        FormField("rating", "Rating (1-5)"),
        FormField("comment", "Comment (optional)"),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.booking: Optional[Booking] = None

    @property
    def booking_id(self) -> str:
        return self.params["bookingId"]

    async def load(self) -> None:
        completed = await self.api.parent.bookings(status="completed", limit=50)
        self.booking = next((b for b in completed if b.id == self.booking_id), None)

    @action("submit")
    async def submit(self, args: str) -> None:
        """Post the review"""
        rating = parse_rating(self.values.get("rating", ""))
        subject = ref_id(self.booking.subject) if self.booking else None
        await self.api.parent.submit_review(
            self.booking_id, rating, self.values.get("comment", ""), subject or None
        )
        self.success = "Review submitted!"
        if self.booking is not None and ref_id(self.booking.tutor_id):
            self.go(f"/parent/tutor/{ref_id(self.booking.tutor_id)}/reviews")

    def body(self):
        about = Text("")
        if self.booking is not None:
            about = Text(f"{ref_name(self.booking.tutor_id, 'Tutor')}: {self.booking.subject_name}", style="bold")
        preview = Text(stars(self.values.get("rating") or 0), style="yellow")
        return Group(about, self.form_table(), preview)
