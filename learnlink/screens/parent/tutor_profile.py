"""A tutor's public profile as seen by a parent"""

from typing import List, Optional, Sequence
from urllib.parse import urlencode

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from learnlink.components.format import money, stars
from learnlink.exceptions import LearnLinkError, ValidationError
from learnlink.listings import TutorOffer, offer_for
from learnlink.logging_config import get_logger
from learnlink.models import Booking, TutorSubject, User, ref_id
from learnlink.screens.base import action, require_args
from learnlink.screens.parent.listing import TutorListScreen

logger = get_logger(__name__)

NO_COMPLETED_SESSION = "You can only review tutors you have completed a session with for this subject."


def find_completed_booking(bookings: Sequence[Booking], tutor_id: str,
                           subject_id: str) -> Optional[Booking]:
    return next(
        (
            b for b in bookings
            if ref_id(b.tutor_id) == tutor_id and ref_id(b.subject) == subject_id
        ),
        None,
    )


def parse_rating(value: str) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError):
        rating = 0
    if not 1 <= rating <= 5:
        raise ValidationError("Please select a rating between 1 and 5", field="rating")
    return rating


class ParentTutorProfileScreen(TutorListScreen):
    title = "Tutor Profile"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tutor: Optional[User] = None
        self.selected: Optional[TutorSubject] = None
        self.similar: List[User] = []

    @property
    def tutor_id(self) -> str:
        return self.params["tutorId"]

    @property
    def subject_id(self) -> str:
        if self.selected is not None:
            return self.selected.subject_id
        return self.params.get("subjectId", "")

    def select_subject(self, subject_id: Optional[str]) -> None:
        subjects = self.tutor.subjects if self.tutor else []
        match = next((s for s in subjects if subject_id and s.subject_id == subject_id), None)
        self.selected = match or (subjects[0] if subjects else None)

    async def load(self) -> None:
        self.tutor = await self.api.parent.tutor(self.tutor_id)
        self.select_subject(self.params.get("subjectId"))
        await self.load_bookmarks()
        await self.load_similar()

        if self.params.get("subjectId"):
            try:
                await self.api.parent.record_visit(self.tutor_id, self.params["subjectId"])
            except LearnLinkError as e:
                logger.warning(f"Could not record visit: {e.message}")

    async def load_similar(self) -> None:
        if self.selected is None or not self.selected.subject_id:
            self.similar = []
            return
        try:
            self.similar = await self.api.parent.similar_tutors(self.selected.subject_id, self.tutor_id)
        except LearnLinkError as e:
            logger.warning(f"Could not fetch similar tutors: {e.message}")
            self.similar = []

    @action("subject", usage="subject <subject id>")
    async def choose_subject(self, args: str) -> None:
        """Highlight another of this tutor's subjects"""
        self.select_subject(args.strip())
        await self.load_similar()

    @action("book", usage="book [ISO datetime]")
    async def book(self, args: str) -> None:
        """Book a session for the highlighted subject"""
        path = f"/parent/book-session/{self.tutor_id}/{self.subject_id}"
        if args.strip():
            path += "?" + urlencode({"datetime": args.strip()})
        self.go(path)

    @action("message")
    async def message(self, args: str) -> None:
        """Message this tutor"""
        self.go(f"/parent/messages/{self.tutor_id}")

    @action("reviews")
    async def reviews(self, args: str) -> None:
        """Read every review of this tutor"""
        self.go(f"/parent/tutor/{self.tutor_id}/reviews")

    @action("review", usage="review <rating 1-5> [comment]")
    async def review(self, args: str) -> None:
        """Review this tutor for the highlighted subject"""
        parts = require_args(args, 1, "review <rating 1-5> [comment]")
        rating = parse_rating(parts[0])
        comment = args.strip().split(maxsplit=1)[1] if len(parts) > 1 else ""

        completed = await self.api.parent.bookings(status="completed", limit=50)
        booking = find_completed_booking(completed, self.tutor_id, self.subject_id)
        if booking is None:
            raise ValidationError(NO_COMPLETED_SESSION)

        await self.api.parent.submit_review(booking.id, rating, comment, self.subject_id)
        self.success = "Review submitted!"

    def offer(self) -> Optional[TutorOffer]:
        if self.tutor is None or self.selected is None:
            return None
        return offer_for(self.tutor, self.selected)

    def body(self):
        tutor = self.tutor
        if tutor is None:
            return None

        info = Table.grid(padding=(0, 1))
        info.add_column(style="dim")
        info.add_column()
        info.add_row("Rating", f"{stars(tutor.rating)} {tutor.rating or 'New'}")
        info.add_row("Location", tutor.location or "")
        info.add_row("Education", tutor.education or "")
        info.add_row("Experience", str(tutor.experience or ""))
        if tutor.expertise:
            info.add_row("Expertise", ", ".join(tutor.expertise))
        info.add_row("Photo", self.api.image_url(tutor.profile_image, tutor.display_name) or "")
        info.add_row("About", tutor.bio or "")

        subjects = Table(title="Subjects", show_header=True, header_style="bold", title_justify="left")
        subjects.add_column("")
        subjects.add_column("ID", style="dim")
        subjects.add_column("Subject")
        subjects.add_column("Title")
        subjects.add_column("Rate")
        for entry in tutor.subjects:
            mark = "▶" if self.selected is entry else ""
            subjects.add_row(mark, entry.subject_id, entry.subject_name, entry.title or "",
                             f"{money(entry.hourly_rate)}/hr")

        similar = [offer_for(t, s) for t in self.similar for s in t.subjects
                   if s.subject_id == self.subject_id]
        return Group(
            Panel(info, title=tutor.display_name, title_align="left", border_style="#2DB8A1"),
            subjects,
            Text("Similar tutors", style="bold underline"),
            self.cards(similar, "No similar tutors found."),
            Text("book [datetime], message, reviews, review <1-5> [comment], subject <id>, bookmark <tutor> <subject>",
                 style="dim"),
        )
