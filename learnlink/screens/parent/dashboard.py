"""Parent home: recommendations, recent visits, newest and top-rated tutors"""

import asyncio
from typing import List
from urllib.parse import urlencode

from rich.console import Group
from rich.text import Text

from learnlink.api.parent import ParentDashboard
from learnlink.exceptions import ValidationError
from learnlink.listings import TutorOffer, flatten_by_subject, offer_from_pair
from learnlink.models import Subject, User
from learnlink.screens.base import action
from learnlink.screens.parent.listing import TutorListScreen

SHOWCASE_SIZE = 4


class ParentDashboardScreen(TutorListScreen):
    title = "Student Dashboard"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dashboard = ParentDashboard()
        self.subjects: List[Subject] = []
        self.newest: List[User] = []
        self.top_rated: List[User] = []

    async def load(self) -> None:
        self.dashboard, self.subjects, self.newest, self.top_rated = await asyncio.gather(
            self.api.parent.dashboard(),
            self.api.subjects.list(),
            self.api.parent.search_tutors(limit=SHOWCASE_SIZE, sort_by="date"),
            self.api.parent.search_tutors(limit=SHOWCASE_SIZE, sort_by="rating"),
        )
        await self.load_bookmarks()

    @action("search", usage="search <name>")
    async def search(self, args: str) -> None:
        """Search tutors by name"""
        query = {"name": args.strip()} if args.strip() else {}
        self.go("/parent/search-tutors" + (f"?{urlencode(query)}" if query else ""))

    @action("subject", usage="subject <subject id>")
    async def open_subject(self, args: str) -> None:
        """Browse tutors for one subject"""
        if not args.strip():
            raise ValidationError("Usage: subject <subject id>")
        self.go(f"/subjects/{args.strip()}")

    def recent_offers(self) -> List[TutorOffer]:
        offers = (offer_from_pair(v) for v in self.dashboard.recently_visited)
        return [o for o in offers if o is not None]

    def body(self):
        user = self.user
        greeting = (user.child_name or user.display_name) if user else ""
        subjects = ", ".join(f"{s.name} ({s.id})" for s in self.subjects) or "none"
        return Group(
            Text(f"Welcome back, {greeting}!", style="bold"),
            Text(f"Subjects: {subjects}", style="dim"),
            Text("Recommended for you", style="bold underline"),
            self.cards(flatten_by_subject(self.dashboard.recommended_tutors), "No recommendations yet."),
            Text("Recently visited", style="bold underline"),
            self.cards(self.recent_offers(), "You haven't visited any tutors yet."),
            Text("Newest tutors", style="bold underline"),
            self.cards(flatten_by_subject(self.newest)),
            Text("Top rated", style="bold underline"),
            self.cards(flatten_by_subject(self.top_rated)),
            Text("search <name>, subject <id>, view <tutor id> [subject id], bookmark <tutor id> <subject id>",
                 style="dim"),
        )
