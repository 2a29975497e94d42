"""Tutor search with filters; one card per (tutor, subject)"""

import asyncio
from typing import Dict, List, Optional

from rich.console import Group
from rich.text import Text

from learnlink.exceptions import ValidationError
from learnlink.listings import find_subject, flatten_by_subject, locations_of
from learnlink.models import Subject, User
from learnlink.screens.base import action
from learnlink.screens.parent.listing import TutorListScreen

SEARCH_LIMIT = 50
FILTERS = ("name", "subject", "location", "rating", "minRate", "maxRate", "sortBy")


class ParentSearchTutorsScreen(TutorListScreen):
    title = "Find a Tutor"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.filters: Dict[str, Optional[str]] = {name: self.query.get(name) for name in FILTERS}
        self.subjects: List[Subject] = []
        self.locations: List[str] = []
        self.tutors: List[User] = []

    async def load(self) -> None:
        self.subjects, everyone = await asyncio.gather(
            self.api.subjects.list(),
            self.api.parent.search_tutors(limit=100),
        )
        self.locations = locations_of(everyone)
        await self.load_bookmarks()
        await self.search()

    async def search(self) -> None:
        f = self.filters
        self.tutors = await self.api.parent.search_tutors(
            name=f["name"],
            subject=f["subject"],
            location=f["location"],
            rating=f["rating"],
            min_rate=f["minRate"],
            max_rate=f["maxRate"],
            sort_by=f["sortBy"],
            filter_type="subject" if f["subject"] else None,
            limit=SEARCH_LIMIT,
        )

    @action("filter", usage="filter <name|subject|location|rating|minRate|maxRate|sortBy> [value]")
    async def set_filter(self, args: str) -> None:
        """Narrow the search; an empty value clears the filter"""
        parts = args.strip().split(maxsplit=1)
        if not parts or parts[0] not in FILTERS:
            raise ValidationError(f"Usage: filter <{'|'.join(FILTERS)}> [value]")
        name, value = parts[0], (parts[1] if len(parts) > 1 else None)
        if name == "subject" and value:
            subject = find_subject(self.subjects, value)
            if subject is None:
                raise ValidationError(f"No subject named '{value}'", field="subject")
            value = subject.id
        self.filters[name] = value
        await self.search()

    @action("clear")
    async def clear_filters(self, args: str) -> None:
        """Remove every filter"""
        self.filters = {name: None for name in FILTERS}
        await self.search()

    def body(self):
        active = ", ".join(f"{k}={v}" for k, v in self.filters.items() if v) or "none"
        offers = flatten_by_subject(self.tutors)
        return Group(
            Text(f"Filters: {active}", style="dim"),
            Text(f"Locations: {', '.join(self.locations) or 'none'}", style="dim"),
            Text(f"{len(offers)} result(s)", style="bold"),
            self.cards(offers, "No tutors match your search."),
        )
