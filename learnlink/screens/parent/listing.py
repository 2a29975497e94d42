"""Shared behaviour for parent screens that show tutor cards"""

from typing import Any, Iterable, List

from rich.columns import Columns
from rich.text import Text

from learnlink.components.cards import tutor_card
from learnlink.listings import TutorOffer, is_bookmarked
from learnlink.models import Bookmark
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args


class TutorListScreen(Screen):
    allowed_roles = (Role.PARENT,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.bookmarks: List[Bookmark] = []

    async def load_bookmarks(self) -> None:
        self.bookmarks = await self.api.parent.bookmarks()

    def bookmarked(self, offer: TutorOffer) -> bool:
        return is_bookmarked(self.bookmarks, offer.tutor.id, offer.subject_id)

    @action("bookmark", usage="bookmark <tutor id> <subject id>")
    async def toggle_bookmark(self, args: str) -> None:
        """Save or unsave a tutor for a subject"""
        tutor_id, subject_id = require_args(args, 2, "bookmark <tutor id> <subject id>")[:2]
        was_saved = is_bookmarked(self.bookmarks, tutor_id, subject_id)
        self.bookmarks = await self.api.parent.toggle_bookmark(tutor_id, subject_id)
        self.success = "Bookmark removed" if was_saved else "Bookmark saved"

    @action("view", usage="view <tutor id> [subject id]")
    async def view_tutor(self, args: str) -> None:
        """Open a tutor's profile"""
        parts = require_args(args, 1, "view <tutor id> [subject id]")
        path = f"/parent/tutor/{parts[0]}"
        if len(parts) > 1:
            path += f"/subject/{parts[1]}"
        self.go(path)

    def cards(self, offers: Iterable[TutorOffer], empty: str = "No tutors found.") -> Any:
        rendered = [
            tutor_card(
                offer,
                self.api.image_url(offer.tutor.profile_image, offer.tutor.display_name),
                self.bookmarked(offer),
            )
            for offer in offers
        ]
        if not rendered:
            return Text(empty, style="dim")
        return Columns(rendered, equal=True)
