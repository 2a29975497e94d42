"""Saved (tutor, subject) pairs"""

from learnlink.listings import offer_from_pair
from learnlink.screens.parent.listing import TutorListScreen


class ParentBookmarksScreen(TutorListScreen):
    title = "My Bookmarks"

    async def load(self) -> None:
        await self.load_bookmarks()

    def body(self):
        offers = [o for o in (offer_from_pair(b) for b in self.bookmarks) if o is not None]
        return self.cards(offers, "You haven't bookmarked any tutors yet.")
