"""Every review a tutor has received"""

from typing import Optional

from rich.console import Group
from rich.text import Text

from learnlink.api.parent import TutorReviews
from learnlink.components.cards import review_card
from learnlink.components.format import stars
from learnlink.roles import Role
from learnlink.screens.base import Screen


class ParentTutorReviewsScreen(Screen):
    title = "Tutor Reviews"
    allowed_roles = (Role.PARENT,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.result: Optional[TutorReviews] = None

    async def load(self) -> None:
        self.result = await self.api.parent.tutor_reviews(self.params["tutorId"])

    def body(self):
        if self.result is None:
            return None
        name = self.result.tutor.display_name if self.result.tutor else "Tutor"
        average = self.result.average_rating
        parts = [
            Text(f"{name}: {stars(average)} {average:.1f} ({len(self.result.reviews)} reviews)", style="bold"),
        ]
        if not self.result.reviews:
            parts.append(Text("No reviews yet.", style="dim"))
        parts.extend(review_card(r) for r in self.result.reviews if not r.is_removed)
        return Group(*parts)
