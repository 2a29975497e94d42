"""Review moderation"""

from typing import Dict, List, Optional

from rich.console import Group
from rich.text import Text

from learnlink.components.cards import review_actions, review_card
from learnlink.exceptions import ValidationError
from learnlink.models import Review
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args

STATUSES = ("approved", "flagged", "removed")
PAST = {"flag": "flagged", "remove": "removed", "approve": "approved"}


class AdminReviewsScreen(Screen):
    title = "Review Moderation"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reviews: List[Review] = []
        self.filters: Dict[str, Optional[str]] = {"status": None, "rating": None, "search": None}

    async def load(self) -> None:
        self.reviews = await self.api.admin.reviews(**self.filters)

    @action("filter", usage="filter <status|rating|search> [value]")
    async def set_filter(self, args: str) -> None:
        """Filter reviews; an empty value clears the filter"""
        parts = args.strip().split(maxsplit=1)
        if not parts or parts[0] not in self.filters:
            raise ValidationError("Usage: filter <status|rating|search> [value]")
        value = parts[1] if len(parts) > 1 else None
        if parts[0] == "status" and value and value not in STATUSES:
            raise ValidationError("Status must be one of: " + ", ".join(STATUSES))
        if parts[0] == "rating" and value and value not in ("1", "2", "3", "4", "5"):
            raise ValidationError("Rating must be 1 to 5")
        self.filters[parts[0]] = value
        await self.load()

    async def _moderate(self, args: str, verb: str) -> None:
        review_id = require_args(args, 1, f"{verb} <review id>")[0]
        review = next((r for r in self.reviews if r.id == review_id), None)
        if review is not None and verb not in review_actions(review):
            raise ValidationError(f"This review cannot be {PAST[verb]} in its current state")
        await self.api.admin.moderate_review(review_id, verb)
        await self.load()
        self.success = f"Review has been {PAST[verb]} successfully."

    @action("flag", usage="flag <review id>")
    async def flag(self, args: str) -> None:
        """Flag a review for attention"""
        await self._moderate(args, "flag")

    @action("remove", usage="remove <review id>")
    async def remove(self, args: str) -> None:
        """Hide a review from parents and tutors"""
        await self._moderate(args, "remove")

    @action("approve", usage="approve <review id>")
    async def approve(self, args: str) -> None:
        """Restore a flagged or removed review"""
        await self._moderate(args, "approve")

    def body(self):
        active = ", ".join(f"{k}={v}" for k, v in self.filters.items() if v) or "none"
        parts = [Text(f"{len(self.reviews)} review(s)   Filters: {active}", style="dim")]
        if not self.reviews:
            parts.append(Text("No reviews found.", style="dim"))
        parts.extend(review_card(r, review_actions(r)) for r in self.reviews)
        return Group(*parts)
