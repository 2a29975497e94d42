"""One user's record with account activation controls"""

from typing import Optional

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from learnlink.api.admin import UserDetails
from learnlink.components.cards import user_card
from learnlink.exceptions import ValidationError
from learnlink.roles import Role
from learnlink.screens.base import Screen, action


class AdminUserDetailsScreen(Screen):
    title = "User Details"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.details: Optional[UserDetails] = None

    @property
    def user_id(self) -> str:
        return self.params["userId"]

    async def load(self) -> None:
        self.details = await self.api.admin.user(self.user_id)

    async def _set_status(self, status_action: str) -> None:
        await self.api.admin.set_user_status(self.user_id, status_action)
        done = "activated" if status_action == "activate" else "deactivated"
        await self.load()
        self.success = f"User account has been {done} successfully."

    @action("activate")
    async def activate(self, args: str) -> None:
        """Re-activate the account"""
        await self._set_status("activate")

    @action("deactivate")
    async def deactivate(self, args: str) -> None:
        """Deactivate the account"""
        await self._set_status("deactivate")

    @action("notify", usage="notify <message>")
    async def notify(self, args: str) -> None:
        """Send the user a notification"""
        if not args.strip():
            raise ValidationError("Usage: notify <message>")
        await self.api.notifications.create(args.strip(), type="admin", user_id=self.user_id)
        self.success = "Notification sent"

    def body(self):
        if self.details is None:
            return None
        user = self.details.user
        stats = self.details.additional_data

        numbers = Columns([
            Panel(f"{stats.get('totalBookings') or 0}\nTotal Bookings", expand=False),
            Panel(f"{stats.get('completedBookings') or 0}\nCompleted", expand=False),
            Panel(f"{stats.get('totalReviews') or 0}\nReviews", expand=False),
            Panel(f"{stats.get('averageRating') or 0}\nAverage Rating", expand=False),
        ])

        toggle = "deactivate" if user.status != "deactivated" and user.is_active is not False else "activate"
        return Group(
            user_card(user, self.api.image_url(user.profile_image, user.display_name)),
            numbers,
            Text(f"Actions: {toggle}, notify <message>", style="dim"),
        )
