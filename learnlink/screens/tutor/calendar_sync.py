"""Calendar sync"""

from rich.console import Group
from rich.text import Text

from learnlink.exceptions import ValidationError
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args

CALENDARS = ("google", "outlook")
GOOGLE_CONNECT_URL = "https://calendar.google.com/calendar/u/0/r/settings/addcalendar"


class TutorCalendarSyncScreen(Screen):
    title = "Calendar Sync"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.connect_url = ""

    @action("sync", usage="sync <google|outlook> [access token]")
    async def sync(self, args: str) -> None:
        """Sync sessions to an external calendar"""
        parts = require_args(args, 1, "sync <google|outlook> [access token]")
        calendar = parts[0].lower()
        if calendar not in CALENDARS:
            raise ValidationError("Calendar must be one of: " + ", ".join(CALENDARS))

        if calendar == "google" and len(parts) < 2:
            self.connect_url = GOOGLE_CONNECT_URL
            self.success = "Connect your Google Calendar at the address below, then sync with its access token."
            return

        token = parts[1] if len(parts) > 1 else self.ctx.ask("Access token", password=True)
        if not token:
            raise ValidationError("An access token is required")
        self.success = await self.api.tutor.sync_calendar(calendar, token)

    def body(self):
        parts = [Text("Sync your confirmed sessions with Google or Outlook."),
                 Text("sync google | sync outlook [access token]", style="dim")]
        if self.connect_url:
            parts.append(Text(self.connect_url, style="underline cyan"))
        return Group(*parts)
