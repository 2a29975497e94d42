"""Tutor home: earnings, upcoming sessions and recent reviews"""

from typing import Optional

from rich.columns import Columns
from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.api.tutor import TutorDashboard
from learnlink.components.cards import review_card
from learnlink.components.format import format_datetime, money, status_badge
from learnlink.models import ref_name
from learnlink.roles import Role
from learnlink.screens.admin.dashboard import stat
from learnlink.screens.base import Screen


class TutorDashboardScreen(Screen):
    title = "Tutor Dashboard"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dashboard: Optional[TutorDashboard] = None

    async def load(self) -> None:
        self.dashboard = await self.api.tutor.dashboard()

    def quick_links(self) -> Text:
        profile_id = self.dashboard.profile.id if self.dashboard else ""
        links = [
            ("Booking requests", "/tutor/booking-requests"),
            ("Bookings", "/tutor/bookings"),
            ("Availability", "/tutor/availability"),
            ("Profile", f"/tutor-profile/{profile_id}"),
            ("Messages", "/tutor/messages"),
            ("Waitlist", "/tutor/waitlist"),
            ("Students", "/tutor/students"),
        ]
        return Text("  ".join(f"{label}: {path}" for label, path in links), style="dim")

    def body(self):
        if self.dashboard is None:
            return Text("")
        profile = self.dashboard.profile
        statistics = self.dashboard.statistics

        stats = Columns([
            stat(money(statistics.get("totalEarnings")), "Total Earnings"),
            stat(statistics.get("completedBookings"), "Completed Sessions"),
            stat(profile.rating or "N/A", "Your Rating"),
            stat(statistics.get("unreadMessages"), "Unread Messages"),
        ])

        upcoming = Table(title="Upcoming bookings", show_header=True, header_style="bold",
                         expand=True, title_justify="left")
        upcoming.add_column("Parent")
        upcoming.add_column("Subject")
        upcoming.add_column("When")
        upcoming.add_column("Status")
        for b in self.dashboard.recent_bookings:
            upcoming.add_row(ref_name(b.parent_id, "Parent"), b.subject_name,
                             format_datetime(b.session_time), status_badge(b.status))
        if not self.dashboard.recent_bookings:
            upcoming.add_row(Text("No upcoming bookings", style="dim"), "", "", "")

        parts = [
            Text(f"Welcome back, {profile.display_name}!", style="bold #14b8a6"),
            stats,
            upcoming,
            Text("Recent reviews", style="bold underline"),
        ]
        parts.extend(review_card(r) for r in self.dashboard.recent_reviews)
        if not self.dashboard.recent_reviews:
            parts.append(Text("No reviews yet.", style="dim"))
        parts.append(self.quick_links())
        return Group(*parts)
