"""Platform activity over a period"""

from typing import Any, Dict, List

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from learnlink.components.format import stars
from learnlink.exceptions import ValidationError
from learnlink.roles import Role
from learnlink.screens.base import Screen, action

PERIODS = {
    "24h": "Last 24 Hours",
    "7d": "Last 7 Days",
    "30d": "Last 30 Days",
    "90d": "Last 90 Days",
}


def trend_table(title: str, points: List[Dict[str, Any]]) -> Table:
    table = Table(title=title, show_header=False, box=None, title_justify="left")
    table.add_column(style="dim")
    table.add_column(justify="right")
    table.add_column()
    if not points:
        table.add_row("No data available for this period.", "", "")
    peak = max((p.get("count") or 0 for p in points), default=0) or 1
    for point in points:
        count = point.get("count") or 0
        table.add_row(str(point.get("_id", "")), str(count), "█" * max(1, round(20 * count / peak)))
    return table


class AdminActivityScreen(Screen):
    title = "Platform Activity"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.period = "7d"
        self.activity: Dict[str, Any] = {}

    async def load(self) -> None:
        self.activity = await self.api.admin.activity(self.period)

    @action("period", usage="period <24h|7d|30d|90d>")
    async def set_period(self, args: str) -> None:
        """Change the reporting period"""
        period = args.strip()
        if period not in PERIODS:
            raise ValidationError("Period must be one of: " + ", ".join(PERIODS))
        self.period = period
        await self.load()

    def body(self):
        counts = self.activity.get("activity") or {}
        health = self.activity.get("platformHealth") or {}
        trends = self.activity.get("trends") or {}
        tutors = (self.activity.get("topPerformers") or {}).get("tutors") or []

        numbers = Columns([
            Panel(f"{counts.get(key) or 0}\n{label}", expand=False)
            for key, label in (
                ("newUsers", "New Users"),
                ("newBookings", "New Bookings"),
                ("completedBookings", "Completed Sessions"),
                ("newReviews", "New Reviews"),
                ("newMessages", "Messages"),
            )
        ])
        platform = Text(
            f"Platform health: {health.get('totalUsers') or 0} users, "
            f"{health.get('totalTutors') or 0} tutors, "
            f"{health.get('verificationRate') or 0}% verified"
        )

        top = Table(title="Top tutors", show_header=True, header_style="bold", title_justify="left")
        top.add_column("#")
        top.add_column("Tutor")
        top.add_column("Email", style="dim")
        top.add_column("Rating")
        if not tutors:
            top.add_row("", "No tutors have completed sessions in this period.", "", "")
        for rank, tutor in enumerate(tutors, start=1):
            top.add_row(str(rank), tutor.get("name") or "", tutor.get("email") or "",
                        stars(tutor.get("rating")))

        return Group(
            Text(PERIODS[self.period], style="bold"),
            numbers,
            platform,
            trend_table("User registrations", trends.get("userRegistration") or []),
            trend_table("Bookings", trends.get("bookings") or []),
            top,
        )
