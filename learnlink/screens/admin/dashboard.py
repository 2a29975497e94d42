"""Admin overview: totals, pending work and recent activity"""

from typing import Any, Dict, List

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_date, humanize, status_badge
from learnlink.models import ref_name
from learnlink.roles import Role
from learnlink.screens.base import Screen

ADMIN_PAGES = [
    ("Users", "/admin/users"),
    ("Tutor verification", "/admin/tutors-verification"),
    ("Disputes", "/admin/disputes"),
    ("Reviews", "/admin/reviews"),
    ("Activity", "/admin/activity"),
    ("Subjects", "/admin/subjects"),
]


def stat(value: Any, label: str) -> Panel:
    return Panel(Text.assemble((str(value or 0), "bold #2DB8A1"), f"\n{label}"), expand=False)


class AdminDashboardScreen(Screen):
    title = "Admin Dashboard"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dashboard: Dict[str, Any] = {}

    async def load(self) -> None:
        self.dashboard = await self.api.admin.dashboard()

    def section(self, title: str, items: List[Dict[str, Any]], kind: str) -> Table:
        table = Table(title=title, show_header=False, expand=True, title_justify="left")
        table.add_column()
        table.add_column(style="dim")
        table.add_column(justify="right")
        if not items:
            table.add_row(Text("Nothing here", style="dim"), "", "")
        for item in items[:5]:
            if kind == "user":
                table.add_row(item.get("name") or item.get("email") or "", humanize(item.get("role")),
                              format_date(item.get("date") or item.get("createdAt")))
            elif kind == "booking":
                table.add_row(ref_name(item.get("subject"), "Session"),
                              f"{ref_name(item.get('parentId'), 'Parent')} → {ref_name(item.get('tutorId'), 'Tutor')}",
                              status_badge(item.get("status")))
            elif kind == "dispute":
                table.add_row(item.get("title") or "Dispute", humanize(item.get("priority")),
                              status_badge(item.get("status")))
            else:
                table.add_row(item.get("name") or "", item.get("email") or "", status_badge(item.get("status")))
        return table

    def body(self):
        overview = self.dashboard.get("overview") or {}
        pending = self.dashboard.get("pendingActions") or {}
        recent = self.dashboard.get("recentActivity") or {}

        stats = Columns([
            stat(overview.get("totalUsers"), "Total Users"),
            stat(overview.get("totalTutors"), "Total Tutors"),
            stat(overview.get("verifiedTutors"), "Verified Tutors"),
            stat(overview.get("totalBookings"), "Total Bookings"),
            stat(f"{overview.get('verificationRate') or 0}%", "Verification Rate"),
        ])

        links = Text("  ".join(f"{label}: {path}" for label, path in ADMIN_PAGES), style="dim")
        return Group(
            stats,
            self.section("Recent users", recent.get("newUsers") or [], "user"),
            self.section("Recent bookings", recent.get("newBookings") or [], "booking"),
            self.section("Pending verifications", pending.get("verifications") or [], "tutor"),
            self.section("Open disputes", pending.get("disputes") or [], "dispute"),
            links,
        )
