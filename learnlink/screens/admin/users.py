"""Paginated user list with role/status/search filters"""

from typing import Optional

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.api.admin import UserPage
from learnlink.components.format import format_date, humanize, status_badge
from learnlink.exceptions import ValidationError
from learnlink.roles import Role
from learnlink.screens.base import Screen, action

FILTERS = ("role", "status", "search")


class AdminUsersScreen(Screen):
    title = "Manage Users"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.page = 1
        self.filters = {name: None for name in FILTERS}
        self.result: Optional[UserPage] = None

    async def load(self) -> None:
        self.result = await self.api.admin.users(page=self.page, **self.filters)

    @action("filter", usage="filter <role|status|search> [value]")
    async def set_filter(self, args: str) -> None:
        """Filter the list; an empty value clears the filter"""
        parts = args.strip().split(maxsplit=1)
        if not parts or parts[0] not in FILTERS:
            raise ValidationError(f"Usage: filter <{'|'.join(FILTERS)}> [value]")
        self.filters[parts[0]] = parts[1] if len(parts) > 1 else None
        self.page = 1
        await self.load()

    @action("page", usage="page <n>")
    async def goto_page(self, args: str) -> None:
        """Jump to a page"""
        try:
            page = int(args)
        except ValueError:
            raise ValidationError("Usage: page <n>")
        total = self.result.total_pages if self.result else 1
        self.page = max(1, min(page, total))
        await self.load()

    @action("next")
    async def next_page(self, args: str) -> None:
        """Next page"""
        if self.result and self.page < self.result.total_pages:
            self.page += 1
            await self.load()

    @action("prev")
    async def prev_page(self, args: str) -> None:
        """Previous page"""
        if self.page > 1:
            self.page -= 1
            await self.load()

    @action("open", usage="open <user id>")
    async def open_user(self, args: str) -> None:
        """Show one user's details"""
        if not args.strip():
            raise ValidationError("Usage: open <user id>")
        self.go(f"/admin/users/{args.strip()}")

    def body(self):
        if self.result is None:
            return None

        active = ", ".join(f"{k}={v}" for k, v in self.filters.items() if v) or "none"
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Name")
        table.add_column("Email")
        table.add_column("Role")
        table.add_column("Status")
        table.add_column("Joined")
        for user in self.result.users:
            table.add_row(user.id, user.name or "", user.email or "", humanize(user.role),
                          status_badge(user.status), format_date(user.date))
        if not self.result.users:
            table.add_row("", Text("No users found", style="dim"), "", "", "", "")

        footer = Text(
            f"Page {self.result.page} of {self.result.total_pages} "
            f"({self.result.total_users} users)   Filters: {active}",
            style="dim",
        )
        return Group(table, footer)
