"""All notifications for the logged-in user"""

from typing import List

from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_datetime, humanize
from learnlink.exceptions import LearnLinkError
from learnlink.logging_config import get_logger
from learnlink.models import Notification
from learnlink.roles import Role
from learnlink.screens.base import Screen, action

logger = get_logger(__name__)


class NotificationsScreen(Screen):
    title = "Notifications"
    allowed_roles = (Role.PARENT, Role.TUTOR, Role.ADMIN)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.notifications: List[Notification] = []

    async def load(self) -> None:
        self.notifications = await self.api.notifications.list()

    @action("mark-all-read")
    async def mark_all_read(self, args: str) -> None:
        """Mark every unread notification read, one request at a time"""
        failed = 0
        marked: List[str] = []
        for notification in self.notifications:
            if notification.is_read:
                continue
            try:
                await self.api.notifications.mark_read(notification.id)
            except LearnLinkError as e:
                failed += 1
                logger.warning(f"Could not mark notification {notification.id} read: {e.message}")
                continue
            notification.is_read = True
            marked.append(notification.id)

        self.ctx.navbar.mark_local_read(marked)
        if failed:
            self.error = f"{failed} notification(s) could not be marked as read"
        else:
            self.success = "All notifications marked as read"

    @action("mark-read", usage="mark-read <id>")
    async def mark_read(self, args: str) -> None:
        """Mark one notification read"""
        notification_id = args.strip()
        await self.api.notifications.mark_read(notification_id)
        for notification in self.notifications:
            if notification.id == notification_id:
                notification.is_read = True
        self.ctx.navbar.mark_local_read([notification_id])

    def body(self):
        if not self.notifications:
            return Text("No notifications yet.", style="dim")

        strategy = self.ctx.navbar.strategy
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("When", no_wrap=True)
        table.add_column("Type")
        table.add_column("Message")
        table.add_column("Link", style="cyan")
        for n in self.notifications:
            link = strategy.message_link(n) if strategy else None
            table.add_row(
                n.id,
                format_datetime(n.created_at),
                humanize(n.type),
                Text(n.message or "", style="" if n.is_read else "bold"),
                link or "",
            )
        return table
