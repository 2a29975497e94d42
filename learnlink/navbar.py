"""
Navigation bar: who is logged in, role links, and the notification bell.

The bar reloads itself whenever the logged-in identity changes, whether
that change came from this process or from another terminal.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.api import ApiClient
from learnlink.api.notifications import MarkReadResult
from learnlink.auth import AuthManager
from learnlink.components.format import format_datetime
from learnlink.exceptions import LearnLinkError
from learnlink.logging_config import get_logger
from learnlink.models import Notification
from learnlink.roles import NavLink, RoleStrategy, strategy_for
from learnlink.session import Session, SessionStore

logger = get_logger(__name__)


class NavigationBar:

    def __init__(self, api: ApiClient, session: SessionStore, auth: AuthManager,
                 preview_size: int = 5):
        self.api = api
        self.session = session
        self.auth = auth
        self.preview_size = preview_size

        self.notifications: List[Notification] = []
        self.busy_times: Dict[str, Any] = {}
        self.dropdown_open = False
        self.last_mark_read: Optional[MarkReadResult] = None

        self._loaded_for: Optional[Tuple[Optional[str], str]] = None
        self.stale = True
        self._unsubscribe = session.subscribe(self._on_session_change)

    def _identity(self, session: Session) -> Tuple[Optional[str], str]:
        return (session.token, session.user_id)

    def _on_session_change(self, session: Session, source: str) -> None:
        if self._identity(session) != self._loaded_for:
            self.stale = True
            self.dropdown_open = False

    def close(self) -> None:
        self._unsubscribe()

    @property
    def strategy(self) -> Optional[RoleStrategy]:
        return strategy_for(self.session.user)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)

    def links(self) -> List[NavLink]:
        strategy = self.strategy
        return strategy.nav_links(self.session.user) if strategy else []

    def display_name(self) -> str:
        user = self.session.user
        strategy = self.strategy
        if user is None:
            return ""
        return strategy.display_name(user) if strategy else user.display_name

    # ==================== Loading ====================

    async def load(self) -> None:
        """Fetch profile, notifications and (parents only) tutor busy times"""
        session = self.session.read()
        self._loaded_for = self._identity(session)
        self.stale = False

        if not session.is_authenticated:
            self.notifications = []
            self.busy_times = {}
            return

        try:
            await self.auth.refresh_profile()
        except LearnLinkError as e:
            logger.warning(f"Could not refresh profile: {e.message}")

        # Profile refresh re-writes the session but the identity is the same
        self._loaded_for = self._identity(self.session.read())
        self.stale = False

        try:
            self.notifications = await self.api.notifications.list()
        except LearnLinkError as e:
            logger.warning(f"Could not fetch notifications: {e.message}")
            self.notifications = []

        strategy = self.strategy
        if strategy and strategy.fetches_busy_times:
            try:
                self.busy_times = await self.api.parent.busy_times()
            except LearnLinkError as e:
                logger.warning(f"Could not fetch busy times: {e.message}")
                self.busy_times = {}
        else:
            self.busy_times = {}

    # ==================== Bell ====================

    async def toggle_dropdown(self) -> Optional[MarkReadResult]:
        """Open or close the dropdown; opening marks every unread item read"""
        self.dropdown_open = not self.dropdown_open
        if not self.dropdown_open:
            return None

        unread_ids = [n.id for n in self.notifications if not n.is_read]
        if not unread_ids:
            return None

        result = await self.api.notifications.mark_many_read(unread_ids)
        self.mark_local_read(result.succeeded)
        self.last_mark_read = result
        return result

    def mark_local_read(self, ids: Iterable[str]) -> None:
        """Flip the bar's copies of notifications the server marked read"""
        done = set(ids)
        for notification in self.notifications:
            if notification.id in done:
                notification.is_read = True

    def preview(self) -> List[Notification]:
        return self.notifications[:self.preview_size]

    def message_link(self, notification: Notification) -> Optional[str]:
        strategy = self.strategy
        return strategy.message_link(notification) if strategy else None

    def busy_times_for(self, tutor_id: str) -> List[Any]:
        return list(self.busy_times.get(tutor_id) or [])

    def logout(self) -> None:
        self.auth.logout()

    # ==================== Rendering ====================

    def render(self):
        bar = Table.grid(expand=True, padding=(0, 2))
        bar.add_column(justify="left")
        bar.add_column(justify="right")

        brand = Text("LearnLink", style="bold #2DB8A1")
        links = Text("  ".join(f"{link.label} ({link.path})" for link in self.links()), style="dim")

        user = self.session.user
        if user is not None:
            bell = Text(f"🔔 {self.unread_count}" if self.unread_count else "🔔", style="bold red" if self.unread_count else "")
            who = Text.assemble(bell, "  ", (self.display_name(), "bold"), "  ", ("/logout", "dim"))
        else:
            who = Text("")

        bar.add_row(brand, who)
        bar.add_row(links, "")

        if not self.dropdown_open:
            return bar
        return Group(bar, self.render_dropdown())

    def render_dropdown(self):
        table = Table(title="Notifications", show_header=False, expand=True, title_justify="left")
        table.add_column("When", style="dim", no_wrap=True)
        table.add_column("Message")
        table.add_column("Link", style="cyan")

        if not self.notifications:
            table.add_row("", "No new notifications", "")
        for notification in self.preview():
            style = "bold" if not notification.is_read else ""
            table.add_row(
                format_datetime(notification.created_at),
                Text(notification.message or "", style=style),
                self.message_link(notification) or "",
            )
        table.caption = "View all: /go /notifications"

        if self.last_mark_read and not self.last_mark_read.complete:
            table.caption += f"  ({self.last_mark_read.summary()})"
        return table
