"""/dashboard: send the visitor to their role's dashboard"""

from rich.panel import Panel
from rich.text import Text

from learnlink.roles import strategy_for
from learnlink.screens.base import Screen

NOT_LOGGED_IN = "Please log in to view your dashboard."
UNKNOWN_ROLE = "Unknown User Role"


class DashboardScreen(Screen):
    title = "Dashboard"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.message = ""

    async def load(self) -> None:
        user = self.user
        if user is None:
            self.message = NOT_LOGGED_IN
            return

        strategy = strategy_for(user)
        if strategy is None or strategy.role is None:
            self.message = UNKNOWN_ROLE
            return
        self.go(strategy.dashboard_path)

    def body(self):
        if self.message == UNKNOWN_ROLE:
            return Panel(
                Text.assemble(
                    (UNKNOWN_ROLE + "\n", "bold"),
                    "We couldn't determine your dashboard type. "
                    "Please contact support or try logging in again.",
                ),
                border_style="yellow",
            )
        if self.message:
            return Text(self.message)
        return None
