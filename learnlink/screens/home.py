"""Landing screen"""

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from learnlink.roles import strategy_for
from learnlink.screens.base import Screen

FEATURES = [
    ("Verified tutors", "Every tutor is reviewed by our team before they can be booked."),
    ("Flexible booking", "Pick a time that fits your schedule, or join a tutor's waitlist."),
    ("Honest reviews", "Ratings come only from families who completed a session."),
]


class HomeScreen(Screen):
    title = "LearnLink"

    def body(self):
        hero = Panel(
            Text.assemble(
                ("Unlock Your Potential with the Perfect Tutor\n", "bold #2DB8A1"),
                ("Find, book and message expert tutors in every subject.", ""),
            ),
            border_style="#2DB8A1",
        )

        features = Table(title="Why Choose LearnLink?", show_header=False, box=None)
        features.add_column(style="bold")
        features.add_column()
        for name, text in FEATURES:
            features.add_row(name, text)

        strategy = strategy_for(self.user)
        if self.user is None:
            start = Text("Get started: /go /parent-login, /go /tutor-login or /go /register/parent", style="dim")
        elif strategy is not None:
            start = Text(f"Continue to your dashboard: /go {strategy.dashboard_path}", style="dim")
        else:
            start = Text("")
        return Group(hero, features, start)
