"""
Slash commands for the LearnLink REPL

Available commands:
  /go <path>    Open a page, e.g. /go /parent/search-tutors?subject=Math
  /back         Return to the previous page
  /refresh      Reload the current page
  /bell         Open or close the notification dropdown
  /nav          Show the links for your role
  /routes       List every page
  /logout       Log out
  /help         Show commands and the current page's actions
  /quit         Exit

Anything not starting with "/" is an action on the current page.
"""

from typing import TYPE_CHECKING, Awaitable, Callable, Dict

from rich.markup import escape
from rich.table import Table

from learnlink.exceptions import LearnLinkError
from learnlink.logging_config import get_logger

if TYPE_CHECKING:
    from learnlink.app import LearnLinkApp

logger = get_logger(__name__)


class SlashCommandHandler:
    """Handles slash commands"""

    def __init__(self, app: "LearnLinkApp"):
        self.app = app
        self.console = app.console

        self.commands: Dict[str, Callable[[str], Awaitable[None]]] = {
            "/go": self.cmd_go,
            "/open": self.cmd_go,
            "/back": self.cmd_back,
            "/refresh": self.cmd_refresh,
            "/r": self.cmd_refresh,
            "/bell": self.cmd_bell,
            "/nav": self.cmd_nav,
            "/routes": self.cmd_routes,
            "/logout": self.cmd_logout,
            "/help": self.cmd_help,
            "/h": self.cmd_help,
            "/?": self.cmd_help,
            "/quit": self.cmd_quit,
            "/exit": self.cmd_quit,
            "/q": self.cmd_quit,
        }

        self.descriptions = {
            "/go": "Open a page: /go <path>",
            "/back": "Return to the previous page",
            "/refresh": "Reload the current page",
            "/bell": "Open or close notifications (opening marks them read)",
            "/nav": "Show the links for your role",
            "/routes": "List every page",
            "/logout": "Log out",
            "/help": "Show this help",
            "/quit": "Exit LearnLink",
        }

    async def handle(self, input_str: str) -> None:
        """Handle a slash command"""
        parts = input_str.strip().split(maxsplit=1)
        command = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        if command in self.commands:
            try:
                await self.commands[command](args)
            except LearnLinkError as e:
                logger.warning(f"{command} failed: {e.message}")
                self.console.print(f"[red]{e.message}[/red]")
            except Exception as e:
                logger.exception(f"{command} crashed")
                self.console.print(f"\n[red]Error: {escape(str(e))}[/red]")
        else:
            self.console.print(f"[yellow]Unknown command: {command}[/yellow]")
            self.console.print("Type /help for available commands")

    async def cmd_go(self, args: str = "") -> None:
        path = args.strip()
        if not path:
            self.console.print("[yellow]Usage: /go <path>[/yellow]")
            return
        await self.app.navigate(path)

    async def cmd_back(self, args: str = "") -> None:
        if not await self.app.back():
            self.console.print("[dim]Nothing to go back to[/dim]")

    async def cmd_refresh(self, args: str = "") -> None:
        await self.app.reload()

    async def cmd_bell(self, args: str = "") -> None:
        result = await self.app.navbar.toggle_dropdown()
        if result is not None and result.failed:
            self.console.print(
                f"[yellow]{len(result.failed)} notification(s) could not be marked as read[/yellow]"
            )
        self.app.show()

    async def cmd_nav(self, args: str = "") -> None:
        table = Table(title="Navigation", show_header=False)
        table.add_column("Page")
        table.add_column("Path", style="cyan")
        for link in self.app.navbar.links():
            table.add_row(link.label, link.path)
        self.console.print(table)

    async def cmd_routes(self, args: str = "") -> None:
        table = Table(title="Pages", show_header=False, box=None)
        table.add_column(style="cyan")
        for pattern in self.app.router.patterns():
            table.add_row(pattern)
        self.console.print(table)

    async def cmd_logout(self, args: str = "") -> None:
        if self.app.session.user is None:
            self.console.print("[dim]Not logged in[/dim]")
            return
        self.app.navbar.logout()
        self.console.print("[green]Logged out[/green]")
        await self.app.navigate("/")

    async def cmd_help(self, args: str = "") -> None:
        """Show help information"""
        table = Table(title="Available Commands", show_header=True, header_style="bold cyan")
        table.add_column("Command", style="green")
        table.add_column("Description")
        for cmd, description in self.descriptions.items():
            table.add_row(cmd, description)
        self.console.print(table)

        screen = self.app.screen
        if screen is not None and screen.actions():
            self.console.print(screen.action_help())

        self.console.print("\n[bold]Keyboard Shortcuts[/bold]")
        shortcuts = Table(show_header=False, box=None)
        shortcuts.add_column("Key", style="cyan")
        shortcuts.add_column("Action")
        shortcuts.add_row("Ctrl+C", "Cancel current input")
        shortcuts.add_row("Ctrl+L", "Redraw the current page")
        shortcuts.add_row("Ctrl+R", "Search command history")
        shortcuts.add_row("Up/Down", "Navigate history")
        self.console.print(shortcuts)

    async def cmd_quit(self, args: str = "") -> None:
        self.app.quit()
