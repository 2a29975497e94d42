"""
LearnLink CLI - Core Application

The REPL keeps one open screen. Slash commands move between screens; any
other input is an action on the open screen. After every command the
navigation bar and the screen are redrawn.
"""

import asyncio
import contextlib
from typing import List, Optional
from urllib.parse import urlencode

import httpx
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style

from learnlink import __version__
from learnlink.api import ApiClient
from learnlink.auth import AuthManager
from learnlink.commands import SlashCommandHandler
from learnlink.config import LearnLinkConfig
from learnlink.logging_config import get_logger, set_route, set_user_id
from learnlink.navbar import NavigationBar
from learnlink.router import Router
from learnlink.screens.base import Screen, ScreenContext
from learnlink.session import Session, SessionStore

logger = get_logger(__name__)

# A redirect chain longer than this is a loop
MAX_REDIRECTS = 5


class LearnLinkApp:
    """Main CLI Application"""

    def __init__(self, config: LearnLinkConfig, console: Optional[Console] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.console = console or Console()
        self.session = SessionStore(config.session_file)
        self.api = ApiClient(config, self.session, transport=transport)
        self.auth = AuthManager(self.api, self.session)
        self.navbar = NavigationBar(self.api, self.session, self.auth,
                                    preview_size=config.notification_preview)
        self.ctx = ScreenContext(
            config=config,
            session=self.session,
            api=self.api,
            auth=self.auth,
            navbar=self.navbar,
            console=self.console,
        )
        self.router = Router()
        self.command_handler = SlashCommandHandler(self)

        self.screen: Optional[Screen] = None
        self.history: List[str] = []
        self._identity_changed = False
        self._running = True
        self._unsubscribe = self.session.subscribe(self._on_session_change)

        self.key_bindings = self._create_key_bindings()
        self.prompt_style = Style.from_dict({
            'prompt': '#2DB8A1 bold',
            'path': '#4ADE80',
            'user': '#E5E5E5',
        })

    def _create_key_bindings(self) -> KeyBindings:
        """Create keyboard shortcuts"""
        kb = KeyBindings()

        @kb.add('c-l')
        def redraw(event):
            """Redraw the current page"""
            self.console.clear()
            self.show()

        @kb.add('c-c')
        def cancel(event):
            """Cancel current input"""
            event.app.current_buffer.reset()

        return kb

    def _on_session_change(self, session: Session, source: str) -> None:
        set_user_id(session.user_id)
        if source == "external":
            self._identity_changed = True

    # ==================== Navigation ====================

    async def navigate(self, path: str, push: bool = True) -> Screen:
        """Open ``path``, following redirects the screen asks for"""
        for _ in range(MAX_REDIRECTS):
            if self.navbar.stale:
                await self.navbar.load()

            set_route(path)
            logger.debug(f"Opening {path}")
            screen = self.router.resolve(self.ctx, path)
            await screen.open()

            if push and self.screen is not None and self.screen.path:
                self.history.append(self.screen.path + _query_suffix(self.screen))
            self.screen = screen
            push = False

            if not screen.redirect:
                break
            path, screen.redirect = screen.redirect, None

        self.show()
        return self.screen

    async def back(self) -> bool:
        if not self.history:
            return False
        await self.navigate(self.history.pop(), push=False)
        return True

    async def reload(self) -> None:
        """Reload the navbar and reopen the current screen"""
        self.navbar.stale = True
        if self.screen is None:
            await self.navigate("/", push=False)
            return
        await self.navigate(self.screen.path + _query_suffix(self.screen), push=False)

    async def run_action(self, line: str) -> None:
        screen = self.screen
        try:
            handled = screen is not None and await screen.dispatch(line)
        except Exception as e:
            logger.exception(f"Action '{line.split()[0]}' crashed on {screen.path}")
            self.console.print(f"\n[red]Error: {escape(str(e))}[/red]")
            if self.config.verbose:
                import traceback
                self.console.print(traceback.format_exc())
            return
        if not handled:
            name = line.split()[0]
            self.console.print(f"[yellow]Unknown action: {name}[/yellow]")
            self.console.print("Type /help for this page's actions")
            return

        if screen.redirect:
            target, screen.redirect = screen.redirect, None
            # The next screen will not show this one's banner
            for banner in screen.banners():
                self.console.print(banner)
            await self.navigate(target)
            return

        if self.navbar.stale:
            await self.navbar.load()
        self.show()

    # ==================== Rendering ====================

    def show(self) -> None:
        self.console.print(self.navbar.render())
        self.console.print(Rule(style="dim"))
        if self.screen is not None:
            self.console.print(self.screen.render())

    def _print_header(self):
        """Print CLI header"""
        banner = f"""
[bold #2DB8A1]╭──────────────────────────────────────────────────────────╮[/bold #2DB8A1]
[bold #2DB8A1]│[/bold #2DB8A1]   [bold white]LearnLink[/bold white] [dim]v{__version__}[/dim]                                       [bold #2DB8A1]│[/bold #2DB8A1]
[bold #2DB8A1]│[/bold #2DB8A1]   [dim]Find tutors, book sessions, manage your classes[/dim]       [bold #2DB8A1]│[/bold #2DB8A1]
[bold #2DB8A1]╰──────────────────────────────────────────────────────────╯[/bold #2DB8A1]
"""
        self.console.print(banner)

    def _print_welcome(self):
        """Print welcome message"""
        self.console.clear()
        self._print_header()
        self.console.print(f"  [bold]API:[/bold] [green]{self.config.api_base_url}[/green]")
        user = self.session.user
        if user is not None:
            self.console.print(f"  [bold]Signed in as:[/bold] [cyan]{self.navbar.display_name()}[/cyan]")
        self.console.print()
        self.console.print("[dim]  Ctrl+C[/dim] cancel  [dim]Ctrl+L[/dim] redraw  "
                           "[dim]/help[/dim] commands  [dim]/quit[/dim] exit")
        self.console.print()

    def _print_goodbye(self):
        """Print goodbye message"""
        self.console.print("\n[#2DB8A1]Thanks for using LearnLink! 👋[/#2DB8A1]")

    def _get_prompt_text(self) -> HTML:
        path = self.screen.path if self.screen is not None and self.screen.path else "/"
        return HTML(f'<prompt>❯</prompt> <path>{path}</path> ')

    # ==================== Run ====================

    async def run_interactive(self, start: str = "/"):
        """Run interactive REPL mode"""
        self._print_welcome()
        set_user_id(self.session.read().user_id)
        await self.navigate(start)

        session = PromptSession(
            history=FileHistory(self.config.history_file),
            auto_suggest=AutoSuggestFromHistory(),
            key_bindings=self.key_bindings,
            style=self.prompt_style,
            multiline=False,
            enable_history_search=True
        )
        watcher = asyncio.create_task(self.session.watch(self.config.session_poll_interval))

        try:
            while self._running:
                try:
                    user_input = await asyncio.get_event_loop().run_in_executor(
                        None,
                        lambda: session.prompt(self._get_prompt_text())
                    )

                    if self._identity_changed:
                        self._identity_changed = False
                        self.console.print("[yellow]Your session changed in another window[/yellow]")
                        await self.reload()

                    if not user_input.strip():
                        continue

                    if user_input.startswith('/'):
                        await self.command_handler.handle(user_input)
                        continue

                    await self.run_action(user_input)

                except KeyboardInterrupt:
                    self.console.print("\n[yellow]Use /quit to exit or Ctrl+D[/yellow]")
                    continue
                except EOFError:
                    break
        finally:
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher
            await self.close()

        self._print_goodbye()

    async def run_single(self, path: str):
        """Render one page and exit"""
        try:
            await self.navigate(path)
        finally:
            await self.close()

    async def close(self) -> None:
        self._unsubscribe()
        self.navbar.close()
        await self.api.close()

    def quit(self):
        """Quit the CLI"""
        self._running = False


def _query_suffix(screen: Screen) -> str:
    return f"?{urlencode(screen.query)}" if screen.query else ""
