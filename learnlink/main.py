#!/usr/bin/env python3
"""
LearnLink CLI - Main Entry Point

Usage:
    learnlink                         # Start interactive REPL
    learnlink login                   # Log in as a parent
    learnlink login --tutor           # Log in as a tutor
    learnlink open /parent/bookings   # Render one page and exit
    learnlink --help                  # Show help
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from learnlink import __version__
from learnlink.config import LearnLinkConfig
from learnlink.exceptions import LearnLinkError, NetworkError
from learnlink.logging_config import get_logger, setup_logging
from learnlink.roles import Role

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="learnlink",
        description="LearnLink - find tutors, book sessions and manage your classes from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  learnlink login                          Log in as a parent
  learnlink login --tutor                  Log in as a tutor
  learnlink logout                         Log out
  learnlink status                         Show who is logged in
  learnlink config --save                  Write current settings to config.json
  learnlink                                Start interactive mode
  learnlink open /parent/search-tutors     Show one page and exit

Keyboard Shortcuts (Interactive Mode):
  Ctrl+C          Cancel current input
  Ctrl+L          Redraw the current page
  Ctrl+R          Search command history
  Up/Down         Navigate history

Slash Commands:
  /go <path>      Open a page
  /back           Previous page
  /bell           Notifications
  /help           Commands and page actions
  /quit           Exit
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    login_parser = subparsers.add_parser("login", help="Log in to LearnLink")
    login_parser.add_argument("--tutor", action="store_true", help="Use the tutor login")
    login_parser.add_argument("--email", "-e", help="Account email")

    subparsers.add_parser("logout", help="Log out of LearnLink")
    subparsers.add_parser("status", help="Show authentication status")
    subparsers.add_parser("whoami", help="Show current user info")

    config_parser = subparsers.add_parser("config", help="Show the effective configuration")
    config_parser.add_argument("--save", action="store_true", help="Write it to config.json")

    open_parser = subparsers.add_parser("open", help="Render one page and exit")
    open_parser.add_argument("path", help="Page path, e.g. /parent/bookings")

    parser.add_argument(
        "--api-url",
        type=str,
        help="LearnLink API base URL (default: http://localhost:5000)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log to the terminal as well as the log file"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace) -> LearnLinkConfig:
    config = LearnLinkConfig.load_default()
    if args.api_url:
        config.api_base_url = args.api_url
    if args.verbose:
        config.verbose = True
    return config


async def login(config: LearnLinkConfig, console: Console, tutor: bool, email: str = "") -> bool:
    from learnlink.app import LearnLinkApp

    app = LearnLinkApp(config, console=console)
    role = Role.TUTOR if tutor else Role.PARENT
    try:
        email = email or Prompt.ask("Email")
        password = Prompt.ask("Password", password=True)
        user = await app.auth.login(email, password, role, send_role_hint=tutor)
    except LearnLinkError as e:
        console.print(f"\n[red]✗ {e.message}[/red]")
        return False
    finally:
        await app.close()

    console.print("\n[green]✓ Login successful![/green]")
    console.print(f"Welcome, [bold]{user.display_name}[/bold]!")
    return True


def show_status(config: LearnLinkConfig, console: Console) -> bool:
    from learnlink.roles import strategy_for
    from learnlink.session import SessionStore

    session = SessionStore(config.session_file).read()
    if not session.is_authenticated:
        console.print("[yellow]Not logged in[/yellow]")
        console.print("  [cyan]learnlink login[/cyan]          Parent login")
        console.print("  [cyan]learnlink login --tutor[/cyan]  Tutor login")
        return False

    user = session.user
    strategy = strategy_for(user)
    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Name", user.name or "")
    table.add_row("Email", user.email or "")
    table.add_row("Role", user.role or "")
    if strategy is not None and strategy.dashboard_path:
        table.add_row("Dashboard", strategy.dashboard_path)
    table.add_row("API", config.api_base_url)
    console.print(table)
    return True


def show_config(config: LearnLinkConfig, console: Console, save: bool = False) -> None:
    table = Table(title="LearnLink configuration", show_header=False)
    table.add_column(style="cyan")
    table.add_column()
    for key, value in config.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    if save:
        config.save_to_file()
        console.print(f"[green]✓ Saved to {config.config_file}[/green]")


def main():
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args()

    console = Console()
    config = build_config(args)
    setup_logging(config)

    if args.command == "login":
        success = asyncio.run(login(config, console, args.tutor, args.email or ""))
        sys.exit(0 if success else 1)

    elif args.command == "logout":
        from learnlink.session import SessionStore
        SessionStore(config.session_file).clear()
        console.print("[green]Logged out[/green]")
        sys.exit(0)

    elif args.command in ("status", "whoami"):
        sys.exit(0 if show_status(config, console) else 1)

    elif args.command == "config":
        show_config(config, console, save=args.save)
        sys.exit(0)

    from learnlink.app import LearnLinkApp
    app = LearnLinkApp(config, console=console)

    try:
        if args.command == "open":
            asyncio.run(app.run_single(args.path))
        else:
            asyncio.run(app.run_interactive())
    except KeyboardInterrupt:
        print("\n\nGoodbye! 👋")
        sys.exit(0)
    except NetworkError as e:
        logger.log_error_with_context(e, context=args.command or "interactive", url=config.api_base_url)
        console.print(f"\n[red]❌ Connection Error: {e.message}[/red]")
        console.print(f"\nThe LearnLink API at {config.api_base_url} is not available.")
        sys.exit(1)
    except LearnLinkError as e:
        logger.log_error_with_context(e, context=args.command or "interactive")
        console.print(f"\n[red]❌ {e.message}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
