"""
Screen base classes.

A screen is one route. ``open()`` checks the role guard and runs ``load()``;
``render()`` returns a rich renderable; user input is dispatched to methods
marked with ``@action``. An action that raises a LearnLinkError does not
propagate: the message lands in the screen's error banner.
"""

import functools
import shlex
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)

from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from learnlink.exceptions import LearnLinkError, NotAuthenticatedError, ValidationError
from learnlink.logging_config import get_logger
from learnlink.models import User
from learnlink.roles import Role
from learnlink.uploads import ImageUpload, load_image

if TYPE_CHECKING:
    from learnlink.api import ApiClient
    from learnlink.auth import AuthManager
    from learnlink.config import LearnLinkConfig
    from learnlink.navbar import NavigationBar
    from learnlink.session import SessionStore

logger = get_logger(__name__)

ActionFunc = Callable[..., Awaitable[Any]]


def _ask(prompt: str, password: bool = False) -> str:
    return Prompt.ask(prompt, password=password)


def _confirm(prompt: str) -> bool:
    return Confirm.ask(prompt, default=False)


@dataclass
class ScreenContext:
    """Everything a screen may use; tests swap the prompts for stubs"""
    config: "LearnLinkConfig"
    session: "SessionStore"
    api: "ApiClient"
    auth: "AuthManager"
    navbar: "NavigationBar"
    console: Console = field(default_factory=Console)
    confirm: Callable[[str], bool] = _confirm
    ask: Callable[..., str] = _ask


def action(name: Optional[str] = None, usage: str = ""):
    """
    Mark a coroutine method as a screen action.

    The method receives the rest of the input line as one string. Errors
    the client raises on purpose become the error banner.
    """
    def decorator(func: ActionFunc) -> ActionFunc:
        @functools.wraps(func)
        async def wrapper(self: "Screen", args: str = "") -> Any:
            self.error = None
            self.success = None
            try:
                return await func(self, args)
            except LearnLinkError as e:
                self.error = e.message
                logger.warning(f"{type(self).__name__}.{func.__name__} failed: {e.message}",
                               extra={"error_code": e.code})
                return None

        wrapper.action_name = name or func.__name__.replace("_", "-")  # type: ignore[attr-defined]
        wrapper.action_usage = usage  # type: ignore[attr-defined]
        return wrapper
    return decorator


def split_args(args: str) -> List[str]:
    try:
        return shlex.split(args)
    except ValueError:
        return args.split()


def require_args(args: str, count: int, usage: str) -> List[str]:
    parts = split_args(args)
    if len(parts) < count:
        raise ValidationError(f"Usage: {usage}")
    return parts


class Screen:
    """One route's worth of state and actions"""

    title = ""
    # None means anyone, logged in or not
    allowed_roles: Optional[Tuple[Role, ...]] = None

    def __init__(self, ctx: ScreenContext, params: Optional[Dict[str, str]] = None,
                 query: Optional[Dict[str, str]] = None, path: str = ""):
        self.ctx = ctx
        self.params = params or {}
        self.query = query or {}
        self.path = path

        self.error: Optional[str] = None
        self.success: Optional[str] = None
        self.denied: Optional[str] = None
        self.loading = False
        # Set by an action that wants the app to open another route
        self.redirect: Optional[str] = None

    # ==================== Shortcuts ====================

    @property
    def api(self) -> "ApiClient":
        return self.ctx.api

    @property
    def console(self) -> Console:
        return self.ctx.console

    @property
    def user(self) -> Optional[User]:
        return self.ctx.session.user

    @property
    def role(self) -> Optional[Role]:
        return Role.parse(self.user.role) if self.user else None

    def require_user(self) -> User:
        user = self.user
        if user is None or not self.ctx.session.token:
            raise NotAuthenticatedError()
        return user

    def go(self, path: str) -> None:
        self.redirect = path

    # ==================== Lifecycle ====================

    def access_message(self) -> Optional[str]:
        if self.allowed_roles is None:
            return None
        if self.user is None:
            return "Please log in to access this page."
        if self.role not in self.allowed_roles:
            names = " or ".join(r.value for r in self.allowed_roles)
            return f"Access denied. This page is only available to {names} accounts."
        return None

    async def open(self) -> None:
        self.denied = self.access_message()
        if self.denied:
            return
        await self.refresh()

    async def refresh(self) -> None:
        if self.denied:
            return
        self.loading = True
        try:
            await self.load()
        except LearnLinkError as e:
            self.error = e.message
            logger.warning(f"Loading {self.path or type(self).__name__} failed: {e.message}")
        finally:
            self.loading = False

    async def load(self) -> None:
        """Fetch whatever the screen shows"""

    # ==================== Actions ====================

    def actions(self) -> Dict[str, ActionFunc]:
        found: Dict[str, ActionFunc] = {}
        for attr in dir(type(self)):
            member = getattr(type(self), attr, None)
            action_name = getattr(member, "action_name", None)
            if action_name:
                found[action_name] = getattr(self, attr)
        return found

    async def dispatch(self, line: str) -> bool:
        """Run ``<action> [args]``; False when no such action exists"""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return False
        handler = self.actions().get(parts[0].lower())
        if handler is None or self.denied:
            return False
        await handler(parts[1] if len(parts) > 1 else "")
        return True

    def action_help(self) -> Table:
        table = Table(title="Actions", show_header=True, header_style="bold cyan")
        table.add_column("Action", style="green")
        table.add_column("Description")
        for name, handler in sorted(self.actions().items()):
            usage = getattr(handler, "action_usage", "") or name
            doc = (handler.__doc__ or "").strip().splitlines()
            table.add_row(usage, doc[0] if doc else "")
        return table

    # ==================== Rendering ====================

    def banners(self) -> List[Any]:
        out: List[Any] = []
        if self.error:
            out.append(Panel(Text(self.error), border_style="red", title="Error", title_align="left"))
        if self.success:
            out.append(Panel(Text(self.success), border_style="green"))
        return out

    def render(self):
        parts: List[Any] = [Text(self.title, style="bold #2DB8A1")] if self.title else []
        if self.denied:
            parts.append(Panel(Text(self.denied), border_style="yellow"))
            return Group(*parts)

        parts.extend(self.banners())
        if self.loading:
            parts.append(Text("Loading...", style="dim"))
        else:
            body = self.body()
            if body is not None:
                parts.append(body)
        return Group(*parts)

    def body(self):
        return None


class FormField(NamedTuple):
    name: str
    label: str
    secret: bool = False


class FormScreen(Screen):
    """
    A screen holding a form. ``set <field> <value>`` fills a field; a secret
    field given without a value is read with a hidden prompt.
    """

    fields: Sequence[FormField] = ()
    accepts_image = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.values: Dict[str, Any] = {}
        self.image: Optional[ImageUpload] = None

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def set_value(self, name: str, value: Any) -> None:
        self.values[name] = value

    @action("set", usage="set <field> <value>")
    async def set_field(self, args: str) -> None:
        """Fill in a form field"""
        parts = args.strip().split(maxsplit=1)
        if not parts:
            raise ValidationError(f"Usage: set <field> <value>. Fields: {', '.join(self.field_names())}")

        name = parts[0]
        known = {f.name: f for f in self.fields}
        if not known:
            raise ValidationError("Nothing to set on this step", field=name)
        if name not in known:
            raise ValidationError(f"Unknown field '{name}'. Fields: {', '.join(known)}", field=name)

        if len(parts) > 1:
            value = parts[1]
        elif known[name].secret:
            value = self.ctx.ask(known[name].label, password=True)
        else:
            value = ""
        self.set_value(name, value)

    @action("image", usage="image <path>")
    async def attach_image(self, args: str) -> None:
        """Attach an image file (max 5MB)"""
        if not self.accepts_image:
            raise ValidationError("This form does not take an image")
        path = args.strip()
        if not path:
            self.image = None
            self.success = "Image removed"
            return
        self.image = await load_image(path)
        self.success = f"Attached {self.image.filename} ({self.image.size_bytes // 1024} KB)"

    def form_table(self, values: Optional[Dict[str, Any]] = None) -> Table:
        values = self.values if values is None else values
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(style="dim")
        table.add_column()
        for f in self.fields:
            value = values.get(f.name, "")
            if f.secret and value:
                value = "•" * len(str(value))
            table.add_row(f"{f.label} [{f.name}]", str(value) if value not in (None, "") else "")
        if self.accepts_image:
            table.add_row("Image", self.image.filename if self.image else "(none)")
        return table


class MessageScreen(Screen):
    """Static text, used for not-found and dispatch fallbacks"""

    def __init__(self, ctx: ScreenContext, message: str, title: str = "", **kwargs):
        super().__init__(ctx, **kwargs)
        self.message = message
        self.title = title

    def body(self):
        return Panel(Text(self.message), border_style="yellow")
