"""
Unit tests for the REPL application: navigation, redirects, slash commands
"""
import io

import pytest
from rich.console import Console

from learnlink.app import LearnLinkApp
from learnlink.screens.base import MessageScreen
from learnlink.screens.dashboard import DashboardScreen
from learnlink.screens.parent.bookings import ParentBookingsScreen
from learnlink.screens.tutor.dashboard import TutorDashboardScreen


@pytest.fixture
async def app(config, fake_api):
    console = Console(file=io.StringIO(), width=120, record=True)
    application = LearnLinkApp(config, console=console, transport=fake_api.transport)
    yield application
    await application.close()


def output(app) -> str:
    return app.console.export_text()


def log_in(app, user_factory, token_factory, role, **fields):
    user = user_factory(role, **fields)
    app.session.write(token_factory(user), user)
    return user


@pytest.mark.asyncio
async def test_dashboard_for_guest_asks_to_log_in(app):
    screen = await app.navigate("/dashboard")

    assert isinstance(screen, DashboardScreen)
    assert "Please log in to view your dashboard." in output(app)


@pytest.mark.asyncio
async def test_dashboard_redirects_to_role_dashboard(app, fake_api, user_factory, token_factory):
    log_in(app, user_factory, token_factory, "tutor")

    screen = await app.navigate("/dashboard")

    assert isinstance(screen, TutorDashboardScreen)
    assert screen.path == "/tutor-dashboard"
    # Redirect hops are not kept in history
    assert app.history == []


@pytest.mark.asyncio
async def test_unknown_role_sees_message(app, user_factory, token_factory):
    log_in(app, user_factory, token_factory, "principal")

    screen = await app.navigate("/dashboard")

    assert isinstance(screen, DashboardScreen)
    assert "Unknown User Role" in output(app)


@pytest.mark.asyncio
async def test_unknown_path_renders_not_found(app):
    screen = await app.navigate("/does-not-exist")
    assert isinstance(screen, MessageScreen)
    assert "Page not found: /does-not-exist" in output(app)


@pytest.mark.asyncio
async def test_back_returns_to_previous_page(app, fake_api, user_factory, token_factory):
    log_in(app, user_factory, token_factory, "parent")
    fake_api.on("GET", "/api/parent/bookings", data={"bookings": []})
    await app.navigate("/parent/bookings")
    await app.navigate("/notifications")

    assert await app.back() is True
    assert isinstance(app.screen, ParentBookingsScreen)
    assert await app.back() is False


@pytest.mark.asyncio
async def test_action_redirect_keeps_success_banner(app, fake_api, user_factory, token_factory):
    user = user_factory("parent", name="Priya")
    fake_api.on("POST", "/api/auth/login", body={"token": token_factory(user)})
    fake_api.on("GET", "/api/auth/me", body={"success": True, "user": user.to_api()})
    await app.navigate("/parent-login")

    await app.run_action(f"set email {user.email}")
    await app.run_action("set password testpassword123")
    await app.run_action("submit")

    assert app.screen.path == "/parent-dashboard"
    assert "Welcome back, Priya!" in output(app)
    assert app.session.user.id == user.id


@pytest.mark.asyncio
async def test_unknown_action_is_reported(app):
    await app.navigate("/")
    await app.run_action("dance")
    assert "Unknown action: dance" in output(app)


@pytest.mark.asyncio
async def test_slash_commands(app, user_factory, token_factory):
    log_in(app, user_factory, token_factory, "parent")
    await app.navigate("/")

    await app.command_handler.handle("/nav")
    await app.command_handler.handle("/frobnicate")
    text = output(app)
    assert "/parent/bookings" in text
    assert "Unknown command: /frobnicate" in text

    await app.command_handler.handle("/logout")
    assert app.session.user is None

    await app.command_handler.handle("/quit")
    assert app._running is False


@pytest.mark.asyncio
async def test_external_login_marks_identity_changed(app, config, user_factory, token_factory):
    from learnlink.session import SessionStore

    other = SessionStore(config.session_file)
    user = user_factory("tutor")
    other.write(token_factory(user), user)

    assert app.session.refresh() is True
    assert app._identity_changed is True
    assert app.navbar.stale is True


@pytest.mark.asyncio
async def test_crashing_action_does_not_end_the_session(app, monkeypatch):
    await app.navigate("/")

    async def broken(line):
        raise RuntimeError("screen exploded")

    monkeypatch.setattr(app.screen, "dispatch", broken)
    await app.run_action("anything")

    assert "Error: screen exploded" in output(app)
    assert app._running is True


@pytest.mark.asyncio
async def test_crashing_slash_command_is_reported(app):
    await app.navigate("/")

    async def broken(args=""):
        raise KeyError("history")

    app.command_handler.commands["/refresh"] = broken
    await app.command_handler.handle("/refresh")

    assert "Error: 'history'" in output(app)
    assert app._running is True
