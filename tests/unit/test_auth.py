"""
Unit tests for login, role checks and password reset
"""
import pytest

from learnlink.auth import check_new_password, user_from_token
from learnlink.exceptions import ApiError, AuthenticationError, InvalidTokenError, ValidationError
from learnlink.roles import Role
from learnlink.router import Router
from learnlink.screens.auth import (
    ForgotPasswordScreen,
    ParentLoginScreen,
    ResetPasswordScreen,
    TutorLoginScreen,
)


def test_user_claim_is_decoded_from_token(user_factory, token_factory):
    user = user_factory("tutor")
    decoded = user_from_token(token_factory(user))
    assert decoded.id == user.id
    assert decoded.role == "tutor"


def test_token_without_user_claim(token_factory):
    assert user_from_token(token_factory(sub="123")) is None


def test_garbage_token_is_invalid():
    with pytest.raises(InvalidTokenError):
        user_from_token("not-a-jwt")


@pytest.mark.asyncio
async def test_login_writes_session(auth, session, fake_api, user_factory, token_factory):
    """Successful login stores the token and the decoded user"""
    user = user_factory("parent")
    token = token_factory(user)
    fake_api.on("POST", "/api/auth/login", body={"success": True, "token": token})

    result = await auth.login(user.email, "testpassword123", Role.PARENT)

    assert result.id == user.id
    assert session.token == token
    assert session.user.id == user.id
    sent = fake_api.json(fake_api.calls("POST", "/api/auth/login")[0])
    assert "role" not in sent


@pytest.mark.asyncio
async def test_tutor_login_sends_role_hint(auth, fake_api, user_factory, token_factory):
    user = user_factory("tutor")
    fake_api.on("POST", "/api/auth/login", data={"token": token_factory(user)})

    await auth.login(user.email, "testpassword123", Role.TUTOR, send_role_hint=True)

    sent = fake_api.json(fake_api.calls("POST", "/api/auth/login")[0])
    assert sent["role"] == "tutor"


@pytest.mark.asyncio
async def test_token_without_user_falls_back_to_me(auth, session, fake_api, user_factory, token_factory):
    user = user_factory("parent")
    fake_api.on("POST", "/api/auth/login", body={"token": token_factory(sub=user.id)})
    fake_api.on("GET", "/api/auth/me", body={"success": True, "user": user.to_api()})

    await auth.login(user.email, "testpassword123", Role.PARENT)

    assert session.user.id == user.id


@pytest.mark.asyncio
async def test_invalid_credentials_leave_session_untouched(auth, session, fake_api):
    fake_api.on("POST", "/api/auth/login", body={"msg": "Invalid credentials"}, status=400)

    with pytest.raises(ApiError) as exc_info:
        await auth.login("nobody@example.com", "wrong", Role.PARENT)

    assert exc_info.value.message == "Invalid credentials"
    assert session.token is None
    assert session.user is None


@pytest.mark.asyncio
async def test_role_mismatch_is_rejected(auth, session, fake_api, user_factory, token_factory):
    """A tutor account cannot sign in through the student login"""
    tutor = user_factory("tutor")
    fake_api.on("POST", "/api/auth/login", body={"token": token_factory(tutor)})

    with pytest.raises(AuthenticationError) as exc_info:
        await auth.login(tutor.email, "testpassword123", Role.PARENT)

    assert "not registered as a parent" in exc_info.value.message
    assert session.user is None


@pytest.mark.asyncio
async def test_admin_may_use_either_login(auth, session, fake_api, user_factory, token_factory):
    admin = user_factory("admin")
    fake_api.on("POST", "/api/auth/login", body={"token": token_factory(admin)})

    await auth.login(admin.email, "testpassword123", Role.TUTOR)

    assert session.user.role == "admin"


@pytest.mark.asyncio
async def test_empty_credentials_never_reach_api(auth, fake_api):
    with pytest.raises(ValidationError):
        await auth.login("", "", Role.PARENT)
    assert fake_api.requests == []


def test_new_password_checks():
    with pytest.raises(ValidationError, match="do not match"):
        check_new_password("secret1", "secret2")
    with pytest.raises(ValidationError, match="at least 6"):
        check_new_password("abc", "abc")
    check_new_password("secret1", "secret1")


@pytest.mark.asyncio
async def test_reset_password_mismatch_sends_nothing(auth, fake_api):
    with pytest.raises(ValidationError):
        await auth.reset_password("a@b.c", "123456", "secret1", "secret2")
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_reset_password_posts_otp(auth, fake_api):
    fake_api.on("POST", "/api/auth/reset-password", message="Password reset successfully")

    message = await auth.reset_password("a@b.c", "123456", "secret1", "secret1")

    assert message == "Password reset successfully"
    sent = fake_api.json(fake_api.calls("POST", "/api/auth/reset-password")[0])
    assert sent == {"email": "a@b.c", "otp": "123456", "newPassword": "secret1"}


@pytest.mark.asyncio
async def test_login_screen_redirects_to_dashboard(ctx, fake_api, user_factory, token_factory):
    user = user_factory("tutor", name="Meera")
    fake_api.on("POST", "/api/auth/login", body={"token": token_factory(user)})
    screen = TutorLoginScreen(ctx, path="/tutor-login")

    await screen.dispatch(f"set email {user.email}")
    await screen.dispatch("set password testpassword123")
    await screen.dispatch("submit")

    assert screen.error is None
    assert screen.redirect == "/dashboard"
    assert screen.success == "Welcome back, Meera!"
    assert "password" not in screen.values


@pytest.mark.asyncio
async def test_login_screen_shows_server_error(ctx, fake_api):
    fake_api.on("POST", "/api/auth/login", body={"message": "Invalid credentials"}, status=401)
    screen = ParentLoginScreen(ctx, path="/parent-login")

    await screen.dispatch("set email someone@example.com")
    await screen.dispatch("set password wrong")
    await screen.dispatch("submit")

    assert screen.error == "Invalid credentials"
    assert screen.redirect is None


@pytest.mark.asyncio
async def test_forgot_password_screen_hands_email_to_reset(ctx, fake_api):
    """Requesting a code moves on to the reset page with the email filled in"""
    fake_api.on("POST", "/api/auth/forgot-password", body={"success": True, "msg": "OTP sent to your email"})
    screen = ForgotPasswordScreen(ctx, path="/forgot-password")
    await screen.open()

    await screen.dispatch("submit")
    assert screen.error == "Please enter your email address"
    assert fake_api.requests == []

    await screen.dispatch("set email asha@example.com")
    await screen.dispatch("submit")

    assert screen.success == "OTP sent to your email"
    assert fake_api.json(fake_api.requests[0]) == {"email": "asha@example.com"}
    reset = Router().resolve(ctx, screen.redirect)
    assert isinstance(reset, ResetPasswordScreen)
    assert reset.email == "asha@example.com"


@pytest.mark.asyncio
async def test_reset_screen_without_email_goes_back(ctx, fake_api):
    screen = ResetPasswordScreen(ctx, path="/reset-password")
    await screen.open()
    assert screen.redirect == "/forgot-password"


@pytest.mark.asyncio
async def test_reset_screen_checks_passwords_then_posts(ctx, fake_api):
    fake_api.on("POST", "/api/auth/reset-password", body={"success": True, "msg": "Password reset successful"})
    fake_api.on("POST", "/api/auth/forgot-password", body={"success": True, "msg": "OTP sent"})
    screen = ResetPasswordScreen(ctx, query={"email": "asha@example.com"}, path="/reset-password")
    await screen.open()
    assert screen.redirect is None

    for line in ("set otp 482913", "set newPassword abc12", "set confirmPassword abc12", "submit"):
        await screen.dispatch(line)
    assert screen.error == "Password must be at least 6 characters long"

    for line in ("set newPassword abc123", "set confirmPassword abc124", "submit"):
        await screen.dispatch(line)
    assert screen.error == "Passwords do not match"
    assert fake_api.calls("POST", "/api/auth/reset-password") == []

    await screen.dispatch("set confirmPassword abc123")
    await screen.dispatch("submit")

    assert screen.success == "Password reset successful"
    assert screen.redirect == "/parent-login"
    sent = fake_api.json(fake_api.calls("POST", "/api/auth/reset-password")[0])
    assert sent == {"email": "asha@example.com", "otp": "482913", "newPassword": "abc123"}

    await screen.dispatch("resend")
    assert screen.success == "New OTP sent to your email!"
    assert len(fake_api.calls("POST", "/api/auth/forgot-password")) == 1
