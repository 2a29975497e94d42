"""Login, simple registration and password reset screens"""

from urllib.parse import urlencode

from rich.console import Group
from rich.text import Text

from learnlink.auth import check_new_password
from learnlink.exceptions import ValidationError
from learnlink.roles import Role
from learnlink.screens.base import FormField, FormScreen, action


class LoginScreen(FormScreen):
    """Email/password login for one role"""

    title = "Login"
    role = Role.PARENT
    send_role_hint = False
    fields = (
        FormField("email", "Email"),
        FormField("password", "Password", secret=True),
    )

    @action("submit")
    async def submit(self, args: str) -> None:
        """Log in with the entered email and password"""
        user = await self.ctx.auth.login(
            self.values.get("email", ""),
            self.values.get("password", ""),
            self.role,
            send_role_hint=self.send_role_hint,
        )
        self.values.pop("password", None)
        self.success = f"Welcome back, {user.display_name}!"
        self.go("/dashboard")

    def body(self):
        hint = Text(
            "set email <email>, set password, then submit.  Forgot it? /go /forgot-password",
            style="dim",
        )
        return Group(self.form_table(), hint)


class ParentLoginScreen(LoginScreen):
    title = "Student Login"
    role = Role.PARENT


class TutorLoginScreen(LoginScreen):
    title = "Tutor Login"
    role = Role.TUTOR
    send_role_hint = True


class RegisterScreen(FormScreen):
    """Single-page registration with a role choice"""

    title = "Sign Up"
    fields = (
        FormField("name", "Name"),
        FormField("email", "Email"),
        FormField("password", "Password", secret=True),
        FormField("role", "Role (parent or tutor)"),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.values["role"] = Role.PARENT.value

    @action("submit")
    async def submit(self, args: str) -> None:
        """Create the account"""
        missing = [f.name for f in self.fields if not self.values.get(f.name)]
        if missing:
            raise ValidationError("Please fill in all required fields", field=missing[0])
        if Role.parse(self.values["role"]) not in (Role.PARENT, Role.TUTOR):
            raise ValidationError("Role must be parent or tutor", field="role")

        await self.api.auth.register({name: self.values[name] for name in self.field_names()})
        self.success = "Account created. You can log in now."
        self.go("/tutor-login" if self.values["role"] == Role.TUTOR.value else "/parent-login")

    def body(self):
        return self.form_table()


class ForgotPasswordScreen(FormScreen):
    title = "Forgot Password"
    fields = (FormField("email", "Email"),)

    @action("submit")
    async def submit(self, args: str) -> None:
        """Email a reset code"""
        email = self.values.get("email", "")
        self.success = await self.ctx.auth.request_password_reset(email)
        self.go(f"/reset-password?{urlencode({'email': email})}")

    def body(self):
        return Group(
            self.form_table(),
            Text("We'll email you a code to reset your password.", style="dim"),
        )


class ResetPasswordScreen(FormScreen):
    """Second step of the reset: the emailed code plus a new password"""

    title = "Reset Password"
    fields = (
        FormField("otp", "Code from email"),
        FormField("newPassword", "New password", secret=True),
        FormField("confirmPassword", "Confirm password", secret=True),
    )

    @property
    def email(self) -> str:
        return self.query.get("email", "")

    async def load(self) -> None:
        if not self.email:
            self.go("/forgot-password")

    @action("submit")
    async def submit(self, args: str) -> None:
        """Set the new password"""
        new_password = self.values.get("newPassword", "")
        confirm = self.values.get("confirmPassword", "")
        check_new_password(new_password, confirm)
        self.success = await self.ctx.auth.reset_password(
            self.email, self.values.get("otp", ""), new_password, confirm
        )
        self.go("/parent-login")

    @action("resend")
    async def resend(self, args: str) -> None:
        """Send a fresh code"""
        await self.ctx.auth.request_password_reset(self.email)
        self.success = "New OTP sent to your email!"

    def body(self):
        return Group(
            Text(f"Resetting password for {self.email}"),
            self.form_table(),
        )
