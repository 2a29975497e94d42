"""
LearnLink Authentication
========================

  learnlink login            Parent/student login
  learnlink login --tutor    Tutor login
  learnlink logout           Clear the stored session
  learnlink whoami           Show current user

The API issues a JWT whose payload carries the user under a ``user``
claim. The token is stored as-is and only decoded locally (no signature
check, the API verifies it on every request).
"""

from typing import Optional

from jose import jwt
from jose.exceptions import JOSEError
from pydantic import ValidationError as ModelValidationError

from learnlink.api import ApiClient
from learnlink.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    LearnLinkError,
    ValidationError,
)
from learnlink.logging_config import get_logger
from learnlink.models import User
from learnlink.roles import Role
from learnlink.session import SessionStore

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def user_from_token(token: str) -> Optional[User]:
    """Decode the ``user`` claim; None when the token carries no user"""
    try:
        claims = jwt.get_unverified_claims(token)
    except JOSEError:
        raise InvalidTokenError()

    user_claim = claims.get("user")
    if not user_claim:
        return None
    try:
        return User.model_validate(user_claim)
    except ModelValidationError:
        raise InvalidTokenError()


def check_new_password(password: str, confirm: str) -> None:
    if password != confirm:
        raise ValidationError("Passwords do not match", field="confirmPassword")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", field="newPassword"
        )


class AuthManager:
    """
    Login, logout and profile refresh on top of the session store.

    A login form has a role (parent or tutor). Admin accounts may sign in
    through either form; any other mismatch is rejected and the session
    is left untouched.
    """

    def __init__(self, api: ApiClient, session: SessionStore):
        self.api = api
        self.session = session

    @property
    def current_user(self) -> Optional[User]:
        return self.session.user

    def is_authenticated(self) -> bool:
        return self.session.read().is_authenticated

    async def login(self, email: str, password: str, role: Role,
                    send_role_hint: bool = False) -> User:
        if not email or not password:
            raise ValidationError("Please enter your email and password")

        try:
            token = await self.api.auth.login(email, password, role.value if send_role_hint else None)
            if not token:
                raise AuthenticationError("Login failed")

            user = user_from_token(token)
            if user is None:
                user = await self.api.auth.me(token=token)

            user_role = Role.parse(user.role)
            if user_role not in (role, Role.ADMIN):
                raise AuthenticationError(
                    f"This account is not registered as a {role.value}. Please use the correct login page."
                )
        except LearnLinkError as e:
            logger.log_auth_event("login", False, user_email=email, reason=e.message)
            raise

        self.session.write(token, user)
        logger.log_auth_event("login", True, user_email=email, role=user.role)
        return user

    def logout(self) -> None:
        email = self.current_user.email if self.current_user else None
        self.session.clear()
        logger.log_auth_event("logout", True, user_email=email)

    async def refresh_profile(self) -> Optional[User]:
        """Pull the full user record from /api/auth/me into the session"""
        if not self.is_authenticated():
            return None
        user = await self.api.auth.me()
        self.session.update_user(user)
        return user

    async def request_password_reset(self, email: str) -> str:
        if not email:
            raise ValidationError("Please enter your email address", field="email")
        message = await self.api.auth.forgot_password(email)
        logger.log_auth_event("forgot_password", True, user_email=email)
        return message

    async def reset_password(self, email: str, otp: str, new_password: str, confirm: str) -> str:
        check_new_password(new_password, confirm)
        if not email or not otp:
            raise ValidationError("Please enter your email and the code we sent you", field="otp")
        try:
            message = await self.api.auth.reset_password(email, otp, new_password)
        except LearnLinkError as e:
            logger.log_auth_event("reset_password", False, user_email=email, reason=e.message)
            raise
        logger.log_auth_event("reset_password", True, user_email=email)
        return message
