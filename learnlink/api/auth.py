"""Endpoints under /api/auth"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from learnlink.api.client import multipart
from learnlink.models import User
from learnlink.uploads import ImageUpload

if TYPE_CHECKING:
    from learnlink.api.client import ApiClient


class AuthAPI:

    def __init__(self, client: "ApiClient"):
        self.client = client

    async def login(self, email: str, password: str, role: Optional[str] = None) -> str:
        """Returns the issued JWT"""
        payload: Dict[str, Any] = {"email": email, "password": password}
        if role:
            payload["role"] = role
        response = await self.client.post(
            "/api/auth/login", json=payload, auth=False, fallback="Login failed"
        )
        body = response.body or {}
        return body.get("token") or (response.data or {}).get("token") or ""

    async def register(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Plain JSON registration (name, email, password, role)"""
        response = await self.client.post(
            "/api/auth/register", json=fields, auth=False, fallback="Registration failed"
        )
        return response.body or {}

    async def register_multipart(self, fields: Dict[str, Any],
                                 image: Optional[ImageUpload] = None) -> Dict[str, Any]:
        """Wizard registration: list fields go as JSON strings, image is optional"""
        response = await self.client.post(
            "/api/auth/register",
            files=multipart(fields, {"profileImage": image}),
            auth=False,
            fallback="Registration failed",
        )
        return response.body or {}

    async def forgot_password(self, email: str) -> str:
        response = await self.client.post(
            "/api/auth/forgot-password",
            json={"email": email},
            auth=False,
            fallback="Failed to send reset email",
        )
        return response.message or "Password reset code sent to your email"

    async def reset_password(self, email: str, otp: str, new_password: str) -> str:
        response = await self.client.post(
            "/api/auth/reset-password",
            json={"email": email, "otp": otp, "newPassword": new_password},
            auth=False,
            fallback="Failed to reset password",
        )
        return response.message or "Password reset successfully"

    async def me(self, token: Optional[str] = None) -> User:
        response = await self.client.get("/api/auth/me", token=token, fallback="Failed to fetch profile")
        body = response.body or {}
        return User.model_validate(body.get("user") or response.data or {})

    async def update_me(self, fields: Dict[str, Any], image: Optional[ImageUpload] = None) -> User:
        response = await self.client.put(
            "/api/auth/me",
            files=multipart(fields, {"profileImage": image}),
            fallback="Failed to update profile",
        )
        body = response.body or {}
        return User.model_validate(body.get("user") or response.data or {})
