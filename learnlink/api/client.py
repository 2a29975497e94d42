"""
LearnLink API Client
HTTP wrapper around the LearnLink REST API.

Every endpoint answers with an envelope ``{success, data, message}``.
Auth endpoints sometimes put the error text under ``msg`` instead.
Errors come back as exceptions (NetworkError, ApiError); screens decide
how to show them.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from learnlink.config import LearnLinkConfig
from learnlink.exceptions import ApiError, NetworkError
from learnlink.logging_config import get_logger
from learnlink.session import SessionStore

logger = get_logger(__name__)

UPLOADS_PREFIX = "/uploads/"


@dataclass
class APIResponse:
    """API Response wrapper"""
    status: int
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        if not 200 <= self.status < 300:
            return False
        if isinstance(self.body, dict) and self.body.get("success") is False:
            return False
        return True

    @property
    def data(self) -> Any:
        if isinstance(self.body, dict):
            return self.body.get("data")
        return None

    @property
    def message(self) -> Optional[str]:
        if isinstance(self.body, dict):
            return self.body.get("message") or self.body.get("msg")
        return None


def error_message(body: Any, fallback: str) -> str:
    """Pick the server's error text out of a response body"""
    if isinstance(body, dict):
        for key in ("message", "msg", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop unset filters so they are not sent as empty query parameters"""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != ""}


def form_fields(fields: Dict[str, Any]) -> Dict[str, str]:
    """Multipart text fields: skip unset values, JSON-encode lists, stringify the rest"""
    encoded = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, (list, dict)):
            encoded[key] = json.dumps(value)
        else:
            encoded[key] = str(value)
    return encoded


def multipart(fields: Dict[str, Any], files: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a multipart body; text fields ride as file parts without a filename"""
    parts: Dict[str, Any] = {key: (None, value) for key, value in form_fields(fields).items()}
    for key, upload in (files or {}).items():
        if upload is not None:
            parts[key] = upload.as_file()
    return parts


def resolve_image_url(base_url: str, path: Optional[str]) -> Optional[str]:
    """Paths under /uploads/ live on the API host; anything else is already absolute"""
    if not path:
        return None
    if path.startswith(UPLOADS_PREFIX):
        return f"{base_url.rstrip('/')}{path}"
    return path


class ApiClient:
    """Async client for the LearnLink backend"""

    def __init__(
        self,
        config: LearnLinkConfig,
        session: SessionStore,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        # Imported here so the endpoint modules can type-hint ApiClient
        from learnlink.api.admin import AdminAPI
        from learnlink.api.auth import AuthAPI
        from learnlink.api.notifications import NotificationsAPI
        from learnlink.api.parent import ParentAPI
        from learnlink.api.subjects import SubjectsAPI
        from learnlink.api.tutor import TutorAPI

        self.config = config
        self.base_url = config.api_base_url.rstrip('/')
        self.session = session
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.timeout,
            transport=transport,
        )

        self.auth = AuthAPI(self)
        self.notifications = NotificationsAPI(self)
        self.subjects = SubjectsAPI(self)
        self.parent = ParentAPI(self)
        self.tutor = TutorAPI(self)
        self.admin = AdminAPI(self)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _get_headers(self, auth: bool = True, token: Optional[str] = None) -> Dict[str, str]:
        """Get request headers"""
        headers = {"Accept": "application/json"}
        token = token or (self.session.token if auth else None)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        auth: bool = True,
        token: Optional[str] = None,
        fallback: str = "Request failed",
    ) -> APIResponse:
        """Make HTTP request and unwrap the envelope, raising on failure"""
        headers = self._get_headers(auth, token)
        started = time.perf_counter()

        try:
            response = await self._client.request(
                method,
                endpoint,
                params=clean_params(params),
                json=json,
                data=data,
                files=files,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.log_request(method, endpoint, 0, (time.perf_counter() - started) * 1000)
            raise NetworkError("The server took too long to respond. Please try again.", cause=str(e))
        except httpx.TransportError as e:
            logger.log_request(method, endpoint, 0, (time.perf_counter() - started) * 1000)
            raise NetworkError(cause=str(e))

        duration_ms = (time.perf_counter() - started) * 1000
        logger.log_request(method, endpoint, response.status_code, duration_ms)

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text} if response.text else None

        result = APIResponse(status=response.status_code, body=body, headers=dict(response.headers))
        if not result.success:
            raise ApiError(error_message(body, fallback), status_code=response.status_code, payload=body)
        return result

    async def get(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("POST", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("PUT", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("DELETE", endpoint, **kwargs)

    # ==================== Images ====================

    def image_url(self, path: Optional[str], name: Optional[str] = None) -> Optional[str]:
        """Resolve an image path; fall back to a generated avatar when a name is given"""
        url = resolve_image_url(self.base_url, path)
        if url is None and name:
            return self.avatar_url(name)
        return url

    def avatar_url(self, name: str) -> str:
        return f"{self.config.avatar_service_url}?name={quote(name)}&background=14b8a6&color=fff"
