"""
LearnLink - Test Configuration and Fixtures
"""
import io
import json
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from faker import Faker
from jose import jwt
from rich.console import Console

from learnlink.api import ApiClient
from learnlink.auth import AuthManager
from learnlink.config import LearnLinkConfig
from learnlink.models import User
from learnlink.navbar import NavigationBar
from learnlink.screens.base import ScreenContext
from learnlink.session import SessionStore

fake = Faker()


class FakeAPI:
    """
    In-memory LearnLink backend behind httpx.MockTransport.

    Routes are keyed by (method, path). A route answers with a fixed body or
    with a callable that receives the request. Unknown routes answer 404.
    Every request is recorded.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    @staticmethod
    def envelope(data: Any = None, message: Optional[str] = None, success: bool = True) -> Dict[str, Any]:
        return {"success": success, "data": data, "message": message}

    def on(self, method: str, path: str, body: Any = None, status: int = 200, **envelope) -> None:
        """Register a route; ``data=``/``message=`` build a success envelope"""
        if body is None:
            body = self.envelope(**envelope)
        self.routes[(method.upper(), path)] = (status, body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404, json={"success": False, "message": f"No route for {request.method} {request.url.path}"}
            )

        status, body = route
        if callable(body):
            body = body(request)
            if isinstance(body, httpx.Response):
                return body
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    @staticmethod
    def json(request: httpx.Request) -> Any:
        return json.loads(request.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


class Prompts:
    """Scripted answers for confirm dialogs and hidden prompts"""

    def __init__(self):
        self.confirm_answer = True
        self.answers: List[str] = []
        self.asked: List[str] = []

    def confirm(self, prompt: str) -> bool:
        self.asked.append(prompt)
        return self.confirm_answer

    def ask(self, prompt: str, password: bool = False) -> str:
        self.asked.append(prompt)
        return self.answers.pop(0) if self.answers else ""


def make_user(role: str = "parent", **fields) -> User:
    """Create a user record the way the API sends it"""
    data = {
        "_id": fake.hexify("^" * 24),
        "name": fake.name(),
        "email": fake.email(),
        "role": role,
    }
    data.update(fields)
    return User.model_validate(data)


def make_token(user: Optional[User] = None, **claims) -> str:
    """A JWT shaped like the ones the API issues"""
    if user is not None:
        claims["user"] = user.to_api()
    return jwt.encode(claims, "test-secret-key-for-testing-only", algorithm="HS256")


@pytest.fixture
def user_factory() -> Callable[..., User]:
    return make_user


@pytest.fixture
def token_factory() -> Callable[..., str]:
    return make_token


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def prompts() -> Prompts:
    return Prompts()


@pytest.fixture
def config(tmp_path) -> LearnLinkConfig:
    """Configuration rooted in a throwaway directory"""
    return LearnLinkConfig(config_dir=str(tmp_path), api_base_url="http://test", log_file=None)


@pytest.fixture
def session(config: LearnLinkConfig) -> SessionStore:
    return SessionStore(config.session_file)


@pytest.fixture
async def api(config: LearnLinkConfig, session: SessionStore,
              fake_api: FakeAPI) -> AsyncGenerator[ApiClient, None]:
    """ApiClient talking to the fake backend"""
    client = ApiClient(config, session, transport=fake_api.transport)
    yield client
    await client.close()


@pytest.fixture
def auth(api: ApiClient, session: SessionStore) -> AuthManager:
    return AuthManager(api, session)


@pytest.fixture
def navbar(api: ApiClient, session: SessionStore, auth: AuthManager) -> NavigationBar:
    bar = NavigationBar(api, session, auth)
    yield bar
    bar.close()


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120, record=True)


@pytest.fixture
def ctx(config, session, api, auth, navbar, console, prompts) -> ScreenContext:
    return ScreenContext(
        config=config,
        session=session,
        api=api,
        auth=auth,
        navbar=navbar,
        console=console,
        confirm=prompts.confirm,
        ask=prompts.ask,
    )


@pytest.fixture
def login_as(session: SessionStore) -> Callable[..., User]:
    """Write a session for a fresh user of the given role"""
    def _login(role: str = "parent", **fields) -> User:
        user = make_user(role, **fields)
        session.write(make_token(user), user)
        return user

    return _login
