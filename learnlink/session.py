"""
Session Store - the app-wide {token, user} record

The session lives in a JSON file (~/.learnlink/session.json) under the two
keys ``token`` and ``user``. Everything that needs the current user or the
bearer token goes through a SessionStore; nothing else touches the file.

Another LearnLink process (a second terminal) may log in or out at any
time. ``refresh()`` notices the file changed and re-broadcasts the new
session to subscribers, the same way a browser tab hears a storage event.
"""

import asyncio
import contextlib
import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError as ModelValidationError

from learnlink.logging_config import get_logger, set_user_id
from learnlink.models import User

logger = get_logger(__name__)

SessionListener = Callable[["Session", str], None]


@dataclass(frozen=True)
class Session:
    """Snapshot of who is logged in"""
    token: Optional[str] = None
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.user)

    @property
    def user_id(self) -> str:
        return self.user.id if self.user else ""


class SessionStore:
    """
    Persisted session with read/write/clear/subscribe.

    Listeners are called as ``listener(session, source)`` where source is
    "local" for changes made through this store and "external" for changes
    picked up from the file by ``refresh()``.
    """

    TOKEN_KEY = "token"
    USER_KEY = "user"

    def __init__(self, path: str):
        self.path = Path(path)
        self._session = Session()
        self._listeners: List[SessionListener] = []
        self._mtime_ns: Optional[int] = None

        self._load()

    # ==================== Read ====================

    def read(self) -> Session:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def user(self) -> Optional[User]:
        return self._session.user

    # ==================== Write ====================

    def write(self, token: str, user: User) -> Session:
        """Replace the whole session (login)"""
        self._session = Session(token=token, user=user)
        self._persist()
        self._notify("local")
        return self._session

    def update_user(self, user: User) -> Session:
        """Keep the token, swap in a fresher user record (profile refresh)"""
        self._session = replace(self._session, user=user)
        self._persist()
        self._notify("local")
        return self._session

    def clear(self) -> None:
        """Remove both keys (logout)"""
        self._session = Session()
        if self.path.exists():
            self.path.unlink()
        self._mtime_ns = None
        self._notify("local")

    # ==================== Subscribe ====================

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> bool:
        """Reload if another process changed the file. Returns True on change."""
        current = self._stat_mtime()
        if current == self._mtime_ns:
            return False

        before = self._session
        self._load()
        if self._session == before:
            return False

        logger.info("Session changed outside this process")
        self._notify("external")
        return True

    async def watch(self, interval: float = 2.0) -> None:
        """Poll for external session changes until cancelled"""
        while True:
            self.refresh()
            await asyncio.sleep(interval)

    # ==================== Internals ====================

    def _stat_mtime(self) -> Optional[int]:
        try:
            return self.path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    def _load(self) -> None:
        self._mtime_ns = self._stat_mtime()
        if self._mtime_ns is None:
            self._session = Session()
            return

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
            token = data.get(self.TOKEN_KEY)
            user_data = data.get(self.USER_KEY)
            user = User.model_validate(user_data) if user_data else None
        except (OSError, ValueError, ModelValidationError) as e:
            # A half-written or hand-edited file means nobody is logged in
            logger.warning(f"Could not load session from {self.path}: {e}")
            self._session = Session()
            return

        self._session = Session(token=token, user=user)
        set_user_id(self._session.user_id)

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            self.TOKEN_KEY: self._session.token,
            self.USER_KEY: self._session.user.to_api() if self._session.user else None,
        }

        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, 'w') as f:
            json.dump(data, f, indent=2)
        # Secure the file (no-op where chmod is unsupported)
        with contextlib.suppress(OSError):
            os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

        self._mtime_ns = self._stat_mtime()

    def _notify(self, source: str) -> None:
        set_user_id(self._session.user_id)
        for listener in list(self._listeners):
            listener(self._session, source)
