from __future__ import annotations

import logging
from typing import Optional

from config import YamlConfig
from errors import NotAuthenticatedError
from models import User

logger = logging.getLogger(__name__)


class SessionContext:
    """Credential token and cached user profile for one client.

    The context is passed to the API client and services instead of being
    read from ambient global state, so each holder can be tested with its own
    file. Nothing is read until :meth:`load` is called.
    """

    def __init__(self, path: str = "session.yaml", store: YamlConfig | None = None) -> None:
        self.store = store or YamlConfig(path)
        self.token: Optional[str] = None
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def load(self) -> "SessionContext":
        data = self.store.load()
        token = data.get("token")
        self.token = token if isinstance(token, str) and token else None
        user = data.get("user")
        self.user = User.model_validate(user) if user else None
        logger.debug("Session loaded (authenticated=%s)", self.is_authenticated)
        return self

    def save(self, token: str, user: User) -> None:
        self.token = token
        self.user = user
        self._persist()

    def update_user(self, user: User) -> None:
        self.user = user
        self._persist()

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.store.clear()
        logger.debug("Session cleared")

    def require_auth(self) -> str:
        """Return the token or raise when no user is logged in."""
        if not self.token:
            raise NotAuthenticatedError()
        return self.token

    def _persist(self) -> None:
        data: dict = {}
        if self.token:
            data["token"] = self.token
        if self.user is not None:
            data["user"] = self.user.to_wire()
        self.store.save(data)
