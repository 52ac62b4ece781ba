from __future__ import annotations

import logging
from typing import Any, Optional

from client import MomentumClient
from errors import APIError, NotAuthenticatedError
from models import User
from session import SessionContext
from validation import (
    login_errors,
    optional_number,
    password_errors,
    profile_errors,
    register_errors,
)

logger = logging.getLogger(__name__)


def _raise_for(errors: dict) -> None:
    if errors:
        raise ValueError("; ".join(errors.values()))


class AuthService:
    """Log users in and out and keep the session context in step."""

    def __init__(self, client: MomentumClient, session: SessionContext) -> None:
        self.client = client
        self.session = session

    @property
    def user(self) -> Optional[User]:
        return self.session.user

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated and self.session.user is not None

    def login(self, email: str, password: str) -> User:
        _raise_for(login_errors(email, password))
        auth = self.client.login(email, password)
        self.session.save(auth.token, auth.user)
        logger.info("Logged in as %s", auth.user.username)
        return auth.user

    def register(
        self, username: str, email: str, password: str, confirm_password: str
    ) -> None:
        _raise_for(register_errors(username, email, password, confirm_password))
        self.client.register(username, email, password)
        logger.info("Registered %s", username)

    def logout(self) -> None:
        self.session.clear()
        logger.info("Logged out")

    def restore(self) -> Optional[User]:
        """Reload the stored session and confirm the token is still accepted."""
        self.session.load()
        if not (self.session.token and self.session.user):
            return None
        try:
            user = self.client.get_profile()
        except APIError as exc:
            logger.warning("Stored session rejected: %s", exc.message)
            self.session.clear()
            return None
        self.session.update_user(user)
        return user

    def update_password(
        self, old_password: str, new_password: str, confirm_password: str
    ) -> None:
        self.session.require_auth()
        _raise_for(password_errors(old_password, new_password, confirm_password))
        self.client.update_password(old_password, new_password)

    def update_profile(
        self,
        username: str,
        weight: Any = None,
        height: Any = None,
    ) -> User:
        self.session.require_auth()
        if self.session.user is None:
            raise NotAuthenticatedError()
        _raise_for(profile_errors(username, weight, height))
        data = self.client.update_profile(
            username=username,
            weight=optional_number(weight),
            height=optional_number(height),
        )
        merged = User.model_validate({**self.session.user.to_wire(), **data})
        self.session.update_user(merged)
        return merged
