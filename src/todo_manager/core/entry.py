# src/todo_manager/core/entry.py

from __future__ import annotations

import logging

from ..backend.errors import BackendError
from .navigation import Route
from .ports import AuthProvider, Navigator

logger = logging.getLogger(__name__)

CONFIRM_EMAIL_MESSAGE = "Check your email for the confirmation link!"


class EntryView:
    """Sign-up / sign-in screen state. Auth failures end up in `message`."""

    def __init__(self, auth: AuthProvider, navigator: Navigator) -> None:
        self._auth = auth
        self._navigator = navigator
        self.email = ""
        self.password = ""
        self.message = ""

    def set_credentials(self, email: str, password: str) -> None:
        self.email = email
        self.password = password

    async def sign_up(self) -> None:
        try:
            await self._auth.sign_up(self.email, self.password)
        except BackendError as e:
            logger.info("Sign-up failed for %s: %s", self.email, e.message)
            self.message = f"Error signing up: {e.message}"
            return
        self.message = CONFIRM_EMAIL_MESSAGE

    async def sign_in(self) -> None:
        try:
            await self._auth.sign_in_with_password(self.email, self.password)
        except BackendError as e:
            logger.info("Sign-in failed for %s: %s", self.email, e.message)
            self.message = f"Error signing in: {e.message}"
            return
        self.message = ""
        self.password = ""
        self._navigator.push(Route.TASKS)
