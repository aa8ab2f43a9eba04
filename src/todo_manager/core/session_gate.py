# src/todo_manager/core/session_gate.py

from __future__ import annotations

import logging

from ..backend.errors import BackendError
from ..tasks.task_models import Identity
from .navigation import Route
from .ports import AuthProvider, Navigator

logger = logging.getLogger(__name__)


class SessionGate:
    """
    Resolves who is signed in before the task view does anything.

    A failed resolution is treated exactly like "nobody is signed in": the
    visitor is sent to the entry route. No retries.
    """

    def __init__(self, auth: AuthProvider, navigator: Navigator) -> None:
        self._auth = auth
        self._navigator = navigator
        self.identity: Identity | None = None

    async def resolve(self) -> Identity | None:
        try:
            identity = await self._auth.get_user()
        except BackendError as e:
            logger.warning("Could not resolve current user: %s", e.message)
            identity = None

        if identity is None:
            self.identity = None
            self._navigator.push(Route.ENTRY)
            return None

        self.identity = identity
        logger.debug("Resolved identity id=%s", identity.id)
        return identity

    async def sign_out(self) -> None:
        try:
            await self._auth.sign_out()
        except BackendError as e:
            logger.warning("Remote sign-out failed (local session dropped anyway): %s", e.message)
        self.identity = None
        self._navigator.push(Route.ENTRY)
