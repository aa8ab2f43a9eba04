# src/todo_manager/backend/auth.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from ..tasks.task_models import Identity
from .errors import BackendError
from .session_store import Session, SessionFileStore
from .transport import json_body, send

logger = logging.getLogger(__name__)

AUTH_PREFIX = "/auth/v1"


class GoTrueAuthClient:
    """
    Email/password auth against a GoTrue-compatible API (Supabase `/auth/v1`).

    The http client is expected to carry the base URL and the `apikey` header.
    The current session lives in memory and, when a SessionFileStore is given,
    on disk so that a restart keeps the user signed in.
    """

    def __init__(
            self,
            http: httpx.AsyncClient,
            *,
            session_store: SessionFileStore | None = None,
            clock: Callable[[], float] = time.time,
    ) -> None:
        self._http = http
        self._store = session_store
        self._clock = clock
        self._session: Session | None = session_store.load() if session_store else None

    @property
    def session(self) -> Session | None:
        return self._session

    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    # ---- session bookkeeping ----

    def _set_session(self, session: Session) -> None:
        self._session = session
        if self._store is not None:
            try:
                self._store.save(session)
            except OSError:
                logger.exception("Failed to persist session to %s", self._store.path)

    def _clear_session(self) -> None:
        self._session = None
        if self._store is not None:
            try:
                self._store.clear()
            except OSError:
                logger.exception("Failed to remove session file %s", self._store.path)

    def _session_from(self, data: Any) -> Session:
        if not isinstance(data, dict):
            raise BackendError("Unexpected auth response")
        try:
            return Session.from_token_response(data, now_ts=self._clock())
        except (KeyError, TypeError, ValueError) as e:
            raise BackendError("Auth response is missing session fields") from e

    @staticmethod
    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    # ---- AuthProvider ----

    async def sign_up(self, email: str, password: str) -> Identity | None:
        """
        Register a new account.

        With email confirmation enabled the backend returns only the user (no session):
        the caller tells the user to check their inbox. With autoconfirm a session is
        returned and stored right away.
        """
        resp = await send(
            self._http,
            "POST",
            f"{AUTH_PREFIX}/signup",
            json={"email": email, "password": password},
        )
        data = json_body(resp)
        if not isinstance(data, dict):
            return None

        if data.get("access_token"):
            session = self._session_from(data)
            self._set_session(session)
            logger.info("Signed up and signed in as %s", email)
            return Identity.from_user(session.user) if session.user.get("id") else None

        user = data.get("user") if isinstance(data.get("user"), dict) else data
        logger.info("Signed up %s (confirmation pending)", email)
        return Identity.from_user(user) if user.get("id") else None

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        resp = await send(
            self._http,
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = self._session_from(json_body(resp))
        if not session.user.get("id"):
            raise BackendError("Auth response is missing the user")
        self._set_session(session)
        logger.info("Signed in as %s", email)
        return Identity.from_user(session.user)

    async def refresh_session(self) -> Session:
        """Exchange the refresh token for a new session. Clears the session on failure."""
        current = self._session
        if current is None or not current.refresh_token:
            self._clear_session()
            raise BackendError("Session expired")
        try:
            resp = await send(
                self._http,
                "POST",
                f"{AUTH_PREFIX}/token",
                params={"grant_type": "refresh_token"},
                json={"refresh_token": current.refresh_token},
            )
            session = self._session_from(json_body(resp))
        except BackendError:
            self._clear_session()
            raise
        if not session.user:
            session.user = current.user
        self._set_session(session)
        logger.debug("Session refreshed")
        return session

    async def get_user(self) -> Identity | None:
        """Validate the stored session with the backend and return its user."""
        session = self._session
        if session is None:
            return None
        if session.is_expired(self._clock()):
            session = await self.refresh_session()

        resp = await send(
            self._http,
            "GET",
            f"{AUTH_PREFIX}/user",
            headers=self._bearer(session.access_token),
        )
        data = json_body(resp)
        if not isinstance(data, dict) or not data.get("id"):
            return None
        if data != session.user:
            session.user = data
            self._set_session(session)
        return Identity.from_user(data)

    async def sign_out(self) -> None:
        """Revoke the session remotely; the local session is dropped even if that fails."""
        session = self._session
        if session is None:
            return
        try:
            await send(
                self._http,
                "POST",
                f"{AUTH_PREFIX}/logout",
                headers=self._bearer(session.access_token),
            )
        finally:
            self._clear_session()
            logger.info("Signed out")
