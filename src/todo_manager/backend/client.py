# src/todo_manager/backend/client.py

from __future__ import annotations

import logging

import httpx

from .auth import GoTrueAuthClient
from .postgrest import PostgrestTable
from .session_store import SessionFileStore

logger = logging.getLogger(__name__)


def friendly_backend_config_error(err: Exception) -> str:
    msg = str(err).strip() or "Backend error."
    if "URL is not set" in msg:
        return "Backend is not configured (missing URL). Set TODO_SUPABASE_URL in .env (see config.example.py)."
    if "anon key is not set" in msg:
        return "Backend is not configured (missing anon key). Set TODO_SUPABASE_ANON_KEY in .env (see config.example.py)."
    return msg


def _make_timeout(settings) -> httpx.Timeout:
    connect_s = float(getattr(settings, "http_connect_timeout_seconds", 5.0))
    read_s = float(getattr(settings, "http_timeout_seconds", 10.0))
    return httpx.Timeout(connect=connect_s, read=read_s, write=read_s, pool=connect_s)


class BackendClient:
    """
    Hosted backend facade: one shared httpx.AsyncClient, the auth client, and table clients.

    Table requests pick up the signed-in user's token from the auth client on every call.
    """

    def __init__(
            self,
            *,
            url: str,
            anon_key: str,
            session_store: SessionFileStore | None = None,
            timeout: httpx.Timeout | float = 10.0,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url or not url.strip():
            raise RuntimeError("Backend URL is not set. Set TODO_SUPABASE_URL in your .env.")
        if not anon_key or not anon_key.strip():
            raise RuntimeError("Backend anon key is not set. Set TODO_SUPABASE_ANON_KEY in your .env.")

        self._anon_key = anon_key.strip()
        self._http = httpx.AsyncClient(
            base_url=url.strip().rstrip("/"),
            headers={"apikey": self._anon_key},
            timeout=timeout,
            transport=transport,
        )
        self.auth = GoTrueAuthClient(self._http, session_store=session_store)

    @classmethod
    def from_settings(cls, settings, *, transport: httpx.AsyncBaseTransport | None = None) -> BackendClient:
        store: SessionFileStore | None = None
        if getattr(settings, "persist_session", False):
            store = SessionFileStore(settings.session_path)
        return cls(
            url=str(getattr(settings, "supabase_url", "") or ""),
            anon_key=str(getattr(settings, "supabase_anon_key", "") or ""),
            session_store=store,
            timeout=_make_timeout(settings),
            transport=transport,
        )

    def table(self, name: str) -> PostgrestTable:
        return PostgrestTable(
            self._http,
            name,
            anon_key=self._anon_key,
            token_provider=self.auth.access_token,
        )

    async def aclose(self) -> None:
        await self._http.aclose()
        logger.debug("Backend HTTP client closed")
