# src/todo_manager/backend/session_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Session:
    access_token: str
    refresh_token: str
    expires_at: float
    user: dict[str, Any]

    @classmethod
    def from_token_response(cls, data: dict[str, Any], *, now_ts: float) -> Session:
        """Build a session from a GoTrue token/signup payload (raises KeyError if incomplete)."""
        expires_at = data.get("expires_at")
        if expires_at is None:
            expires_at = now_ts + float(data.get("expires_in") or 3600)
        return cls(
            access_token=str(data["access_token"]),
            refresh_token=str(data.get("refresh_token") or ""),
            expires_at=float(expires_at),
            user=dict(data.get("user") or {}),
        )

    def is_expired(self, now_ts: float, *, leeway: float = 10.0) -> bool:
        return self.expires_at - leeway <= now_ts


class SessionFileStore:
    """
    Keeps the auth session in a single JSON file under a gitignored local dir.

    The file contains bearer tokens: it is written atomically and chmod'ed to 0600.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Session | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
            if not isinstance(data, dict):
                raise ValueError("Expected JSON object")
            session = Session(
                access_token=str(data["access_token"]),
                refresh_token=str(data.get("refresh_token") or ""),
                expires_at=float(data["expires_at"]),
                user=dict(data.get("user") or {}),
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable session file %s: %r", self._path, e)
            return None
        logger.debug("Session restored from %s", self._path)
        return session

    def save(self, session: Session) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(asdict(session), ensure_ascii=False), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)
        logger.debug("Session saved to %s", self._path)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
