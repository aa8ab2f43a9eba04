# src/todo_manager/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Backend credentials are validated lazily, when the backend is first built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Backend (Supabase-style: GoTrue auth + PostgREST tables) ----
    supabase_url: str
    supabase_anon_key: str
    tasks_table: str

    # ---- HTTP ----
    http_timeout_seconds: float
    http_connect_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    session_path: Path
    persist_session: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo") or "todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        supabase_url = (_first_env(_k("SUPABASE_URL"), "SUPABASE_URL", default="") or "").strip()
        supabase_anon_key = (
            _first_env(_k("SUPABASE_ANON_KEY"), "SUPABASE_ANON_KEY", default="") or ""
        ).strip()
        tasks_table = _env(_k("TASKS_TABLE"), "tasks").strip() or "tasks"

        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0)
        http_connect_timeout_seconds = _env_float(_k("HTTP_CONNECT_TIMEOUT_SECONDS"), 5.0)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session.json")
        persist_session = _env_bool(_k("PERSIST_SESSION"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            supabase_url=supabase_url,
            supabase_anon_key=supabase_anon_key,
            tasks_table=tasks_table,
            http_timeout_seconds=http_timeout_seconds,
            http_connect_timeout_seconds=http_connect_timeout_seconds,
            data_dir=data_dir,
            session_path=session_path,
            persist_session=persist_session,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
