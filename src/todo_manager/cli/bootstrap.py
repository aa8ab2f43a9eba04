# src/todo_manager/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the hosted backend (auth + task table) into AppState.
"""

from __future__ import annotations

import logging

from ..backend.client import BackendClient
from ..config import get_settings
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_backend(*, settings=None) -> BackendClient:
    """
    Build the backend client from settings.

    Raises RuntimeError when the backend URL or anon key is missing.
    """
    if settings is None:
        settings = get_settings()
    _ensure_local_dirs(settings)
    backend = BackendClient.from_settings(settings)
    logger.info("Backend ready url=%s table=%s", settings.supabase_url, settings.tasks_table)
    return backend


def create_initial_state(backend: BackendClient, *, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    return AppState.build(
        settings=settings,
        auth=backend.auth,
        table=backend.table(settings.tasks_table),
    )
