# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_manager.core.state import AppState

from .fakes import ALICE, BOB, FakeAccount, FakeAuthProvider, FakeTaskTable


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the backend factory.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        supabase_url="https://project.supabase.test",
        supabase_anon_key="anon-key",
        tasks_table="tasks",
        http_timeout_seconds=2.0,
        http_connect_timeout_seconds=1.0,
        data_dir=tmp_path,
        session_path=tmp_path / "session.json",
        persist_session=True,
    )


@pytest.fixture()
def table() -> FakeTaskTable:
    return FakeTaskTable(
        [
            {"id": 1, "title": "Write report", "completed": False, "user_id": ALICE.id},
            {"id": 2, "title": "Bob's secret", "completed": True, "user_id": BOB.id},
            {"id": 3, "title": "Buy stamps", "completed": True, "user_id": ALICE.id},
            {"id": 4, "title": "Call mom", "completed": False, "user_id": ALICE.id},
        ]
    )


@pytest.fixture()
def auth() -> FakeAuthProvider:
    provider = FakeAuthProvider(current=ALICE)
    provider.accounts[ALICE.email] = FakeAccount(identity=ALICE, password="s3cret!")
    return provider


@pytest.fixture()
def state(settings: SimpleNamespace, auth: FakeAuthProvider, table: FakeTaskTable) -> AppState:
    """AppState wired with in-memory fakes for the auth provider and the task table."""
    return AppState.build(settings=settings, auth=auth, table=table)
