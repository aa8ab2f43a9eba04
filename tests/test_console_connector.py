# tests/test_console_connector.py

from __future__ import annotations

import pytest

from todo_manager.connectors.console_connector import run_console_loop
from todo_manager.core.navigation import Route


def _scripted_input(monkeypatch, lines: list[str]) -> list[str]:
    prompts: list[str] = []
    queue = list(lines)

    def fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        if not queue:
            raise EOFError
        return queue.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


@pytest.mark.asyncio
async def test_console_redirects_signs_in_and_adds(state, auth, table, monkeypatch, capsys) -> None:
    auth.current = None
    prompts = _scripted_input(
        monkeypatch,
        ["/signin alice@example.com s3cret!", "/add Buy milk", "/exit"],
    )

    await run_console_loop(state)

    out = capsys.readouterr().out
    assert "Sign in with /signin" in out
    assert "Signed in." in out
    assert "Your Tasks" in out
    assert "Logged in as: alice@example.com" in out
    assert "Buy milk" in out
    assert prompts == ["login> ", "tasks> ", "tasks> "]
    assert state.navigator.current == Route.TASKS
    assert any(r["title"] == "Buy milk" and r["user_id"] == "alice-id" for r in table.rows)


@pytest.mark.asyncio
async def test_console_signout_returns_to_login_prompt(state, monkeypatch, capsys) -> None:
    prompts = _scripted_input(monkeypatch, ["/signout"])

    await run_console_loop(state)

    out = capsys.readouterr().out
    assert "Signed out." in out
    assert "Sign in with /signin" in out
    assert prompts == ["tasks> ", "login> "]
    assert state.navigator.current == Route.ENTRY
