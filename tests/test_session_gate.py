# tests/test_session_gate.py

from __future__ import annotations

import pytest

from todo_manager.core.entry import CONFIRM_EMAIL_MESSAGE
from todo_manager.core.navigation import Route

from .fakes import ALICE


@pytest.mark.asyncio
async def test_resolve_returns_identity_and_keeps_route(state) -> None:
    state.navigator.push(Route.TASKS)

    identity = await state.gate.resolve()

    assert identity == ALICE
    assert state.gate.identity == ALICE
    assert state.navigator.current == Route.TASKS


@pytest.mark.asyncio
async def test_resolve_failure_is_treated_as_signed_out(state, auth) -> None:
    auth.fail_get_user = True
    state.navigator.push(Route.TASKS)

    assert await state.gate.resolve() is None
    assert state.navigator.current == Route.ENTRY
    assert auth.calls.count("get_user") == 1


@pytest.mark.asyncio
async def test_sign_out_navigates_to_entry_even_if_remote_fails(state, auth) -> None:
    auth.fail_sign_out = True
    state.navigator.push(Route.TASKS)
    await state.gate.resolve()

    await state.gate.sign_out()

    assert state.gate.identity is None
    assert auth.current is None
    assert state.navigator.current == Route.ENTRY


@pytest.mark.asyncio
async def test_sign_in_success_navigates_to_tasks(state, auth) -> None:
    auth.current = None
    state.entry.set_credentials(ALICE.email, "s3cret!")

    await state.entry.sign_in()

    assert state.navigator.current == Route.TASKS
    assert state.entry.message == ""
    assert auth.current == ALICE


@pytest.mark.asyncio
async def test_sign_in_failure_shows_message(state, auth) -> None:
    auth.current = None
    state.entry.set_credentials(ALICE.email, "wrong")

    await state.entry.sign_in()

    assert state.navigator.current == Route.ENTRY
    assert state.entry.message == "Error signing in: Invalid login credentials"


@pytest.mark.asyncio
async def test_sign_up_messages(state) -> None:
    state.entry.set_credentials("carol@example.com", "longenough")
    await state.entry.sign_up()
    assert state.entry.message == CONFIRM_EMAIL_MESSAGE

    await state.entry.sign_up()
    assert state.entry.message == "Error signing up: User already registered"
    assert state.navigator.current == Route.ENTRY
