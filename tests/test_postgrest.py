# tests/test_postgrest.py

from __future__ import annotations

import json

import httpx
import pytest

from todo_manager.backend.errors import BackendError
from todo_manager.backend.postgrest import PostgrestTable, eq_params

BASE_URL = "https://project.supabase.test"


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def _table(recorder: Recorder, token: str | None = "user-jwt") -> tuple[httpx.AsyncClient, PostgrestTable]:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(recorder),
        base_url=BASE_URL,
        headers={"apikey": "anon-key"},
    )
    return http, PostgrestTable(http, "tasks", anon_key="anon-key", token_provider=lambda: token)


def test_eq_params_formats_literals() -> None:
    assert eq_params({"id": 3, "user_id": "u1", "completed": True, "x": None}) == {
        "id": "eq.3",
        "user_id": "eq.u1",
        "completed": "eq.true",
        "x": "is.null",
    }


@pytest.mark.asyncio
async def test_select_sends_filters_order_and_user_token() -> None:
    rec = Recorder(httpx.Response(200, json=[{"id": 1, "title": "a", "user_id": "u1", "completed": False}]))
    http, table = _table(rec)

    rows = await table.select(filters={"user_id": "u1"}, order_by="id")
    await http.aclose()

    assert rows == [{"id": 1, "title": "a", "user_id": "u1", "completed": False}]
    req = rec.requests[0]
    assert req.method == "GET"
    assert req.url.path == "/rest/v1/tasks"
    assert req.url.params["user_id"] == "eq.u1"
    assert req.url.params["order"] == "id.asc"
    assert req.url.params["select"] == "*"
    assert req.headers["apikey"] == "anon-key"
    assert req.headers["authorization"] == "Bearer user-jwt"


@pytest.mark.asyncio
async def test_insert_asks_for_representation() -> None:
    rec = Recorder(httpx.Response(201, json=[{"id": 7, "title": "Buy milk", "user_id": "u1", "completed": False}]))
    http, table = _table(rec)

    rows = await table.insert([{"title": "Buy milk", "user_id": "u1", "completed": False}])
    await http.aclose()

    assert rows[0]["id"] == 7
    req = rec.requests[0]
    assert req.method == "POST"
    assert req.headers["prefer"] == "return=representation"
    assert json.loads(req.content) == [{"title": "Buy milk", "user_id": "u1", "completed": False}]


@pytest.mark.asyncio
async def test_update_and_delete_are_scoped_by_filters() -> None:
    rec = Recorder(httpx.Response(200, json=[]), httpx.Response(204))
    http, table = _table(rec)

    updated = await table.update({"completed": True}, filters={"id": 3, "user_id": "u1"})
    deleted = await table.delete(filters={"id": 3, "user_id": "u1"})
    await http.aclose()

    assert updated == []
    assert deleted == []
    patch, delete = rec.requests
    assert patch.method == "PATCH"
    assert patch.url.params["id"] == "eq.3"
    assert patch.url.params["user_id"] == "eq.u1"
    assert json.loads(patch.content) == {"completed": True}
    assert delete.method == "DELETE"
    assert delete.url.params["id"] == "eq.3"


@pytest.mark.asyncio
async def test_unfiltered_mutations_are_refused_locally() -> None:
    rec = Recorder()
    http, table = _table(rec)

    with pytest.raises(BackendError):
        await table.update({"title": "x"}, filters={})
    with pytest.raises(BackendError):
        await table.delete(filters={})
    await http.aclose()

    assert rec.requests == []


@pytest.mark.asyncio
async def test_error_body_is_parsed_into_backend_error() -> None:
    body = {
        "message": 'new row violates row-level security policy for table "tasks"',
        "details": None,
        "hint": None,
        "code": "42501",
    }
    rec = Recorder(httpx.Response(403, json=body))
    http, table = _table(rec)

    with pytest.raises(BackendError) as ei:
        await table.insert([{"title": "x", "user_id": "someone-else"}])
    await http.aclose()

    err = ei.value
    assert err.status == 403
    assert err.code == "42501"
    assert "row-level security" in err.message


@pytest.mark.asyncio
async def test_anon_key_is_used_without_session() -> None:
    rec = Recorder(httpx.Response(200, json=[]))
    http, table = _table(rec, token=None)

    await table.select(filters={"user_id": "u1"})
    await http.aclose()

    assert rec.requests[0].headers["authorization"] == "Bearer anon-key"
    assert "order" not in rec.requests[0].url.params


@pytest.mark.asyncio
async def test_transport_errors_become_backend_errors() -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(boom), base_url=BASE_URL)
    table = PostgrestTable(http, "tasks", anon_key="anon-key")

    with pytest.raises(BackendError) as ei:
        await table.select(filters={"user_id": "u1"})
    await http.aclose()

    assert isinstance(ei.value.__cause__, httpx.ConnectError)
