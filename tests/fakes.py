# tests/fakes.py

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from todo_manager.backend.errors import BackendError
from todo_manager.core.ports import Row
from todo_manager.tasks.task_models import Identity


ALICE = Identity(id="alice-id", email="alice@example.com")
BOB = Identity(id="bob-id", email="bob@example.com")


@dataclass(slots=True)
class FakeAccount:
    identity: Identity
    password: str


class FakeAuthProvider:
    """
    In-memory AuthProvider.

    - `accounts` are the registered users (email -> account)
    - `current` is the signed-in identity (None when signed out)
    - set `fail_get_user` / `fail_sign_out` to simulate backend errors
    """

    def __init__(self, current: Identity | None = None) -> None:
        self.accounts: dict[str, FakeAccount] = {}
        self.current = current
        self.fail_get_user = False
        self.fail_sign_out = False
        self.calls: list[str] = []
        self._ids = itertools.count(1)

    def register(self, email: str, password: str) -> Identity:
        identity = Identity(id=f"user-{next(self._ids)}", email=email)
        self.accounts[email] = FakeAccount(identity=identity, password=password)
        return identity

    async def sign_up(self, email: str, password: str) -> Identity | None:
        self.calls.append("sign_up")
        if email in self.accounts:
            raise BackendError("User already registered", status=422)
        if len(password) < 6:
            raise BackendError("Password should be at least 6 characters", status=422)
        return self.register(email, password)

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        self.calls.append("sign_in_with_password")
        account = self.accounts.get(email)
        if account is None or account.password != password:
            raise BackendError("Invalid login credentials", status=400)
        self.current = account.identity
        return account.identity

    async def get_user(self) -> Identity | None:
        self.calls.append("get_user")
        if self.fail_get_user:
            raise BackendError("Network error: ConnectError")
        return self.current

    async def sign_out(self) -> None:
        self.calls.append("sign_out")
        self.current = None
        if self.fail_sign_out:
            raise BackendError("Network error: ConnectError")


@dataclass(slots=True)
class TableCall:
    op: str
    filters: dict[str, Any] = field(default_factory=dict)
    values: Any = None


class FakeTaskTable:
    """
    In-memory TaskTable with store-assigned integer ids.

    Filters are equality on every given column, like the PostgREST client.
    `fail` holds operation names ("select", "insert", ...) that should raise.
    `hold` maps an operation name to an Event the call waits on before answering.
    """

    def __init__(self, rows: list[Row] | None = None) -> None:
        self.rows: list[Row] = [dict(r) for r in rows or []]
        start = max((int(r["id"]) for r in self.rows), default=0) + 1
        self._ids = itertools.count(start)
        self.calls: list[TableCall] = []
        self.fail: set[str] = set()
        self.hold: dict[str, asyncio.Event] = {}

    async def _check(self, op: str) -> None:
        event = self.hold.get(op)
        if event is not None:
            await event.wait()
        if op in self.fail:
            raise BackendError(f"{op} failed", details="simulated", code="XX000", status=500)

    @staticmethod
    def _matches(row: Row, filters: Mapping[str, Any]) -> bool:
        return all(row.get(k) == v for k, v in filters.items())

    async def select(
        self,
        *,
        filters: Mapping[str, Any],
        order_by: str | None = None,
        ascending: bool = True,
    ) -> list[Row]:
        self.calls.append(TableCall("select", dict(filters)))
        await self._check("select")
        out = [dict(r) for r in self.rows if self._matches(r, filters)]
        if order_by:
            out.sort(key=lambda r: r[order_by], reverse=not ascending)
        return out

    async def insert(self, rows: list[Row]) -> list[Row]:
        self.calls.append(TableCall("insert", values=[dict(r) for r in rows]))
        await self._check("insert")
        created: list[Row] = []
        for r in rows:
            row = {"id": next(self._ids), "completed": False, **r}
            self.rows.append(row)
            created.append(dict(row))
        return created

    async def update(self, values: Mapping[str, Any], *, filters: Mapping[str, Any]) -> list[Row]:
        self.calls.append(TableCall("update", dict(filters), dict(values)))
        await self._check("update")
        changed: list[Row] = []
        for r in self.rows:
            if self._matches(r, filters):
                r.update(values)
                changed.append(dict(r))
        return changed

    async def delete(self, *, filters: Mapping[str, Any]) -> list[Row]:
        self.calls.append(TableCall("delete", dict(filters)))
        await self._check("delete")
        removed = [dict(r) for r in self.rows if self._matches(r, filters)]
        self.rows = [r for r in self.rows if not self._matches(r, filters)]
        return removed

    def ops(self) -> list[str]:
        return [c.op for c in self.calls]
