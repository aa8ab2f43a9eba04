# src/todo_manager/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the hosted backend swappable and makes testing easier.

Every port method raises backend.errors.BackendError on failure.
"""

from typing import Any, Mapping, Protocol

from ..tasks.task_models import Identity

Row = dict[str, Any]
# One table row as returned by the store: {"id": 1, "title": "...", ...}.


class AuthProvider(Protocol):
    """Email/password auth against the hosted backend."""

    async def sign_up(self, email: str, password: str) -> Identity | None: ...

    async def sign_in_with_password(self, email: str, password: str) -> Identity: ...

    async def get_user(self) -> Identity | None: ...

    async def sign_out(self) -> None: ...


class TaskTable(Protocol):
    """
    Remote table addressed by equality filters.

    filters: {"id": 3, "user_id": "..."} means id = 3 AND user_id = '...'.
    Mutations return the affected rows (an empty list when nothing matched).
    """

    async def select(
            self,
            *,
            filters: Mapping[str, Any],
            order_by: str | None = None,
            ascending: bool = True,
    ) -> list[Row]: ...

    async def insert(self, rows: list[Row]) -> list[Row]: ...

    async def update(self, values: Mapping[str, Any], *, filters: Mapping[str, Any]) -> list[Row]: ...

    async def delete(self, *, filters: Mapping[str, Any]) -> list[Row]: ...


class Navigator(Protocol):
    def push(self, route: str) -> None: ...
