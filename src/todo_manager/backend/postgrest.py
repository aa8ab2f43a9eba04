# src/todo_manager/backend/postgrest.py

"""
PostgREST table client (Supabase `/rest/v1`).

Only equality filters are supported: that is all the task list needs.
Requests carry the signed-in user's JWT so row level security applies;
without a session the anon key is used as the bearer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Mapping

import httpx

from ..core.ports import Row
from .errors import BackendError
from .transport import json_body, send

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"

TokenProvider = Callable[[], str | None]


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def eq_params(filters: Mapping[str, Any]) -> dict[str, str]:
    """{"id": 3, "user_id": "u"} -> {"id": "eq.3", "user_id": "eq.u"}"""
    params: dict[str, str] = {}
    for column, value in filters.items():
        if value is None:
            params[column] = "is.null"
        else:
            params[column] = f"eq.{_literal(value)}"
    return params


class PostgrestTable:
    def __init__(
            self,
            http: httpx.AsyncClient,
            table: str,
            *,
            anon_key: str,
            token_provider: TokenProvider | None = None,
    ) -> None:
        self._http = http
        self._table = table
        self._anon_key = anon_key
        self._token_provider = token_provider

    @property
    def name(self) -> str:
        return self._table

    def _url(self) -> str:
        return f"{REST_PREFIX}/{self._table}"

    def _headers(self, *, returning: bool) -> dict[str, str]:
        token = (self._token_provider() if self._token_provider else None) or self._anon_key
        headers = {"Authorization": f"Bearer {token}"}
        if returning:
            headers["Prefer"] = "return=representation"
        return headers

    @staticmethod
    def _rows(data: Any) -> list[Row]:
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        if isinstance(data, list):
            return [r for r in data if isinstance(r, dict)]
        raise BackendError("Unexpected table response")

    async def select(
            self,
            *,
            filters: Mapping[str, Any],
            order_by: str | None = None,
            ascending: bool = True,
    ) -> list[Row]:
        params = {"select": "*", **eq_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        resp = await send(self._http, "GET", self._url(), headers=self._headers(returning=False), params=params)
        rows = self._rows(json_body(resp))
        logger.debug("select %s filters=%s -> %d rows", self._table, sorted(filters), len(rows))
        return rows

    async def insert(self, rows: list[Row]) -> list[Row]:
        resp = await send(self._http, "POST", self._url(), headers=self._headers(returning=True), json=rows)
        return self._rows(json_body(resp))

    async def update(self, values: Mapping[str, Any], *, filters: Mapping[str, Any]) -> list[Row]:
        if not filters:
            # an unfiltered PATCH would touch every row visible to this token
            raise BackendError("Refusing to update without filters")
        resp = await send(
            self._http,
            "PATCH",
            self._url(),
            headers=self._headers(returning=True),
            params=eq_params(filters),
            json=dict(values),
        )
        return self._rows(json_body(resp))

    async def delete(self, *, filters: Mapping[str, Any]) -> list[Row]:
        if not filters:
            raise BackendError("Refusing to delete without filters")
        resp = await send(
            self._http,
            "DELETE",
            self._url(),
            headers=self._headers(returning=True),
            params=eq_params(filters),
        )
        return self._rows(json_body(resp))
