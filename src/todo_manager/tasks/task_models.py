# src/todo_manager/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class Identity:
    """Authenticated user as reported by the auth provider (read-only)."""

    id: str
    email: str = ""

    @classmethod
    def from_user(cls, raw: dict[str, Any]) -> Identity:
        return cls(id=str(raw["id"]), email=str(raw.get("email") or ""))


@dataclass(slots=True)
class Task:
    """
    One to-do item.

    `id` is assigned by the remote store; `user_id` is fixed at creation.
    """

    id: int
    title: str
    user_id: str
    completed: bool = False

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Task:
        return cls(
            id=row["id"],
            title=str(row.get("title") or ""),
            user_id=str(row.get("user_id") or ""),
            completed=bool(row.get("completed") or False),
        )


@dataclass(slots=True)
class EditState:
    task_id: int
    buffer: str
