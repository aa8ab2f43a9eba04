# src/todo_manager/tasks/task_list.py

"""
Task list controller.

Owns the ordered in-memory task list of the signed-in user and mediates every
mutation against the remote task table:

- add/edit/toggle/delete wait for the store to confirm, then reconcile local state
  from the result; on failure they log and leave local state as it was
- reorder is purely local and never written back

Every remote mutation is scoped by id AND user_id, so an id belonging to someone
else matches zero rows.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from ..backend.errors import BackendError
from ..core.ports import TaskTable
from ..core.session_gate import SessionGate
from .task_models import EditState, Identity, Task

logger = logging.getLogger(__name__)

T = TypeVar("T")


def array_move(items: list[T], from_index: int, to_index: int) -> list[T]:
    """
    Return a copy with the element at from_index moved to to_index.

    Elements between the two positions shift by one toward from_index.
    """
    out = list(items)
    if from_index == to_index:
        return out
    item = out.pop(from_index)
    out.insert(to_index, item)
    return out


def _log_store_error(action: str, err: BackendError) -> None:
    logger.error(
        "Error %s: %s (details=%s hint=%s code=%s)",
        action,
        err.message,
        err.details,
        err.hint,
        err.code,
    )


class TaskListController:
    def __init__(self, table: TaskTable, gate: SessionGate) -> None:
        self._table = table
        self._gate = gate

        self.identity: Identity | None = None
        self.tasks: list[Task] = []
        self.new_task: str = ""
        self.editing: EditState | None = None

    # ---- queries ----

    def find(self, task_id: Any) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def index_of(self, task_id: Any) -> int:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return -1

    @staticmethod
    def _scope(identity: Identity, task_id: Any) -> dict[str, Any]:
        return {"id": task_id, "user_id": identity.id}

    def _stale(self, identity: Identity, action: str) -> bool:
        """True when the signed-in identity changed while a store call was in flight."""
        if self.identity is identity:
            return False
        logger.info("Dropping result of %s for %s: identity changed", action, identity.id)
        return True

    # ---- lifecycle ----

    async def mount(self) -> None:
        """Resolve the identity, then fetch its tasks once. Redirects happen in the gate."""
        self.tasks = []
        self.editing = None
        identity = await self._gate.resolve()
        if identity is None:
            self.identity = None
            return
        self.identity = identity
        await self.load()

    async def load(self) -> None:
        identity = self.identity
        if identity is None:
            return
        try:
            rows = await self._table.select(
                filters={"user_id": identity.id},
                order_by="id",
                ascending=True,
            )
        except BackendError as e:
            _log_store_error("fetching tasks", e)
            if self.identity is identity:
                self.tasks = []
            return
        if self._stale(identity, "fetching tasks"):
            return
        self.tasks = [Task.from_row(r) for r in rows if r.get("user_id") == identity.id]
        logger.info("Loaded %d tasks for user %s", len(self.tasks), identity.id)

    async def sign_out(self) -> None:
        await self._gate.sign_out()
        self.identity = None
        self.tasks = []
        self.new_task = ""
        self.editing = None

    # ---- add ----

    def set_new_task(self, text: str) -> None:
        self.new_task = text

    async def add(self, title: str | None = None) -> Task | None:
        raw = self.new_task if title is None else title
        clean = (raw or "").strip()
        identity = self.identity
        if not clean or identity is None:
            return None

        row = {"title": clean, "user_id": identity.id, "completed": False}
        try:
            created = await self._table.insert([row])
        except BackendError as e:
            _log_store_error("adding task", e)
            return None
        if self._stale(identity, "adding task"):
            return None

        new_tasks = [Task.from_row(r) for r in created]
        self.tasks = [*self.tasks, *new_tasks]
        self.new_task = ""
        logger.debug("Added %d task(s)", len(new_tasks))
        return new_tasks[0] if new_tasks else None

    # ---- edit ----

    def edit_task(self, task_id: Any) -> bool:
        task = self.find(task_id)
        if task is None:
            return False
        self.editing = EditState(task_id=task.id, buffer=task.title)
        return True

    def set_edit_buffer(self, text: str) -> None:
        if self.editing is not None:
            self.editing.buffer = text

    def cancel_edit(self) -> None:
        self.editing = None

    async def save_edit(self, task_id: Any) -> bool:
        editing = self.editing
        identity = self.identity
        if editing is None or editing.task_id != task_id or identity is None:
            return False
        title = editing.buffer.strip()
        if not title:
            return False

        try:
            await self._table.update({"title": title}, filters=self._scope(identity, task_id))
        except BackendError as e:
            # Edit mode stays open with the buffer as typed so the user can retry.
            _log_store_error("updating task", e)
            return False
        if self._stale(identity, "updating task"):
            return False

        task = self.find(task_id)
        if task is not None:
            task.title = title
        if self.editing is editing:
            self.editing = None
        return True

    # ---- toggle ----

    async def toggle(self, task_id: Any, checked: bool) -> bool:
        identity = self.identity
        if identity is None:
            return False
        try:
            await self._table.update({"completed": bool(checked)}, filters=self._scope(identity, task_id))
        except BackendError as e:
            _log_store_error("updating task", e)
            return False
        if self._stale(identity, "updating task"):
            return False

        task = self.find(task_id)
        if task is not None:
            task.completed = bool(checked)
        return True

    # ---- delete ----

    async def delete(self, task_id: Any) -> bool:
        identity = self.identity
        if identity is None:
            return False
        try:
            await self._table.delete(filters=self._scope(identity, task_id))
        except BackendError as e:
            _log_store_error("deleting task", e)
            return False
        if self._stale(identity, "deleting task"):
            return False

        self.tasks = [t for t in self.tasks if t.id != task_id]
        if self.editing is not None and self.editing.task_id == task_id:
            self.editing = None
        return True

    # ---- reorder ----

    def reorder(self, active_id: Any, over_id: Any) -> None:
        """Local-only drag reorder; the new order is not persisted."""
        if active_id == over_id:
            return
        old_index = self.index_of(active_id)
        new_index = self.index_of(over_id)
        if old_index < 0 or new_index < 0:
            return
        self.tasks = array_move(self.tasks, old_index, new_index)
