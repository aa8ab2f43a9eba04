# src/todo_manager/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_list import TaskListController
from .entry import EntryView
from .navigation import RouteNavigator
from .ports import AuthProvider, TaskTable
from .session_gate import SessionGate


@dataclass
class AppState:
    """
    Runtime state shared by connectors and commands.

    The settings object is typed as Any because tests pass a SimpleNamespace.
    """

    settings: Any
    auth: AuthProvider
    table: TaskTable
    navigator: RouteNavigator
    gate: SessionGate
    entry: EntryView
    task_list: TaskListController

    @classmethod
    def build(
            cls,
            *,
            settings: Any,
            auth: AuthProvider,
            table: TaskTable,
            navigator: RouteNavigator | None = None,
    ) -> AppState:
        nav = navigator or RouteNavigator()
        gate = SessionGate(auth, nav)
        return cls(
            settings=settings,
            auth=auth,
            table=table,
            navigator=nav,
            gate=gate,
            entry=EntryView(auth, nav),
            task_list=TaskListController(table, gate),
        )
