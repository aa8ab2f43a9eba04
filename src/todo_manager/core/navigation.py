# src/todo_manager/core/navigation.py

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

logger = logging.getLogger(__name__)


class Route(StrEnum):
    ENTRY = "/"
    TASKS = "/tasks"


RouteListener = Callable[[Route], None]


class RouteNavigator:
    """
    Holds the current route and notifies listeners on change.

    Pushing the route that is already current still notifies, so a redirect
    always re-mounts the target view.
    """

    def __init__(self, initial: Route = Route.ENTRY) -> None:
        self.current: Route = initial
        self._listeners: list[RouteListener] = []

    def subscribe(self, listener: RouteListener) -> None:
        self._listeners.append(listener)

    def push(self, route: str) -> None:
        target = Route(route)
        logger.debug("navigate %s -> %s", self.current.value, target.value)
        self.current = target
        for listener in list(self._listeners):
            listener(target)
