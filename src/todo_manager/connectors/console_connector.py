# src/todo_manager/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from datetime import datetime

from ..cli.commands import ParsedCommand, registry as command_registry, render_task_list
from ..core.navigation import Route
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPTS = {
    Route.ENTRY: "login> ",
    Route.TASKS: "tasks> ",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class _Background:
    """Remote round-trips started from the prompt; results print when they land."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    def spawn(self, coro: Awaitable[str]) -> None:
        async def runner() -> None:
            try:
                reply = await coro
            except Exception:
                logger.exception("Background command crashed.")
                reply = "Internal error while handling a command."
            if reply:
                _print_ts(reply)

        task = asyncio.create_task(runner())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self, timeout: float = 10.0) -> None:
        if not self._tasks:
            return
        logger.info("Waiting for %d pending request(s)...", len(self._tasks))
        _, still_pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in still_pending:
            task.cancel()


async def _enter_route(state: AppState, route: Route) -> None:
    if route == Route.ENTRY:
        if state.entry.message:
            _print_ts(state.entry.message)
        _print_ts("Sign in with /signin <email> or create an account with /signup <email>.")
        return

    await state.task_list.mount()
    if state.navigator.current == Route.TASKS:
        _print_ts("Your Tasks\n" + render_task_list(state))


async def _run_inline(state: AppState, parsed: ParsedCommand) -> None:
    try:
        reply = await command_registry.run(state, parsed)
    except Exception:
        logger.exception("Command handler crashed.")
        reply = "Internal error while handling a command."
    if reply:
        _print_ts(reply)


def _handle_text(state: AppState, text: str, background: _Background) -> None:
    if state.navigator.current != Route.TASKS:
        _print_ts("Not signed in. Use /signin <email> or /signup <email>.")
        return

    ctl = state.task_list
    if ctl.editing is not None:
        ctl.set_edit_buffer(text)
        _print_ts(f"Edit buffer: {text!r} (/save to store, /cancel to discard)")
        return

    ctl.set_new_task(text)

    async def add() -> str:
        created = await ctl.add()
        return render_task_list(state) if created is not None else "Task not added."

    background.spawn(add())


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    background = _Background()
    pending_routes: list[Route] = []
    state.navigator.subscribe(pending_routes.append)

    # Open the task view; the session gate sends us to the entry screen if nobody is signed in.
    state.navigator.push(Route.TASKS)

    try:
        while True:
            if pending_routes:
                # Only the latest navigation matters; earlier ones were superseded.
                route = pending_routes[-1]
                pending_routes.clear()
                await _enter_route(state, route)
                continue

            route = state.navigator.current

            try:
                line = (await asyncio.to_thread(input, PROMPTS[route])).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            parsed = command_registry.parse(route, line)
            if parsed is None:
                _handle_text(state, line, background)
                continue

            if parsed.command is not None and parsed.command.background:
                background.spawn(command_registry.run(state, parsed))
            else:
                await _run_inline(state, parsed)
    finally:
        await background.drain()
        logger.info("Console connector finished.")
