# src/todo_manager/cli/commands.py

from __future__ import annotations

import asyncio
import getpass
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import cast

from ..core.navigation import Route
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ALL_ROUTES: tuple[Route, ...] = (Route.ENTRY, Route.TASKS)


@dataclass(slots=True, frozen=True)
class Command:
    name: str
    handler: CommandHandler
    help_text: str
    routes: tuple[Route, ...]
    background: bool


@dataclass(slots=True, frozen=True)
class ParsedCommand:
    """A resolved command line, ready to run (possibly as a background task)."""

    command: Command | None
    args: list[str]
    error: str | None = None


class CommandRegistry:
    """
    Slash-command registry used by the console (/help, /add, ...).

    Commands are bound to the routes where they make sense; background commands
    are remote round-trips the console may run without waiting for them.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._order: list[str] = []

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        routes: tuple[Route, ...] = ALL_ROUTES,
        background: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        cmd = Command(name=key, handler=handler, help_text=help_text, routes=routes, background=background)
        self._commands[key] = cmd
        self._order.append(key)
        for alias in aliases:
            self._commands[alias.lower()] = cmd

    def parse(self, route: Route, line: str) -> ParsedCommand | None:
        """
        Resolve "/command args" for the given route.
        Returns None if the line is not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return ParsedCommand(None, [], "Empty command. Use /help to list available commands.")

        name = parts[0].lower()
        cmd = self._commands.get(name)
        if cmd is None or route not in cmd.routes:
            return ParsedCommand(None, [], f"Unknown command: /{name}. Use /help to list available commands.")
        return ParsedCommand(cmd, parts[1:])

    async def run(self, state: AppState, parsed: ParsedCommand, emit: CommandEmitter | None = None) -> str:
        if parsed.command is None:
            return parsed.error or ""

        handler = parsed.command.handler
        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, parsed.args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, parsed.args)

    async def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args" on the current route.
        Returns a reply string or None if not a command.
        """
        parsed = self.parse(state.navigator.current, line)
        if parsed is None:
            return None
        return await self.run(state, parsed, emit)

    def build_help(self, route: Route) -> str:
        lines = ["Available commands:"]
        for name in self._order:
            cmd = self._commands[name]
            if route in cmd.routes:
                lines.append(f"  /{name} - {cmd.help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_task_list(state: AppState) -> str:
    ctl = state.task_list
    lines: list[str] = []
    if ctl.identity is not None:
        lines.append(f"Logged in as: {ctl.identity.email}")
    if not ctl.tasks:
        lines.append("  (no tasks)")
    for pos, task in enumerate(ctl.tasks, start=1):
        mark = "x" if task.completed else " "
        if ctl.editing is not None and ctl.editing.task_id == task.id:
            lines.append(f"  {pos}. [{mark}] {ctl.editing.buffer!r}  (editing: /save or /cancel)")
        else:
            lines.append(f"  {pos}. [{mark}] {task.title}")
    return "\n".join(lines)


def _task_id_at(state: AppState, raw: str) -> object | None:
    """Map a 1-based list position (as displayed) to the task id."""
    raw = raw.rstrip(".")
    if not raw.isdecimal():
        return None
    idx = int(raw) - 1
    tasks = state.task_list.tasks
    if idx < 0 or idx >= len(tasks):
        return None
    return tasks[idx].id


# ---- entry route ----


async def _credentials(args: list[str]) -> tuple[str, str] | None:
    if not args:
        return None
    email = args[0]
    if len(args) > 1:
        password = " ".join(args[1:])
    else:
        password = await asyncio.to_thread(getpass.getpass, "Password: ")
    return email, password


async def cmd_signup(state: AppState, args: list[str]) -> str:
    creds = await _credentials(args)
    if creds is None:
        return "Usage: /signup <email> [password]"
    state.entry.set_credentials(*creds)
    await state.entry.sign_up()
    return state.entry.message


async def cmd_signin(state: AppState, args: list[str]) -> str:
    creds = await _credentials(args)
    if creds is None:
        return "Usage: /signin <email> [password]"
    state.entry.set_credentials(*creds)
    await state.entry.sign_in()
    if state.navigator.current == Route.TASKS:
        return "Signed in."
    return state.entry.message


# ---- task route ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help(state.navigator.current)


async def cmd_list(state: AppState, args: list[str]) -> str:
    return render_task_list(state)


async def cmd_whoami(state: AppState, args: list[str]) -> str:
    identity = state.task_list.identity
    if identity is None:
        return "Not signed in."
    return f"Logged in as: {identity.email} (id={identity.id})"


async def cmd_add(state: AppState, args: list[str]) -> str:
    title = " ".join(args) if args else None
    created = await state.task_list.add(title)
    if created is None:
        return "Task not added."
    return render_task_list(state)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /edit <n>"
    task_id = _task_id_at(state, args[0])
    if task_id is None or not state.task_list.edit_task(task_id):
        return f"No task #{args[0]}."
    return (
        f"Editing #{args[0]}: {state.task_list.editing.buffer!r}\n"
        "Type the new title, then /save (or /cancel)."
    )


async def cmd_save(state: AppState, args: list[str]) -> str:
    editing = state.task_list.editing
    if editing is None:
        return "Nothing is being edited. Use /edit <n> first."
    if args:
        state.task_list.set_edit_buffer(" ".join(args))
    if not await state.task_list.save_edit(editing.task_id):
        return "Task not saved."
    return render_task_list(state)


async def cmd_cancel(state: AppState, args: list[str]) -> str:
    state.task_list.cancel_edit()
    return render_task_list(state)


async def _set_completed(state: AppState, args: list[str], checked: bool, usage: str) -> str:
    if len(args) != 1:
        return usage
    task_id = _task_id_at(state, args[0])
    if task_id is None:
        return f"No task #{args[0]}."
    if not await state.task_list.toggle(task_id, checked):
        return "Task not updated."
    return render_task_list(state)


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, True, "Usage: /done <n>")


async def cmd_undone(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, False, "Usage: /undone <n>")


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <n>"
    task_id = _task_id_at(state, args[0])
    if task_id is None:
        return f"No task #{args[0]}."
    if not await state.task_list.delete(task_id):
        return "Task not deleted."
    return render_task_list(state)


async def cmd_mv(state: AppState, args: list[str]) -> str:
    """
    /mv 1 3  -> move the first task to the third position (local only, not saved)
    """
    if len(args) != 2:
        return "Usage: /mv <n> <m>"
    active_id = _task_id_at(state, args[0])
    over_id = _task_id_at(state, args[1])
    if active_id is None or over_id is None:
        return "Invalid position."
    state.task_list.reorder(active_id, over_id)
    return render_task_list(state)


async def cmd_signout(state: AppState, args: list[str]) -> str:
    await state.task_list.sign_out()
    return "Signed out."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "signup", cmd_signup, help_text="Create an account: /signup <email> [password].", routes=(Route.ENTRY,)
)
registry.register(
    "signin",
    cmd_signin,
    help_text="Sign in: /signin <email> [password].",
    aliases=["login"],
    routes=(Route.ENTRY,),
)
registry.register("list", cmd_list, help_text="Show your tasks.", aliases=["ls"], routes=(Route.TASKS,))
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title>.", routes=(Route.TASKS,), background=True
)
registry.register("edit", cmd_edit, help_text="Start editing task n: /edit <n>.", routes=(Route.TASKS,))
registry.register(
    "save", cmd_save, help_text="Save the task being edited.", routes=(Route.TASKS,), background=True
)
registry.register("cancel", cmd_cancel, help_text="Stop editing without saving.", routes=(Route.TASKS,))
registry.register(
    "done", cmd_done, help_text="Mark task n completed: /done <n>.", routes=(Route.TASKS,), background=True
)
registry.register(
    "undone", cmd_undone, help_text="Mark task n open: /undone <n>.", routes=(Route.TASKS,), background=True
)
registry.register(
    "rm", cmd_rm, help_text="Delete task n: /rm <n>.", aliases=["del"], routes=(Route.TASKS,), background=True
)
registry.register(
    "mv", cmd_mv, help_text="Move task n to position m (not saved): /mv <n> <m>.", routes=(Route.TASKS,)
)
registry.register("whoami", cmd_whoami, help_text="Show the signed-in user.", routes=(Route.TASKS,))
registry.register(
    "signout", cmd_signout, help_text="Sign out.", aliases=["logout"], routes=(Route.TASKS,)
)
