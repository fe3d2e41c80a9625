# src/taskwise/cli/commands.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Awaitable, Callable, Sequence

from ..core.errors import StorageIOError, TaskNotFound, ValidationError
from ..core.state import AppState
from ..tasks.task_models import MutationOutcome, Task, count_pending

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, str, CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Handlers get the argument text after the command name verbatim.
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        arg_text = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, arg_text, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_tasks(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "No tasks yet. Add one with /add <title>."

    lines = []
    for i, t in enumerate(tasks, start=1):
        mark = "x" if t.is_complete else " "
        lines.append(f"{i}. [{mark}] {t.title}  ({t.id})")

    pending = count_pending(tasks)
    lines.append(f"{pending} task{'' if pending == 1 else 's'} pending")
    return "\n".join(lines)


def resolve_task(tasks: Sequence[Task], ref: str) -> Task:
    """
    Resolve a user reference to a task.

    Accepts a 1-based position in the current list or a task id.
    """
    for t in tasks:
        if t.id == ref:
            return t

    if ref.isdigit():
        pos = int(ref)
        if 1 <= pos <= len(tasks):
            return tasks[pos - 1]

    raise TaskNotFound(ref)


async def cmd_help(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    return render_tasks(state.tasks.current())


async def cmd_add(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    try:
        task = await state.operations.create_task(arg_text)
    except ValidationError as e:
        return f"Cannot add task: {e}"
    except StorageIOError:
        return "Task added, but it could not be saved. It will be lost on restart."
    return f'"{task.title}" has been added to your list.'


async def _set_status(state: AppState, arg_text: str, is_complete: bool | None) -> str:
    args = arg_text.split()
    if not args:
        return "Usage: /done <n|id>, /undo <n|id> or /toggle <n|id>."

    try:
        task = resolve_task(state.tasks.current(), args[0])
    except TaskNotFound as e:
        return str(e)

    target = (not task.is_complete) if is_complete is None else is_complete
    try:
        outcome = await state.operations.update_task_status(task.id, target)
    except StorageIOError:
        return f'"{task.title}" updated, but the change could not be saved.'

    if outcome is MutationOutcome.NOT_FOUND:
        return str(TaskNotFound(task.id))
    if outcome is MutationOutcome.UNCHANGED:
        return f'"{task.title}" is already {"complete" if target else "incomplete"}.'
    return f'Task {"completed" if target else "marked incomplete"}: "{task.title}".'


async def cmd_done(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    return await _set_status(state, arg_text, True)


async def cmd_undo(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    return await _set_status(state, arg_text, False)


async def cmd_toggle(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    return await _set_status(state, arg_text, None)


async def cmd_rm(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    args = arg_text.split()
    if not args:
        return "Usage: /rm <n|id>."

    try:
        task = resolve_task(state.tasks.current(), args[0])
    except TaskNotFound as e:
        return str(e)

    try:
        outcome = await state.operations.delete_task(task.id)
    except StorageIOError:
        return f'"{task.title}" removed, but the change could not be saved.'

    if outcome is MutationOutcome.NOT_FOUND:
        return str(TaskNotFound(task.id))
    return f'"{task.title}" has been removed from your list.'


async def cmd_reload(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    if emit:
        with contextlib.suppress(Exception):
            emit("Reloading tasks from storage...")
    await state.operations.load_all_tasks()
    return f"Loaded {len(state.tasks.current())} tasks."


async def cmd_status(state: AppState, arg_text: str, emit: CommandEmitter | None = None) -> str:
    tasks = state.tasks.current()
    backend = getattr(state.settings, "storage_backend", "?")
    persisted = "ON" if state.operations.storage_available else "OFF (not saved)"
    return (
        "Status:\n"
        f"  Storage: {backend}, persistence {persisted}\n"
        f"  Tasks: {len(tasks)} total, {count_pending(tasks)} pending"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.", aliases=["new"])
registry.register("done", cmd_done, help_text="Mark a task complete: /done <n|id>.")
registry.register("undo", cmd_undo, help_text="Mark a task incomplete: /undo <n|id>.")
registry.register("toggle", cmd_toggle, help_text="Flip a task's completion: /toggle <n|id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n|id>.", aliases=["del", "delete"])
registry.register("reload", cmd_reload, help_text="Reload tasks from storage.")
registry.register("status", cmd_status, help_text="Show storage and task counts.")
