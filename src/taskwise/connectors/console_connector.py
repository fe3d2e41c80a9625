# src/taskwise/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import Task, count_pending

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleTaskView:
    """
    Console-side view of the task list.

    Fed by a TaskStateStore subscription; prints the pending count
    whenever it changes after the first delivery.
    """

    def __init__(self) -> None:
        self.tasks: tuple[Task, ...] = ()
        self.pending: int | None = None

    def __call__(self, tasks: Sequence[Task]) -> None:
        self.tasks = tuple(tasks)
        pending = count_pending(self.tasks)
        if self.pending is not None and pending != self.pending:
            _print_ts(f"{pending} task{'' if pending == 1 else 's'} pending")
        self.pending = pending


async def run_console_loop(state: AppState, *, input_fn: InputFn = input) -> None:
    logger.info("Console connector started.")

    view = ConsoleTaskView()
    subscription = state.tasks.subscribe(view)

    try:
        await state.operations.load_all_tasks()
        _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
        print(await command_registry.handle(state, "/list"), flush=True)

        while True:
            try:
                user_input = (await asyncio.to_thread(input_fn, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            # Plain text is a shortcut for /add.
            line = user_input if user_input.startswith("/") else f"/add {user_input}"

            try:
                response = await command_registry.handle(state, line, emit=_print_ts)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                _print_ts(response)
    finally:
        # In-flight saves are not cancelled by this.
        subscription.unsubscribe()
        logger.info("Console connector finished.")
