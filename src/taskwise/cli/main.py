# src/taskwise/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the persisted task list and
runs the console connector.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/taskwise")
    log_file = setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s (log file %s)...", getattr(settings, "app_name", "taskwise"), log_file)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    if not settings.console_enabled:
        logger.warning("Console disabled; nothing to run. Set TASKWISE_CONSOLE_ENABLED=1.")
        return

    try:
        asyncio.run(run_console_loop(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
