# src/todo_manager/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the backend client and AppState, then runs the
console REPL on an asyncio event loop until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..backend.client import friendly_backend_config_error
from ..cli.bootstrap import create_backend, create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    try:
        backend = create_backend(settings=settings)
    except RuntimeError as e:
        msg = friendly_backend_config_error(e)
        logger.error("Startup failed: %s", msg)
        print(msg)
        return

    try:
        state = create_initial_state(backend, settings=settings)
        await run_console_loop(state)
    finally:
        await backend.aclose()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        print()
        logger.info("KeyboardInterrupt, exiting.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
