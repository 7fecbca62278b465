# src/taskbell/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState inside the asyncio loop, schedules all
stored reminders, then runs the console REPL (or just waits for signals when
the console is disabled).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.engine.shutdown()
    except Exception:
        logger.exception("Engine shutdown failed.")

    # TaskStore uses short-lived sqlite connections per call; close() is a no-op hook.
    with contextlib.suppress(Exception):
        state.task_store.close()  # type: ignore[attr-defined]


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    state.engine.schedule_all_reminders()

    stop_main = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _handle_signal(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _handle_signal, sig)
        except (NotImplementedError, RuntimeError):
            # Some platforms (Windows) do not support loop signal handlers.
            pass

    try:
        if settings.console_enabled:
            console = asyncio.create_task(run_console_loop(state))
            stopper = asyncio.create_task(stop_main.wait())
            done, pending = await asyncio.wait(
                {console, stopper}, return_when=asyncio.FIRST_COMPLETED
            )
            for t in pending:
                t.cancel()
            if console in done:
                console.result()
        else:
            logger.info("Console disabled. Waiting for reminders. Press Ctrl+C to stop.")
            await stop_main.wait()
    finally:
        _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/taskbell")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "taskbell"))

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        pass
    logger.info("Bye.")


if __name__ == "__main__":
    main()
