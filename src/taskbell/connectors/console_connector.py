# src/taskbell/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks import task_api

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Process one console line on the event-loop thread.

    Slash commands go to the registry; any other text becomes a plain task.
    """
    def emit(text: str) -> None:
        _print_ts(text)

    try:
        reply = command_registry.handle(state, line, emit=emit)
        if reply is not None:
            return reply
        task = task_api.add_plain_task(state, line)
        return f"Added task #{task.id}."
    except ValueError as e:
        return str(e)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    input() blocks, so it runs in a worker thread; the loop thread stays free
    to fire reminder timers. Command handling itself happens back on the loop
    thread, which is the only thread that touches the engine.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task, or use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
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

        reply = handle_line(state, user_input)
        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
