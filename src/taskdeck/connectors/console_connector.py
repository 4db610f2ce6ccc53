# src/taskdeck/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..board.board_state import BoardSnapshot
from ..cli.commands import registry as command_registry
from ..cli.views import render_board
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def ainput(prompt: str) -> str:
    """input() on a worker thread so the event loop keeps running remote calls."""
    return await asyncio.to_thread(input, prompt)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /login to sign in, /help for commands, /exit to quit.\n")

    # The board re-renders after any command that changed it.
    dirty = False

    def _on_change(_snap: BoardSnapshot) -> None:
        nonlocal dirty
        dirty = True

    unsubscribe = state.board.subscribe(_on_change)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        while True:
            try:
                user_input = (await ainput(">>> ")).strip()
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

            try:
                reply = await command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is None:
                reply = "Commands start with '/'. Use /help to list them."

            _print_ts(reply)

            if dirty:
                dirty = False
                print()
                print(render_board(state.board.state))
                print()
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
