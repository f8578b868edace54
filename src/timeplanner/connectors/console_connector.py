# src/timeplanner/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_home
from ..core.state import AppState
from ..core.work import ShowError
from ..schedules.home_contract import HomeViewState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleView:
    """
    Prints home screen updates pushed from the background loop.

    Only status changes are printed; the first state after a command is already part of
    the command reply.
    """

    def __init__(self) -> None:
        self._last: HomeViewState | None = None

    def on_state(self, view: HomeViewState) -> None:
        previous, self._last = self._last, view
        if previous is None or previous.date != view.date:
            return
        if previous.schedule is None or view.schedule is None:
            return
        before = {t.key: t.execution_status for t in previous.schedule.time_tasks}
        changed = [
            t for t in view.schedule.time_tasks
            if t.key in before and before[t.key] != t.execution_status
        ]
        for task in changed:
            _print_ts(
                f"[SCHEDULE] {task.time_range.start:%H:%M}-{task.time_range.end:%H:%M} "
                f"is now {task.execution_status.value}"
            )

    def on_effect(self, effect: object) -> None:
        if isinstance(effect, ShowError):
            _print_ts(f"[ERROR] {effect.message}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands, /day to open today. Use /exit to quit.\n")

    lock = getattr(state, "lock", None)

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations.
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> ").strip()
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

        if not user_input.startswith("/"):
            home = getattr(state, "home", None)
            _print_ts(render_home(home.state) if home is not None else "Use /help for commands.")
            continue

        try:
            if lock:
                with lock:
                    cmd_response = command_registry.handle(state, user_input, emit=emit)
            else:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)

    logger.info("Console connector finished.")
