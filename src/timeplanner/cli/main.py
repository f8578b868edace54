# src/timeplanner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the background event loop hosting the home screen model (refresh loop),
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.background_runner import BackgroundRunner, start_background_runner
from ..connectors.console_connector import ConsoleView, run_console_loop
from ..logging_setup import setup_logging
from ..schedules.schedule_work import LoadScheduleByDate

logger = logging.getLogger(__name__)


def _shutdown(runner: BackgroundRunner | None) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if runner is None:
        return
    try:
        runner.stop()
        runner.join(timeout=10.0)
    except Exception:
        logger.debug("Background runner shutdown failed.", exc_info=True)
    # Stores use short-lived sqlite connections per call; no explicit close required.


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(settings)
    logger.info("Starting %s... (log file %s)", settings.app_name, log_file)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    view = ConsoleView()
    runner = start_background_runner(state, on_state=view.on_state, on_effect=view.on_effect)
    if runner is None:
        logger.error("Could not start the schedule view; exiting.")
        return

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Running the refresh loop only. Press Ctrl+C to stop.")
            runner.dispatch(LoadScheduleByDate(state.date_provider.now().date()))
            try:
                stop_main.wait()
            except KeyboardInterrupt:
                pass
    finally:
        _shutdown(runner)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
