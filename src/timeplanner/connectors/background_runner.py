# src/timeplanner/connectors/background_runner.py

from __future__ import annotations

"""
Background asyncio loop hosting the home screen model.

Why a thread:
- console REPL is blocking (input()).
- the refresh loop is async and wants its own event loop.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from ..core.state import AppState
from ..schedules.home_contract import HomeViewState
from ..schedules.schedule_work import ScheduleWorkCommand
from ..schedules.screen_model import HomeScreenModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event
    home: HomeScreenModel

    def submit(self, coro: Awaitable[T], timeout: float | None = 10.0) -> T:
        """Run a coroutine on the background loop and wait for its result."""
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)  # type: ignore[arg-type]
        return future.result(timeout=timeout)

    def dispatch(self, command: ScheduleWorkCommand, timeout: float | None = 10.0) -> None:
        self.submit(self.home.dispatch(command), timeout=timeout)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Failed to signal background loop stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


async def _run_until_stopped(home: HomeScreenModel, stop_event: asyncio.Event) -> None:
    try:
        await stop_event.wait()
    finally:
        await home.close()


def start_background_runner(
        state: AppState,
        *,
        on_state: Callable[[HomeViewState], None] | None = None,
        on_effect: Callable[[Any], None] | None = None,
) -> BackgroundRunner | None:
    """Start the event loop thread and attach its screen model to state."""
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()
        home = HomeScreenModel(state.schedule_processor, on_state=on_state, on_effect=on_effect)

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        holder["home"] = home
        ready.set()

        try:
            loop.run_until_complete(_run_until_stopped(home, stop_event))
        finally:
            with contextlib.suppress(RuntimeError):
                loop.stop()
            with contextlib.suppress(RuntimeError):
                loop.close()

    t = threading.Thread(target=runner, name="timeplanner-loop", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")
    home = holder.get("home")

    if (
            not isinstance(loop, asyncio.AbstractEventLoop)
            or not isinstance(stop_event, asyncio.Event)
            or not isinstance(home, HomeScreenModel)
    ):
        logger.error("Background loop thread did not initialize properly.")
        return None

    logger.info("Background loop thread started.")
    bg = BackgroundRunner(thread=t, loop=loop, stop_event=stop_event, home=home)
    state.runner = bg
    state.home = home
    return bg
