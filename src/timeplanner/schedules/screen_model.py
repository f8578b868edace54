# src/timeplanner/schedules/screen_model.py

from __future__ import annotations

"""
Home screen model.

Owns the view state of the day screen and at most one active load (refresh loop):
- loading a date cancels the previous load before starting the new one,
- mutating commands stop the loop, run, then reload the viewed date (also after a failure,
  so polling resumes on the unchanged persisted state),
- close() cancels whatever is still running,
- dispatch and close run one at a time, so two concurrent loads cannot both survive.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import replace

from ..core.work import ActionResult, EffectResult, ShowError, WorkResult
from .home_contract import HomeViewState, reduce
from .schedule_work import MUTATING_COMMANDS, LoadScheduleByDate, ScheduleWorkCommand, ScheduleWorkProcessor

logger = logging.getLogger(__name__)

StateObserver = Callable[[HomeViewState], None]
EffectObserver = Callable[[object], None]


class HomeScreenModel:
    def __init__(
            self,
            processor: ScheduleWorkProcessor,
            *,
            on_state: StateObserver | None = None,
            on_effect: EffectObserver | None = None,
    ) -> None:
        self._processor = processor
        self._on_state = on_state
        self._on_effect = on_effect
        self._state = HomeViewState()
        self._load_task: asyncio.Task[None] | None = None
        # Serializes dispatch/close so cancel-before-start cannot interleave.
        self._lock = asyncio.Lock()

    @property
    def state(self) -> HomeViewState:
        return self._state

    @property
    def is_refreshing(self) -> bool:
        return self._load_task is not None and not self._load_task.done()

    async def dispatch(self, command: ScheduleWorkCommand) -> None:
        async with self._lock:
            await self._dispatch_locked(command)

    async def close(self) -> None:
        async with self._lock:
            await self._cancel_load()

    # ---- internals ----

    async def _dispatch_locked(self, command: ScheduleWorkCommand) -> None:
        if isinstance(command, LoadScheduleByDate):
            await self._start_load(command)
            return

        if isinstance(command, MUTATING_COMMANDS):
            await self._cancel_load()
            await self._consume(command)
            if self._state.date is not None:
                await self._start_load(LoadScheduleByDate(self._state.date))
            return

        await self._consume(command)

    async def _start_load(self, command: LoadScheduleByDate) -> None:
        await self._cancel_load()
        self._load_task = asyncio.create_task(self._consume(command))
        # Yield so the load starts before the caller continues.
        await asyncio.sleep(0)

    async def _cancel_load(self) -> None:
        task = self._load_task
        self._load_task = None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _consume(self, command: ScheduleWorkCommand) -> None:
        """Run one command to completion, applying every result."""
        stream = self._processor.work(command)
        try:
            async for result in stream:
                self._apply(result)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Work command crashed: %r", command)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                with contextlib.suppress(Exception):
                    await aclose()

    def _apply(self, result: WorkResult) -> None:
        if isinstance(result, ActionResult):
            self._state = reduce(self._state, result.action)
            if self._on_state is not None:
                self._on_state(self._state)
            return

        effect = result.effect
        if isinstance(effect, ShowError):
            self._state = replace(self._state, last_error=effect.message)
        if self._on_effect is not None:
            self._on_effect(effect)
