"""
Session Timers
==============

Cancellable one-shot and periodic timers on the running asyncio loop.

- DelayedCall: fire a callback once after a delay (deferred autoplay)
- PeriodicTask: fire a callback at a fixed interval (session clock,
  playback progress)

Callbacks may be plain functions or coroutine functions. A failing
callback is logged; a periodic task keeps running after a failure.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

logger = structlog.get_logger(__name__)

TimerCallback = Callable[[], Union[None, Awaitable[Any]]]


def now_ms() -> float:
    """Wall-clock time in epoch milliseconds."""
    return time.time() * 1000


async def _invoke(name: str, callback: TimerCallback) -> None:
    try:
        result = callback()
        if inspect.isawaitable(result):
            await result
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error("timer_callback_failed", timer=name, error=str(e))


class DelayedCall:
    """
    One-shot timer.

    Usage:
        timer = DelayedCall("autoplay", 1.0, player.play)
        timer.start()
        ...
        timer.cancel()  # before it fires
    """

    def __init__(self, name: str, delay_s: float, callback: TimerCallback):
        self.name = name
        self.delay_s = delay_s
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self._fired = False

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done() and not self._fired

    @property
    def fired(self) -> bool:
        return self._fired

    def start(self) -> "DelayedCall":
        """Schedule the call; must run inside an event loop"""
        if self._task is not None:
            raise RuntimeError(f"Timer '{self.name}' already started")
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    def cancel(self) -> bool:
        """Cancel if still pending; returns True when a pending call was dropped"""
        if not self.pending:
            return False
        self._task.cancel()
        logger.debug("timer_cancelled", timer=self.name)
        return True

    async def _run(self) -> None:
        await asyncio.sleep(self.delay_s)
        self._fired = True
        logger.debug("timer_fired", timer=self.name, delay_s=self.delay_s)
        await _invoke(self.name, self._callback)


class PeriodicTask:
    """
    Fixed-interval timer.

    The first call happens one interval after start().
    """

    def __init__(self, name: str, interval_s: float, callback: TimerCallback):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.name = name
        self.interval_s = interval_s
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self.run_count = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "PeriodicTask":
        if self.is_running:
            return self
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("periodic_task_started", timer=self.name, interval_s=self.interval_s)
        return self

    def cancel(self) -> None:
        if self.is_running:
            self._task.cancel()
            logger.debug("periodic_task_cancelled", timer=self.name, runs=self.run_count)
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            self.run_count += 1
            await _invoke(self.name, self._callback)
