"""Single-flight guard and fixed-period tick scheduling."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator

log = logging.getLogger(__name__)


class SingleFlight:
    """Single-slot, non-blocking guard.

    A caller that finds the slot taken never waits; it is expected to drop
    its work for this tick.
    """

    def __init__(self) -> None:
        self._held = False

    @property
    def in_flight(self) -> bool:
        return self._held

    def try_acquire(self) -> bool:
        if self._held:
            return False
        self._held = True
        return True

    def release(self) -> None:
        self._held = False

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """Yield True with the slot held, or False if it was already taken."""
        if not self.try_acquire():
            yield False
            return
        try:
            yield True
        finally:
            self.release()


class CancelToken:
    """Liveness flag checked right before any result is applied."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class PeriodicTask:
    """Calls ``tick`` every ``interval`` seconds on the running loop.

    The first tick fires immediately. A tick that comes due while the
    previous one is still running is dropped, not queued.
    """

    def __init__(
        self,
        tick: Callable[[], Awaitable[object]],
        interval: float,
        name: str = "periodic",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._tick = tick
        self._interval = interval
        self._name = name
        self._loop_task: asyncio.Task | None = None
        self._current: asyncio.Task | None = None
        self.ticks = 0
        self.dropped_ticks = 0

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start(self) -> None:
        if self.running:
            return
        self._loop_task = asyncio.create_task(self._loop(), name=self._name)
        log.debug("Started %s (every %.2fs)", self._name, self._interval)

    async def stop(self) -> None:
        """Cancel the schedule and any tick still in flight."""
        me = asyncio.current_task()
        tasks = [t for t in (self._loop_task, self._current) if t is not None]
        self._loop_task = None
        self._current = None
        # A tick may tear down its own schedule; it must not await itself.
        tasks = [t for t in tasks if t is not me]
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if tasks:
            log.debug("Stopped %s after %d ticks (%d dropped)",
                      self._name, self.ticks, self.dropped_ticks)

    async def _loop(self) -> None:
        while True:
            if self._current is not None and not self._current.done():
                self.dropped_ticks += 1
                log.debug("%s: previous tick still running, dropping", self._name)
            else:
                self.ticks += 1
                self._current = asyncio.create_task(self._run_tick())
            await asyncio.sleep(self._interval)

    async def _run_tick(self) -> None:
        try:
            await self._tick()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log.error("%s tick error: %s", self._name, exc, exc_info=True)
