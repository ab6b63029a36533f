"""Rate-limited poll scheduling.

A poll is accepted when forced, when no poll was accepted before, or when
at least ``min_interval`` seconds passed since the last accepted one.
Accepted polls dispatch the fetch coroutine as a fire-and-forget task
after a short delay; rejected polls only log.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from pyyolink._constants import MIN_POLL_INTERVAL_SECONDS, POLL_DELAY_SECONDS

_logger = logging.getLogger(__name__)


class PollScheduler:
    """Minimum-interval gate in front of an async fetch.

    Parameters
    ----------
    dispatch
        Coroutine function run for every accepted poll. It must handle its
        own errors; anything it raises is only logged.
    min_interval
        Seconds between two accepted non-forced polls.
    delay
        Seconds between accepting a poll and starting the fetch.
    clock
        Monotonic clock in seconds, injectable for tests.
    loop
        Event loop used for scheduling; defaults to the running loop.
    """

    def __init__(
        self,
        dispatch: Callable[[], Awaitable[None]],
        *,
        min_interval: float = MIN_POLL_INTERVAL_SECONDS,
        delay: float = POLL_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._dispatch = dispatch
        self._min_interval = min_interval
        self._delay = delay
        self._clock = clock
        self._loop = loop
        self._last_poll_at: float | None = None
        self._handles: set[asyncio.TimerHandle] = set()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def last_poll_at(self) -> float | None:
        """Clock value of the last accepted poll."""
        return self._last_poll_at

    @property
    def pending(self) -> int:
        """Dispatches scheduled or running."""
        return len(self._handles) + len(self._tasks)

    def poll(self, force: bool = False) -> bool:
        """Accept or reject a poll request. Returns ``True`` when accepted."""
        now = self._clock()
        last = self._last_poll_at
        if not force and last is not None and now - last < self._min_interval:
            _logger.warning("Poll skipped (rate limit %ss)", self._min_interval)
            return False

        # The window only moves once a dispatch is armed.
        self._schedule()
        self._last_poll_at = now
        return True

    def refresh(self) -> bool:
        return self.poll(force=True)

    def _schedule(self) -> None:
        """Arm the delayed dispatch. Raises ``RuntimeError`` when no event loop is available."""
        loop = self._loop or asyncio.get_running_loop()
        handle: asyncio.TimerHandle | None = None

        def _launch() -> None:
            if handle is not None:
                self._handles.discard(handle)
            task = loop.create_task(self._run())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        handle = loop.call_later(max(self._delay, 0.0), _launch)
        self._handles.add(handle)

    async def _run(self) -> None:
        try:
            await self._dispatch()
        except Exception:
            _logger.exception("Scheduled poll dispatch failed")

    def close(self) -> None:
        """Cancel scheduled and running dispatches (client shutdown)."""
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
