from __future__ import annotations

import asyncio
import logging

import pytest

from pyyolink.scheduler import PollScheduler


class _Clock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class _Dispatch:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


async def _drain() -> None:
    await asyncio.sleep(0.02)


@pytest.mark.asyncio
async def test_polls_within_interval_dispatch_once() -> None:
    clock = _Clock()
    dispatch = _Dispatch()
    scheduler = PollScheduler(dispatch, min_interval=5.0, delay=0.0, clock=clock)

    assert scheduler.poll() is True
    clock.now += 1.0
    assert scheduler.poll() is False
    await _drain()

    assert dispatch.calls == 1
    assert scheduler.last_poll_at == 100.0


@pytest.mark.asyncio
async def test_forced_polls_always_dispatch() -> None:
    dispatch = _Dispatch()
    scheduler = PollScheduler(dispatch, min_interval=5.0, delay=0.0, clock=_Clock())

    assert scheduler.poll() is True
    assert scheduler.poll(force=True) is True
    assert scheduler.refresh() is True
    await _drain()

    assert dispatch.calls == 3


@pytest.mark.asyncio
async def test_rejected_poll_does_not_move_the_window() -> None:
    clock = _Clock()
    dispatch = _Dispatch()
    scheduler = PollScheduler(dispatch, min_interval=5.0, delay=0.0, clock=clock)

    scheduler.poll()
    clock.now = 103.0
    assert scheduler.poll() is False
    clock.now = 105.0
    assert scheduler.poll() is True
    await _drain()

    assert dispatch.calls == 2
    assert scheduler.last_poll_at == 105.0


@pytest.mark.asyncio
async def test_rejection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    scheduler = PollScheduler(_Dispatch(), min_interval=5.0, delay=0.0, clock=_Clock())
    scheduler.poll()
    with caplog.at_level(logging.WARNING):
        scheduler.poll()
    assert "rate limit" in caplog.text
    await _drain()


@pytest.mark.asyncio
async def test_dispatch_errors_are_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    async def _boom() -> None:
        raise RuntimeError("hub unreachable")

    scheduler = PollScheduler(_boom, delay=0.0, clock=_Clock())
    with caplog.at_level(logging.ERROR):
        scheduler.poll()
        await _drain()

    assert "dispatch failed" in caplog.text
    assert scheduler.pending == 0


@pytest.mark.asyncio
async def test_close_cancels_delayed_dispatch() -> None:
    dispatch = _Dispatch()
    scheduler = PollScheduler(dispatch, delay=10.0, clock=_Clock())

    scheduler.poll()
    assert scheduler.pending == 1
    scheduler.close()
    assert scheduler.pending == 0
    await _drain()

    assert dispatch.calls == 0


def test_poll_outside_event_loop_leaves_window_open() -> None:
    dispatch = _Dispatch()
    scheduler = PollScheduler(dispatch, min_interval=5.0, delay=0.0, clock=_Clock())

    with pytest.raises(RuntimeError):
        scheduler.poll()
    assert scheduler.last_poll_at is None
    assert scheduler.pending == 0

    async def _poll_in_loop() -> bool:
        accepted = scheduler.poll()
        await _drain()
        return accepted

    assert asyncio.run(_poll_in_loop()) is True
    assert dispatch.calls == 1
    assert scheduler.last_poll_at == 100.0
