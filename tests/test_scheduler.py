"""Single-flight guard and periodic tick scheduling."""

from __future__ import annotations

import asyncio

import pytest

from rps_watch.sync.scheduler import CancelToken, PeriodicTask, SingleFlight

from tests.conftest import wait_for


def test_single_flight_hold_releases_on_error():
    guard = SingleFlight()

    with pytest.raises(RuntimeError):
        with guard.hold() as acquired:
            assert acquired
            assert guard.in_flight
            raise RuntimeError("boom")

    assert not guard.in_flight


def test_single_flight_second_hold_does_not_acquire():
    guard = SingleFlight()
    with guard.hold() as outer:
        with guard.hold() as inner:
            assert outer is True
            assert inner is False
        # the refused hold must not release the outer one
        assert guard.in_flight
    assert not guard.in_flight


def test_cancel_token():
    token = CancelToken()
    assert not token.cancelled
    token.cancel()
    assert token.cancelled


async def test_first_tick_is_immediate():
    calls = []

    async def tick():
        calls.append(1)

    task = PeriodicTask(tick, interval=60)
    task.start()
    await wait_for(lambda: calls)
    await task.stop()

    assert calls == [1]


async def test_slow_tick_drops_overlapping_ticks():
    gate = asyncio.Event()
    active = 0
    max_active = 0

    async def tick():
        nonlocal active, max_active
        active += 1
        max_active = max(max_active, active)
        await gate.wait()
        active -= 1

    task = PeriodicTask(tick, interval=0.01)
    task.start()
    await wait_for(lambda: task.dropped_ticks >= 3)

    assert task.ticks == 1
    assert max_active == 1

    gate.set()
    await wait_for(lambda: task.ticks >= 2)
    await task.stop()
    assert max_active == 1


async def test_tick_errors_do_not_stop_schedule():
    calls = 0

    async def tick():
        nonlocal calls
        calls += 1
        raise RuntimeError("transient")

    task = PeriodicTask(tick, interval=0.01)
    task.start()
    await wait_for(lambda: calls >= 3)

    assert task.running
    await task.stop()


async def test_stop_cancels_in_flight_tick_and_timer():
    started = asyncio.Event()
    finished = False

    async def tick():
        nonlocal finished
        started.set()
        await asyncio.sleep(10)
        finished = True

    task = PeriodicTask(tick, interval=0.01)
    task.start()
    await started.wait()
    await task.stop()

    assert not task.running
    ticks = task.ticks
    await asyncio.sleep(0.05)
    assert task.ticks == ticks
    assert not finished


async def test_tick_can_stop_its_own_schedule():
    task: PeriodicTask

    async def tick():
        await task.stop()

    task = PeriodicTask(tick, interval=0.01)
    task.start()
    await wait_for(lambda: not task.running)
    assert task.ticks == 1


def test_interval_must_be_positive():
    async def tick():
        pass

    with pytest.raises(ValueError):
        PeriodicTask(tick, interval=0)
