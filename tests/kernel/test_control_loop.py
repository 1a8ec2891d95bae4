"""Tests for the ControlLoop tickers."""

import asyncio

import pytest

from synergos.events.bus import EventBus
from synergos.kernel.loop import ControlLoop


@pytest.mark.asyncio
async def test_tickers_run_until_stopped():
    loop = ControlLoop()
    calls = []

    async def tick():
        calls.append("tick")
        return True

    loop.add("health", 0.01, tick)
    await loop.start()
    assert loop.is_running
    await asyncio.sleep(0.1)
    await loop.stop()

    seen = len(calls)
    assert seen >= 2
    assert loop.stats()["health"]["ticks"] == seen
    assert not loop.is_running

    await asyncio.sleep(0.05)
    assert len(calls) == seen


@pytest.mark.asyncio
async def test_false_return_counts_as_skipped():
    loop = ControlLoop()

    async def busy():
        return False

    loop.add("agents", 0.01, busy)
    await loop.start()
    await asyncio.sleep(0.06)
    await loop.stop()

    stats = loop.stats()["agents"]
    assert stats["ticks"] == 0
    assert stats["skipped"] >= 1


@pytest.mark.asyncio
async def test_failing_tick_is_reported_and_loop_continues():
    bus = EventBus()
    loop = ControlLoop(bus)
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("sensor offline")
        return True

    loop.add("health", 0.01, flaky)
    await loop.start()
    await asyncio.sleep(0.08)
    await loop.stop()

    errors = bus.history("control_loop_error")
    assert len(errors) == 1
    assert errors[0].data == {"cycle": "health", "error": "sensor offline"}
    assert errors[0].source == "control_loop"
    stats = loop.stats()["health"]
    assert stats["failures"] == 1
    assert stats["ticks"] >= 1


@pytest.mark.asyncio
async def test_start_twice_is_a_noop():
    loop = ControlLoop()
    calls = []

    async def tick():
        calls.append(1)

    loop.add("health", 0.01, tick)
    await loop.start()
    await loop.start()
    assert len(loop._tasks) == 1
    await loop.stop()


@pytest.mark.asyncio
async def test_stop_without_start():
    loop = ControlLoop()
    await loop.stop()
    assert not loop.is_running
