"""Tests for the speed-round countdown."""

import asyncio

from family_recall.training.timer import SpeedRoundTimer


def test_no_running_loop_stays_disarmed():
    calls = []
    timer = SpeedRoundTimer(10, lambda: calls.append(1))
    assert timer.start() is False
    assert not timer.armed
    assert calls == []


async def test_fires_once():
    calls = []
    timer = SpeedRoundTimer(10, lambda: calls.append(1))
    assert timer.start() is True
    assert timer.armed
    await asyncio.sleep(0.1)
    assert calls == [1]
    assert timer.fired
    assert not timer.armed


async def test_cancel_prevents_firing():
    calls = []
    timer = SpeedRoundTimer(30, lambda: calls.append(1))
    timer.start()
    timer.cancel()
    await asyncio.sleep(0.1)
    assert calls == []
    assert not timer.fired
