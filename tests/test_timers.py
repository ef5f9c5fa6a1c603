"""Tests for the timer backends."""

import asyncio

import pytest

from chainbounce.timers import BaseTimer, CallbackTimer, LoopTimer, VirtualTimer


class TestBaseTimer:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseTimer()  # type: ignore[abstract]


class TestVirtualTimer:
    def test_nothing_fires_before_advance(self):
        timer = VirtualTimer()
        fired = []
        timer.schedule(10, lambda: fired.append("a"))
        assert fired == []
        assert timer.pending == 1

    def test_fires_in_due_order(self):
        timer = VirtualTimer()
        fired = []
        timer.schedule(30, lambda: fired.append(("late", timer.now())))
        timer.schedule(10, lambda: fired.append(("early", timer.now())))
        timer.advance(50)
        assert fired == [("early", 10), ("late", 30)]
        assert timer.now() == 50
        assert timer.pending == 0

    def test_ties_fire_in_schedule_order(self):
        timer = VirtualTimer()
        fired = []
        timer.schedule(10, lambda: fired.append(1))
        timer.schedule(10, lambda: fired.append(2))
        timer.advance(10)
        assert fired == [1, 2]

    def test_cancel(self):
        timer = VirtualTimer()
        fired = []
        handle = timer.schedule(10, lambda: fired.append("a"))
        timer.cancel(handle)
        timer.advance(20)
        assert fired == []
        assert timer.pending == 0

    def test_callback_can_reschedule_within_window(self):
        timer = VirtualTimer()
        fired = []

        def first():
            fired.append(timer.now())
            timer.schedule(5, lambda: fired.append(timer.now()))

        timer.schedule(10, first)
        timer.advance(20)
        assert fired == [10, 15]

    def test_stall_does_not_fire(self):
        timer = VirtualTimer()
        fired = []
        timer.schedule(10, lambda: fired.append(timer.now()))
        timer.stall(25)
        assert fired == []
        assert timer.now() == 25
        timer.advance(0)
        assert fired == [25]

    def test_start(self):
        assert VirtualTimer(start=100.0).now() == 100.0


class TestCallbackTimer:
    def test_delegates(self):
        scheduled = []
        cancelled = []

        def schedule(delay, fn):
            scheduled.append((delay, fn))
            return len(scheduled)

        timer = CallbackTimer(schedule, cancelled.append, clock=lambda: 42.0)
        handle = timer.schedule(1.5, print)
        timer.cancel(handle)
        assert scheduled == [(1.5, print)]
        assert cancelled == [1]
        assert timer.now() == 42.0


class TestLoopTimer:
    async def test_schedule_fires(self):
        timer = LoopTimer()
        fired = asyncio.Event()
        timer.schedule(0.01, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1.0)

    async def test_cancel(self):
        timer = LoopTimer()
        fired = []
        handle = timer.schedule(0.01, lambda: fired.append(1))
        timer.cancel(handle)
        await asyncio.sleep(0.05)
        assert fired == []

    async def test_now_uses_loop_clock(self):
        timer = LoopTimer()
        assert timer.now() == pytest.approx(asyncio.get_running_loop().time(), abs=0.05)

    def test_outside_loop_raises(self):
        timer = LoopTimer()
        with pytest.raises(RuntimeError):
            timer.now()
