"""Tests for the @throttled_debounce decorator."""

import asyncio

import pytest

from chainbounce.config import Trigger
from chainbounce.core import ThrottledDebounce
from chainbounce.decorator import throttled_debounce
from chainbounce.timers import VirtualTimer


class TestThrottledDebounceDecorator:
    def test_without_parentheses(self):
        @throttled_debounce
        def handler(ctx) -> None:
            pass

        assert isinstance(handler.listener, ThrottledDebounce)  # type: ignore[attr-defined]
        assert handler.listener.config.throttle_wait == 0.5  # type: ignore[attr-defined]
        assert handler.listener.config.max_delay == 3.0  # type: ignore[attr-defined]

    def test_with_parentheses(self):
        @throttled_debounce(throttle_wait=0.2, max_delay=None)
        def handler(ctx) -> None:
            pass

        assert handler.listener.config.throttle_wait == 0.2  # type: ignore[attr-defined]
        assert handler.listener.config.max_delay is None  # type: ignore[attr-defined]

    def test_async_function_raises(self):
        with pytest.raises(TypeError, match="only supports sync functions"):

            @throttled_debounce
            async def handler(ctx) -> None:
                pass

    def test_invalid_config_raises(self):
        with pytest.raises(ValueError, match="throttle_wait must be positive"):
            throttled_debounce(throttle_wait=0)

    def test_preserves_function_name(self):
        @throttled_debounce(throttle_wait=1.0)
        def on_scroll(ctx) -> None:
            pass

        assert on_scroll.__name__ == "on_scroll"

    def test_wrapper_attributes(self):
        @throttled_debounce(throttle_wait=1.0)
        def handler(ctx) -> None:
            pass

        assert callable(handler.cancel)  # type: ignore[attr-defined]
        assert callable(handler.resume)  # type: ignore[attr-defined]
        assert callable(handler.bounce)  # type: ignore[attr-defined]

    def test_calls_feed_listener(self):
        timer = VirtualTimer()
        seen = []

        @throttled_debounce(throttle_wait=100, max_delay=None, timer=timer)
        def handler(ctx) -> None:
            seen.append(ctx)

        handler("a", 1)
        handler("b", 2)
        timer.advance(100)

        assert len(seen) == 1
        assert seen[0].call_count == 2
        assert seen[0].arguments == ("b", 2)

    def test_control_func_and_bounce(self):
        timer = VirtualTimer()
        seen = []

        def control(ctx):
            ctx.data.setdefault("targets", []).append(ctx.arguments[0])

        @throttled_debounce(throttle_wait=100, control_func=control, timer=timer)
        def handler(ctx) -> None:
            seen.append(ctx)

        handler("a")
        handler("b")
        assert handler.bounce() is True  # type: ignore[attr-defined]
        assert seen[0].trigger is Trigger.GLOBAL
        assert seen[0].data == {"targets": ["a", "b"]}

    def test_cancel_and_resume(self):
        timer = VirtualTimer()
        seen = []

        @throttled_debounce(throttle_wait=100, timer=timer)
        def handler(ctx) -> None:
            seen.append(ctx)

        handler("a")
        assert handler.cancel() is True  # type: ignore[attr-defined]
        timer.advance(1000)
        assert seen == []
        assert handler.resume() is True  # type: ignore[attr-defined]

    async def test_on_running_loop(self):
        seen = []

        @throttled_debounce(throttle_wait=0.05, max_delay=1.0)
        def handler(ctx) -> None:
            seen.append(ctx)

        handler("a")
        handler("b")
        await asyncio.sleep(0.2)
        assert len(seen) == 1
        assert seen[0].call_count == 2

    def test_timer_overrides_with_clock(self):
        timer = VirtualTimer()
        seen = []

        @throttled_debounce(
            throttle_wait=100,
            max_delay=None,
            schedule_timer=timer.schedule,
            cancel_timer=timer.cancel,
            clock=timer.now,
        )
        def handler(ctx) -> None:
            seen.append((timer.now(), ctx))

        handler("a")
        timer.advance(100)

        assert len(seen) == 1
        assert seen[0][0] == 100
        assert seen[0][1].trigger is Trigger.THROTTLE
