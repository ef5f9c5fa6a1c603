"""Decorator API turning a callback into a throttled-debounce listener."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, overload

from chainbounce.config import ThrottleConfig
from chainbounce.context import ChainContext
from chainbounce.core import ThrottledDebounce
from chainbounce.timers import BaseTimer

Handler = Callable[[ChainContext], Any]


@overload
def throttled_debounce(
    func: Handler,
    /,
) -> Callable[..., None]: ...


@overload
def throttled_debounce(
    *,
    throttle_wait: float = 0.5,
    max_delay: float | None = 3.0,
    control_func: Handler | None = None,
    timer: BaseTimer | None = None,
    schedule_timer: Callable[[float, Callable[[], Any]], Any] | None = None,
    cancel_timer: Callable[[Any], Any] | None = None,
    clock: Callable[[], float] | None = None,
) -> Callable[[Handler], Callable[..., None]]: ...


def throttled_debounce(
    func: Handler | None = None,
    /,
    *,
    throttle_wait: float = 0.5,
    max_delay: float | None = 3.0,
    control_func: Handler | None = None,
    timer: BaseTimer | None = None,
    schedule_timer: Callable[[float, Callable[[], Any]], Any] | None = None,
    cancel_timer: Callable[[Any], Any] | None = None,
    clock: Callable[[], float] | None = None,
) -> Callable[..., None] | Callable[[Handler], Callable[..., None]]:
    """Decorator that makes a function the commit callback of a listener.

    The decorated name becomes the listener: every call feeds one event and
    the original function runs once per committed chain with the finalized
    :class:`ChainContext`.

    The original function must accept the context as its only argument.

    Args:
        func: The function to decorate (when used without parentheses).
        throttle_wait: Quiet window.
        max_delay: Absolute per-chain deadline, or None for no limit.
        control_func: Optional hook invoked with the live context per event.
        timer: Timer backend. Defaults to the running asyncio loop.
        schedule_timer: Bare ``schedule(delay, fn) -> handle`` override.
        cancel_timer: Bare ``cancel(handle)`` override.
        clock: Time source for the overrides.

    Examples:
    ```python
        @throttled_debounce(throttle_wait=0.5, max_delay=3.0)
        def on_scroll(context: ChainContext) -> None:
            print(context.call_count, context.arguments)

        on_scroll(event)
        on_scroll.cancel()
        on_scroll.resume()
        on_scroll.bounce()
    ```
    """
    config = ThrottleConfig(throttle_wait=throttle_wait, max_delay=max_delay)

    def decorator(fn: Handler) -> Callable[..., None]:
        if inspect.iscoroutinefunction(fn):
            raise TypeError("@throttled_debounce only supports sync functions.")

        listener = ThrottledDebounce(
            fn,
            config=config,
            control_func=control_func,
            timer=timer,
            schedule_timer=schedule_timer,
            cancel_timer=cancel_timer,
            clock=clock,
        )

        @wraps(fn)
        def wrapper(*args: Any) -> None:
            listener(*args)

        wrapper.listener = listener  # type: ignore[attr-defined]
        wrapper.cancel = listener.cancel  # type: ignore[attr-defined]
        wrapper.resume = listener.resume  # type: ignore[attr-defined]
        wrapper.bounce = listener.bounce  # type: ignore[attr-defined]

        return wrapper

    if func is not None:
        return decorator(func)

    return decorator
