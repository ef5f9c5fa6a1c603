"""Core ThrottledDebounce class, the main entry point for the library."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from functools import partial
from typing import Any

from chainbounce.config import ThrottleConfig, Trigger
from chainbounce.context import ChainContext, SplitRequest
from chainbounce.timers import BaseTimer, CallbackTimer, LoopTimer

logger = logging.getLogger(__name__)

Callback = Callable[[ChainContext], Any]


class _Chain:
    """State owned by a single event-chain generation."""

    __slots__ = (
        "committed",
        "context",
        "generation",
        "got_any_event",
        "max_delay_handle",
        "throttle_deadline",
        "throttle_handle",
    )

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self.context = ChainContext()
        self.committed = False
        self.got_any_event = False
        self.throttle_deadline: float | None = None
        self.throttle_handle: Any = None
        self.max_delay_handle: Any = None


class ThrottledDebounce:
    """Coalesces bursts of events into a single callback per event-chain.

    Calling the instance feeds one event. Two timers compete to commit the
    pending chain:

        - the throttle window slides with every event and commits once no
          event arrived for ``throttle_wait``;
        - the max-delay deadline is armed by the first event of a chain and
          commits after ``max_delay`` no matter how busy the stream is.

    An optional ``control_func`` sees the live :class:`ChainContext` on every
    event. It may aggregate metadata into ``context.data`` and call
    ``context.split()`` to commit the chain right away.

    Example::

        throttle_wait=0.5, max_delay=3.0

        t=0.0 listener(e1)   -> chain starts, deadline 3.0
        t=0.3 listener(e2)   -> window slides to 0.8
        t=0.8 window elapses -> callback(ctx) with call_count=2, trigger=throttle

    Exceptions raised by ``callback`` or ``control_func`` are not caught;
    they propagate to whoever delivered the event or fired the timer. The
    chain is reset before ``callback`` runs, so a raising callback leaves the
    listener empty and ready for the next event. It also means the callback
    already sees the next, empty chain: ``bounce(force=True)`` from inside
    ``callback`` commits that empty chain, and doing so from every callback
    recurses without bound.

    Args:
        callback: Invoked once per committed chain with the finalized context.
        config: Timing configuration.
        control_func: Invoked once per event with the live context.
        timer: Timer backend. Defaults to :class:`LoopTimer`.
        schedule_timer: Bare ``schedule(delay, fn) -> handle`` override.
        cancel_timer: Bare ``cancel(handle)`` override, paired with *schedule_timer*.
        clock: Time source for the overrides, in the unit of their delays.
               Defaults to ``time.monotonic``.
    """

    __slots__ = (
        "_callback",
        "_cancelled",
        "_chain",
        "_config",
        "_control_func",
        "_replaying",
        "_timer",
    )

    def __init__(
        self,
        callback: Callback,
        *,
        config: ThrottleConfig | None = None,
        control_func: Callback | None = None,
        timer: BaseTimer | None = None,
        schedule_timer: Callable[[float, Callable[[], Any]], Any] | None = None,
        cancel_timer: Callable[[Any], Any] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {callback!r}")
        if control_func is not None and not callable(control_func):
            raise TypeError(f"control_func must be callable, got {control_func!r}")

        self._callback = callback
        self._control_func = control_func
        self._config = config or ThrottleConfig()
        self._timer = _resolve_timer(timer, schedule_timer, cancel_timer, clock)
        self._cancelled = False
        self._replaying = False
        self._chain = _Chain(0)

    @property
    def config(self) -> ThrottleConfig:
        return self._config

    @property
    def timer(self) -> BaseTimer:
        return self._timer

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> bool:
        """True once at least one event landed in the current chain."""
        return self._chain.got_any_event

    @property
    def generation(self) -> int:
        return self._chain.generation

    @property
    def context(self) -> ChainContext:
        """The live context of the current chain."""
        return self._chain.context

    def __call__(self, *args: Any) -> None:
        if self._cancelled:
            return

        chain = self._chain
        context = chain.context
        chain.got_any_event = True
        context.call_count += 1
        previous_arguments = context.arguments
        context.arguments = args

        if self._control_func is not None and self._run_control(chain, previous_arguments, args):
            return

        self._feed_throttle(chain)

        if self._config.max_delay is not None and chain is self._chain and chain.max_delay_handle is None:
            chain.max_delay_handle = self._timer.schedule(
                self._config.max_delay, partial(self._on_max_delay, chain)
            )

    def cancel(self) -> bool:
        """Discard the pending chain and ignore events until :meth:`resume`."""
        if self._cancelled:
            return False
        self._cancelled = True
        logger.debug("Cancelled listener, dropping chain %d", self._chain.generation)
        self._reset()
        return True

    def resume(self) -> bool:
        """Accept events again after :meth:`cancel`."""
        if not self._cancelled:
            return False
        self._cancelled = False
        logger.debug("Resumed listener")
        return True

    def bounce(self, force: bool = False) -> bool:
        """Commit the current chain now with ``trigger=global``.

        Without *force* an empty chain is left alone.
        """
        chain = self._chain
        if force or chain.got_any_event:
            return self._commit(chain, Trigger.GLOBAL)
        return False

    def _run_control(self, chain: _Chain, previous_arguments: tuple[Any, ...] | None, args: tuple[Any, ...]) -> bool:
        """Run the control hook. Returns True when the event needs no further handling."""
        context = chain.context
        request = SplitRequest(lambda: chain is self._chain, enabled=not self._replaying)
        # Hooks may feed events back in; restore the outer invocation's capability.
        outer = context._splitter
        context._splitter = request
        try:
            self._control_func(context)  # type: ignore[misc]
        finally:
            request.close()
            context._splitter = None if context.committed else outer

        # The hook committed or cancelled the chain itself; the event went with it.
        if chain is not self._chain:
            return True

        if not request.requested:
            return False

        if not request.include_current:
            context.arguments = previous_arguments
            context.call_count -= 1

        logger.debug(
            "Splitting chain %d (include_current=%s)", chain.generation, request.include_current
        )
        self._commit(chain, Trigger.CONTROL)

        if not request.include_current:
            self._replay(args)
        return True

    def _replay(self, args: tuple[Any, ...]) -> None:
        self._replaying = True
        try:
            self(*args)
        finally:
            self._replaying = False

    def _feed_throttle(self, chain: _Chain) -> None:
        wait = self._config.throttle_wait
        now = self._timer.now()

        if chain.throttle_handle is None:
            chain.throttle_deadline = now + wait
            self._arm_throttle(chain, wait)
            return

        deadline = chain.throttle_deadline
        assert deadline is not None
        if now >= deadline:
            # The check is overdue: host work kept the timer from firing.
            self._commit(chain, Trigger.THROTTLE)
            return

        elapsed = wait - (deadline - now)
        if elapsed > 0:
            chain.throttle_deadline = deadline + elapsed

    def _arm_throttle(self, chain: _Chain, delay: float) -> None:
        chain.throttle_handle = self._timer.schedule(delay, partial(self._on_throttle, chain))

    def _on_throttle(self, chain: _Chain) -> None:
        if chain is not self._chain:
            return
        chain.throttle_handle = None
        assert chain.throttle_deadline is not None
        time_left = chain.throttle_deadline - self._timer.now()
        if time_left > 0:
            self._arm_throttle(chain, min(self._config.throttle_wait, time_left))
        else:
            self._commit(chain, Trigger.THROTTLE)

    def _on_max_delay(self, chain: _Chain) -> None:
        if chain is not self._chain:
            return
        chain.max_delay_handle = None
        self._commit(chain, Trigger.DEBOUNCE)

    def _commit(self, chain: _Chain, trigger: Trigger) -> bool:
        if chain is not self._chain or chain.committed or self._cancelled:
            return False

        chain.committed = True
        context = chain.context
        context.trigger = trigger
        if context.arguments is not None:
            context.arguments = tuple(context.arguments)
        context._splitter = None

        self._reset()
        logger.debug(
            "Committed chain %d: trigger=%s call_count=%d",
            chain.generation,
            trigger,
            context.call_count,
        )
        self._callback(context)
        return True

    def _reset(self) -> None:
        chain = self._chain
        if chain.throttle_handle is not None:
            self._timer.cancel(chain.throttle_handle)
            chain.throttle_handle = None
        if chain.max_delay_handle is not None:
            self._timer.cancel(chain.max_delay_handle)
            chain.max_delay_handle = None
        self._chain = _Chain(chain.generation + 1)

    def __repr__(self) -> str:
        return (
            f"ThrottledDebounce(throttle_wait={self._config.throttle_wait}, "
            f"max_delay={self._config.max_delay}, "
            f"generation={self._chain.generation}, "
            f"cancelled={self._cancelled})"
        )


def _resolve_timer(
    timer: BaseTimer | None,
    schedule_timer: Callable[[float, Callable[[], Any]], Any] | None,
    cancel_timer: Callable[[Any], Any] | None,
    clock: Callable[[], float] | None,
) -> BaseTimer:
    if schedule_timer is None and cancel_timer is None:
        if clock is not None:
            raise ValueError("clock only applies to schedule_timer/cancel_timer")
        return timer or LoopTimer()
    if timer is not None:
        raise ValueError("pass either timer or schedule_timer/cancel_timer, not both")
    if schedule_timer is None or cancel_timer is None:
        raise ValueError("schedule_timer and cancel_timer must be given together")
    return CallbackTimer(schedule_timer, cancel_timer, clock=clock or time.monotonic)
