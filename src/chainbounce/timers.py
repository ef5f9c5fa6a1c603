"""Timer primitives the combinator schedules its checks with.

The core only needs three operations: schedule a callback after a delay,
cancel a previously scheduled callback, and read the current time. Any
host that provides them can drive a listener.
"""

from __future__ import annotations

import heapq
import itertools
import time
from abc import ABC, abstractmethod
from asyncio import AbstractEventLoop, TimerHandle, get_running_loop
from collections.abc import Callable
from typing import Any


class BaseTimer(ABC):
    """Base class for all timer backends.

    Subclasses must implement :meth:`schedule`, :meth:`cancel` and
    :meth:`now`. Handles returned by :meth:`schedule` are opaque to the
    caller and only ever passed back to :meth:`cancel`.
    """

    __slots__ = ()

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], Any]) -> Any:
        """Run *callback* once after *delay* and return a handle."""

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a handle returned by :meth:`schedule`."""

    @abstractmethod
    def now(self) -> float:
        """Current time in the same unit as the scheduled delays."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LoopTimer(BaseTimer):
    """Timer backed by an asyncio event loop.

    The loop is resolved lazily from the running loop unless one is given,
    so the first event must arrive from inside a coroutine or loop callback.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> AbstractEventLoop:
        if self._loop is None:
            self._loop = get_running_loop()
        return self._loop

    def schedule(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        return self._get_loop().call_later(delay, callback)

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancel()

    def now(self) -> float:
        return self._get_loop().time()


class CallbackTimer(BaseTimer):
    """Adapts bare ``schedule``/``cancel`` functions to :class:`BaseTimer`.

    Args:
        schedule: ``schedule(delay, callback) -> handle``.
        cancel: ``cancel(handle)``.
        clock: Time source sharing the unit of *delay*.
    """

    __slots__ = ("_cancel", "_clock", "_schedule")

    def __init__(
        self,
        schedule: Callable[[float, Callable[[], Any]], Any],
        cancel: Callable[[Any], Any],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._schedule = schedule
        self._cancel = cancel
        self._clock = clock

    def schedule(self, delay: float, callback: Callable[[], Any]) -> Any:
        return self._schedule(delay, callback)

    def cancel(self, handle: Any) -> None:
        self._cancel(handle)

    def now(self) -> float:
        return self._clock()


class VirtualHandle:
    __slots__ = ("callback", "cancelled", "due")

    def __init__(self, due: float, callback: Callable[[], Any]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def __repr__(self) -> str:
        return f"VirtualHandle(due={self.due}, cancelled={self.cancelled})"


class VirtualTimer(BaseTimer):
    """Deterministic timer driven by a simulated clock.

    Nothing fires until :meth:`advance` is called. Timers due at the same
    instant fire in the order they were scheduled, and the clock reads the
    due time of each timer while its callback runs.

    Example::

        timer = VirtualTimer()
        listener = ThrottledDebounce(print, config=ThrottleConfig(100, None), timer=timer)

        listener("a")      # t=0
        timer.advance(50)
        listener("b")      # t=50
        timer.advance(150) # fires at t=150 with call_count=2
    """

    __slots__ = ("_heap", "_now", "_seq")

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._heap: list[tuple[float, int, VirtualHandle]] = []
        self._seq = itertools.count()

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet fired or cancelled, timers."""
        return sum(1 for _, _, handle in self._heap if not handle.cancelled)

    def schedule(self, delay: float, callback: Callable[[], Any]) -> VirtualHandle:
        handle = VirtualHandle(self._now + delay, callback)
        heapq.heappush(self._heap, (handle.due, next(self._seq), handle))
        return handle

    def cancel(self, handle: VirtualHandle) -> None:
        handle.cancelled = True

    def now(self) -> float:
        return self._now

    def advance(self, delta: float) -> None:
        """Move the clock forward by *delta*, firing every timer that comes due."""
        target = self._now + delta
        while self._heap and self._heap[0][0] <= target:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._now = max(self._now, handle.due)
            handle.cancelled = True
            handle.callback()
        self._now = target

    def stall(self, delta: float) -> None:
        """Move the clock forward without firing anything.

        Simulates synchronous work that keeps the host from delivering
        timers on time.
        """
        self._now += delta

    def __repr__(self) -> str:
        return f"VirtualTimer(now={self._now}, pending={self.pending})"
