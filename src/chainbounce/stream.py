"""Async consumption of committed chains through an asyncio queue."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from chainbounce.context import ChainContext
from chainbounce.core import ThrottledDebounce

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from chainbounce.config import ThrottleConfig
    from chainbounce.timers import BaseTimer

_STOP = object()


class BounceStream:
    """Feeds events into a :class:`ThrottledDebounce` and yields committed contexts.

    Example::

        async with BounceStream(config=ThrottleConfig(0.5, 3.0)) as stream:
            stream.push("hi")
            stream.push("everything ok?")
            context = await stream.next_bounce()
            # context.call_count == 2, context.arguments == ("everything ok?",)
    """

    __slots__ = ("_closed", "_listener", "_queue")

    def __init__(
        self,
        *,
        config: ThrottleConfig | None = None,
        control_func: Callable[[ChainContext], Any] | None = None,
        timer: BaseTimer | None = None,
    ) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._listener = ThrottledDebounce(
            self._queue.put_nowait,
            config=config,
            control_func=control_func,
            timer=timer,
        )
        self._closed = False

    @property
    def listener(self) -> ThrottledDebounce:
        return self._listener

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, *args: Any) -> None:
        self._ensure_open()
        self._listener(*args)

    async def next_bounce(self) -> ChainContext:
        self._ensure_open()
        item = await self._queue.get()
        if item is _STOP:
            raise RuntimeError("BounceStream is closed")
        return item

    async def bounces(self) -> AsyncIterator[ChainContext]:
        """Iterate over committed contexts until closed."""
        while True:
            item = await self._queue.get()
            if item is _STOP:
                break
            yield item

    async def close(self) -> None:
        """Flush the pending chain, stop the listener and end iteration."""
        if self._closed:
            return
        self._closed = True
        self._listener.bounce()
        self._listener.cancel()
        self._queue.put_nowait(_STOP)

    async def __aenter__(self) -> BounceStream:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("BounceStream is closed")

    def __repr__(self) -> str:
        return f"BounceStream(listener={self._listener!r}, closed={self._closed})"
