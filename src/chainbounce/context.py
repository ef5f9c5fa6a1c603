"""Per-chain context handed to the control hook and the commit callback."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from chainbounce.config import Trigger


class SplitRequest:
    """Split capability scoped to a single control-hook invocation.

    The request is accepted at most once, only while the hook is running
    and only while the chain it was created for is still the live one.
    Every other call is rejected with ``False``.
    """

    __slots__ = ("_enabled", "_is_current", "_open", "include_current", "requested")

    def __init__(self, is_current: Callable[[], bool], *, enabled: bool = True) -> None:
        self._is_current = is_current
        self._enabled = enabled
        self._open = True
        self.requested = False
        self.include_current = False

    def __call__(self, include_current: bool = False) -> bool:
        if not (self._enabled and self._open) or self.requested:
            return False
        if not self._is_current():
            return False
        self.requested = True
        self.include_current = include_current
        return True

    def close(self) -> None:
        """Make the capability permanently inert."""
        self._open = False


@dataclass(slots=True)
class ChainContext:
    """Data accumulated for one event-chain.

    Attributes:
        call_count: Number of events that landed in this chain.
        arguments: Positional arguments of the latest event, or None
                   when the chain has no event yet.
        trigger: What committed the chain. None until commit.
        data: Free-form metadata aggregated by the control hook.
    """

    call_count: int = 0
    arguments: tuple[Any, ...] | None = None
    trigger: Trigger | None = None
    data: dict[str, Any] = field(default_factory=dict)
    _splitter: SplitRequest | None = field(default=None, repr=False, compare=False)

    @property
    def committed(self) -> bool:
        return self.trigger is not None

    def split(self, include_current: bool = False) -> bool:
        """Ask for the chain to be committed right after the control hook returns.

        With ``include_current=False`` the event being inspected is left out
        of this chain and replayed as the first event of the next one. With
        ``include_current=True`` it is committed along with this chain.

        Returns True when the request was accepted.
        """
        if self._splitter is None:
            return False
        return self._splitter(include_current)
