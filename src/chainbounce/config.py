"""Configuration types for the chainbounce library."""

from dataclasses import dataclass
from enum import StrEnum


class Trigger(StrEnum):
    """What caused an event-chain to be committed.

    THROTTLE: The sliding quiet window elapsed with no new event.
    DEBOUNCE: The absolute max-delay deadline of the chain was reached.
    CONTROL:  The control hook split the chain.
    GLOBAL:   A manual ``bounce()`` on the listener.
    """

    THROTTLE = "throttle"
    DEBOUNCE = "debounce"
    CONTROL = "control"
    GLOBAL = "global"


@dataclass(frozen=True, slots=True)
class ThrottleConfig:
    """Timing configuration for a ThrottledDebounce instance.

    Durations are expressed in the unit of the timer in use (seconds for
    the default asyncio timer).

    Attributes:
        throttle_wait: Quiet window. The chain is committed once no new
                       event arrived for this long.
        max_delay: Absolute deadline measured from the first event of a
                   chain. Guarantees a commit under continuous activity.
                   None disables the deadline.
    """

    throttle_wait: float = 0.5
    max_delay: float | None = 3.0

    def __post_init__(self) -> None:
        if self.throttle_wait <= 0:
            raise ValueError(f"throttle_wait must be positive, got {self.throttle_wait}")

        if self.max_delay is not None and self.max_delay <= 0:
            raise ValueError(f"max_delay must be positive or None, got {self.max_delay}")
