"""chainbounce: throttled debounce for high-frequency event streams.

Collapses bursts of events into a single callback per event-chain, using a
sliding quiet window together with an absolute per-chain deadline.

Basic usage:

    from chainbounce import ThrottleConfig, ThrottledDebounce

    def on_bounce(context):
        print(context.trigger, context.call_count, context.arguments)

    listener = ThrottledDebounce(on_bounce, config=ThrottleConfig(throttle_wait=0.5, max_delay=3.0))
    listener("scroll", 120)
    listener("scroll", 180)   # one callback, call_count=2

Decorator usage:

    from chainbounce import throttled_debounce

    @throttled_debounce(throttle_wait=0.5, max_delay=3.0)
    def on_scroll(context):
        ...
"""

from chainbounce.config import ThrottleConfig, Trigger
from chainbounce.context import ChainContext, SplitRequest
from chainbounce.core import ThrottledDebounce
from chainbounce.decorator import throttled_debounce
from chainbounce.stream import BounceStream
from chainbounce.timers import BaseTimer, CallbackTimer, LoopTimer, VirtualTimer

__all__ = [
    "BaseTimer",
    "BounceStream",
    "CallbackTimer",
    "ChainContext",
    "LoopTimer",
    "SplitRequest",
    "ThrottleConfig",
    "ThrottledDebounce",
    "Trigger",
    "VirtualTimer",
    "throttled_debounce",
]

__version__ = "0.1.0"
