"""Shared fixtures for chainbounce tests."""

import pytest

from chainbounce.config import ThrottleConfig
from chainbounce.core import ThrottledDebounce
from chainbounce.timers import VirtualTimer


class Recorder:
    """Commit callback that keeps every finalized context with its commit time."""

    def __init__(self, timer: VirtualTimer) -> None:
        self.timer = timer
        self.contexts = []
        self.times = []

    def __call__(self, context) -> None:
        self.contexts.append(context)
        self.times.append(self.timer.now())

    @property
    def last(self):
        return self.contexts[-1]


@pytest.fixture
def timer():
    return VirtualTimer()


@pytest.fixture
def recorder(timer):
    return Recorder(timer)


@pytest.fixture
def make_listener(timer, recorder):
    def factory(throttle_wait=100, max_delay=None, control_func=None):
        return ThrottledDebounce(
            recorder,
            config=ThrottleConfig(throttle_wait=throttle_wait, max_delay=max_delay),
            control_func=control_func,
            timer=timer,
        )

    return factory
