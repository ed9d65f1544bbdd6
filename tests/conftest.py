from datetime import datetime, timedelta, timezone

import pytest

from equidata.core.models import MotionReading
from equidata.core.motion_manager import MotionManager
from equidata.core.motion_service import MotionService


class FakeMotionService(MotionService):
    """Records subscriptions; tests push readings with deliver()."""

    def __init__(self, available=True):
        self.available = available
        self.start_calls = 0
        self.stop_calls = 0
        self.interval = None
        self.handler = None
        self.on_error = None

    def is_available(self):
        return self.available

    def start_updates(self, interval, handler, on_error=None):
        self.start_calls += 1
        self.interval = interval
        self.handler = handler
        self.on_error = on_error

    def stop_updates(self):
        self.stop_calls += 1

    def deliver(self, z, x=0.0, y=0.0):
        self.handler(MotionReading(x=x, y=y, z=z))


class FakeClock:
    def __init__(self, start=datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def service():
    return FakeMotionService()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(service, clock):
    return MotionManager(service, clock=clock)
