from datetime import timedelta

import pytest

from equidata.core.errors import SensorUnavailableError
from equidata.core.models import MotionReading
from equidata.core.motion_manager import MotionManager
from equidata.core.settings import SAMPLE_INTERVAL_S, STANDARD_GRAVITY

from .conftest import FakeMotionService


def test_initial_state(manager):
    snap = manager.snapshot()
    assert snap.samples == ()
    assert not snap.is_measuring
    assert snap.start_time is None


def test_toggle_starts_and_subscribes_at_fixed_interval(manager, service, clock):
    manager.toggle()
    assert manager.is_measuring
    assert manager.start_time == clock.now
    assert service.start_calls == 1
    assert service.interval == SAMPLE_INTERVAL_S


def test_toggle_twice_is_one_start_stop_pair(manager, service):
    manager.toggle()
    manager.toggle()
    assert not manager.is_measuring
    assert service.start_calls == 1
    assert service.stop_calls == 1


def test_reading_is_converted_to_g(manager, service, clock):
    manager.toggle()
    service.deliver(z=-0.2)
    (sample,) = manager.snapshot().samples
    assert sample.timestamp == clock.now
    assert sample.value == pytest.approx(-0.2 / STANDARD_GRAVITY)


def test_only_z_axis_is_recorded(manager, service):
    manager.toggle()
    service.deliver(z=9.81, x=100.0, y=-50.0)
    assert manager.snapshot().samples[0].value == pytest.approx(1.0)


def test_readings_after_stop_are_discarded(manager, service):
    manager.toggle()
    service.deliver(z=1.0)
    in_flight = service.handler
    manager.toggle()
    in_flight(MotionReading(x=0.0, y=0.0, z=2.0))
    assert len(manager.snapshot()) == 1


def test_start_alone_does_not_record(manager, service):
    assert manager.start()
    service.deliver(z=1.0)
    assert len(manager.snapshot()) == 0


def test_window_keeps_last_twenty_seconds(manager, service, clock):
    manager.toggle()
    inserted = []
    for i in range(400):
        service.deliver(z=float(i))
        inserted.append(clock.now)
        cutoff = clock.now - timedelta(seconds=20)
        resident = [s.timestamp for s in manager.snapshot().samples]
        assert resident == [t for t in inserted if t >= cutoff]
        clock.advance(0.1)


def test_sample_exactly_at_cutoff_is_kept(manager, service, clock):
    manager.toggle()
    service.deliver(z=1.0)
    clock.advance(20)
    service.deliver(z=2.0)
    assert len(manager.snapshot()) == 2
    clock.advance(0.001)
    service.deliver(z=3.0)
    assert [s.value * STANDARD_GRAVITY for s in manager.snapshot().samples] == pytest.approx([2.0, 3.0])


def test_stop_keeps_series_and_start_time(manager, service, clock):
    manager.toggle()
    started = clock.now
    service.deliver(z=1.0)
    clock.advance(5)
    manager.stop()
    snap = manager.snapshot()
    assert len(snap) == 1
    assert snap.start_time == started
    assert not snap.is_measuring


def test_restart_keeps_elapsed_baseline(manager, service, clock):
    manager.toggle()
    started = clock.now
    clock.advance(3)
    manager.toggle()
    clock.advance(3)
    manager.toggle()
    assert manager.start_time == started
    service.deliver(z=0.0)
    assert manager.generate_csv().splitlines()[1] == "00:00:06.000,0.0"


@pytest.mark.parametrize("measuring", [True, False])
def test_reset_clears_everything_but_flag(manager, service, clock, measuring):
    manager.toggle()
    service.deliver(z=1.0)
    if not measuring:
        manager.toggle()
    manager.reset()
    snap = manager.snapshot()
    assert snap.samples == ()
    assert snap.start_time is None
    assert snap.is_measuring is measuring


def test_reset_from_initial_state(manager):
    manager.reset()
    assert manager.snapshot().samples == ()
    assert manager.start_time is None


def test_unavailable_sensor_start_is_noop(clock):
    service = FakeMotionService(available=False)
    manager = MotionManager(service, clock=clock)
    assert manager.start() is False
    assert service.start_calls == 0
    assert manager.start_time is None


def test_start_twice_does_not_resubscribe(manager, service):
    manager.start()
    manager.start()
    assert service.start_calls == 1


def test_service_error_stops_measuring(manager, service):
    manager.toggle()
    service.on_error(SensorUnavailableError("gone"))
    assert not manager.is_measuring
    assert service.stop_calls == 1


def test_snapshot_is_immutable_copy(manager, service):
    manager.toggle()
    service.deliver(z=1.0)
    snap = manager.snapshot()
    service.deliver(z=2.0)
    assert len(snap) == 1
    assert isinstance(snap.samples, tuple)


def test_listeners_receive_snapshots(manager, service):
    seen = []
    manager.add_listener(seen.append)
    manager.toggle()
    service.deliver(z=1.0)
    manager.remove_listener(seen.append)
    service.deliver(z=2.0)
    assert seen[-1].is_measuring
    assert len(seen[-1]) == 1


def test_generate_csv_uses_session_start(manager, service, clock):
    manager.toggle()
    clock.advance(1.5)
    service.deliver(z=0.0)
    assert manager.generate_csv() == "Time,Acceleration\n00:00:01.500,0.0\n"


def test_default_clock_is_timezone_aware(service):
    manager = MotionManager(service)
    manager.toggle()
    assert manager.start_time.tzinfo is not None
    assert manager.start_time.utcoffset() == timedelta(0)
    service.deliver(z=1.0)
    assert manager.snapshot().samples[0].timestamp >= manager.start_time


def test_listener_sees_service_failure_stop(manager, service):
    seen = []
    manager.toggle()
    service.deliver(z=1.0)
    manager.add_listener(seen.append)
    service.on_error(SensorUnavailableError("disconnected"))
    assert [snap.is_measuring for snap in seen] == [False]
    assert len(seen[0]) == 1


def test_listener_sees_toggle_without_sensor(clock):
    manager = MotionManager(FakeMotionService(available=False), clock=clock)
    seen = []
    manager.add_listener(seen.append)
    manager.toggle()
    assert seen[-1].is_measuring
    assert seen[-1].start_time is None
