"""
Rolling z-axis acceleration recorder.

MotionManager owns the sample series and session state. It is not
thread-safe: every method, and every reading the motion service delivers,
must run on the same asyncio event loop. Readers take a ``snapshot()``.
"""
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, List, Optional

from .exporter import generate_csv
from .models import MotionReading, Sample, SeriesSnapshot
from .motion_service import MotionService
from .settings import RETENTION_WINDOW, SAMPLE_INTERVAL_S, STANDARD_GRAVITY

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


Listener = Callable[[SeriesSnapshot], None]


class MotionManager:
    """Samples z acceleration at 10 Hz and keeps the last 20 seconds."""

    def __init__(self, service: MotionService, clock: Callable[[], datetime] = utc_now):
        self.service = service
        self.clock = clock
        self._series: Deque[Sample] = deque()
        self._is_measuring = False
        self._start_time: Optional[datetime] = None
        self._subscribed = False
        self._listeners: List[Listener] = []

    # ========== Session state ==========
    @property
    def is_measuring(self) -> bool:
        return self._is_measuring

    @property
    def start_time(self) -> Optional[datetime]:
        return self._start_time

    def snapshot(self) -> SeriesSnapshot:
        return SeriesSnapshot(
            samples=tuple(self._series),
            is_measuring=self._is_measuring,
            start_time=self._start_time,
        )

    def add_listener(self, listener: Listener):
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ========== Control ==========
    def start(self) -> bool:
        """Subscribe to motion updates. Returns False if no sensor is available."""
        if not self.service.is_available():
            logger.warning("Motion sensor unavailable; not starting.")
            self._notify()
            return False
        if self._start_time is None:
            self._start_time = self.clock()
        if not self._subscribed:
            self.service.start_updates(SAMPLE_INTERVAL_S, self._on_reading, self._on_service_error)
            self._subscribed = True
            logger.info("Motion updates started (interval %.1fs)", SAMPLE_INTERVAL_S)
        self._notify()
        return True

    def stop(self):
        """Unsubscribe. Keeps the series and the start time."""
        if self._subscribed:
            self.service.stop_updates()
            self._subscribed = False
            logger.info("Motion updates stopped (%d samples)", len(self._series))
        self._is_measuring = False
        self._notify()

    def toggle(self):
        self._is_measuring = not self._is_measuring
        if self._is_measuring:
            self.start()
        else:
            self.stop()

    def reset(self):
        """Drop all samples and the elapsed-time baseline."""
        self._series.clear()
        self._start_time = None
        logger.info("Measurements reset")
        self._notify()

    def shutdown(self):
        self.stop()
        self._listeners.clear()

    def generate_csv(self) -> str:
        snap = self.snapshot()
        return generate_csv(snap.samples, snap.start_time)

    # ========== Data path ==========
    def _on_reading(self, reading: MotionReading):
        # Discards a reading already in flight when stop() ran
        if not self._is_measuring:
            return
        self.add_data_point(reading.z)

    def add_data_point(self, z_acceleration: float):
        now = self.clock()
        self._series.append(Sample(timestamp=now, value=z_acceleration / STANDARD_GRAVITY))
        cutoff = now - RETENTION_WINDOW
        while self._series and self._series[0].timestamp < cutoff:
            self._series.popleft()
        self._notify()

    def _on_service_error(self, error: Exception):
        logger.error("Motion service failed: %s", error)
        self.stop()

    def _notify(self):
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
