"""
Motion sources feeding the recorder.

A source reports whether it can deliver readings, then pushes the latest
3-axis reading to a handler at a fixed interval until stopped. Handlers are
always invoked on the asyncio event loop that called ``start_updates``.
"""
import asyncio
import logging
import math
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from .errors import SensorUnavailableError
from .models import MotionReading
from .settings import STANDARD_GRAVITY

logger = logging.getLogger(__name__)

ReadingHandler = Callable[[MotionReading], None]
ErrorHandler = Callable[[Exception], None]


class MotionService(ABC):
    """Platform motion-sensing service."""

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def start_updates(self, interval: float, handler: ReadingHandler,
                      on_error: Optional[ErrorHandler] = None) -> None:
        ...

    @abstractmethod
    def stop_updates(self) -> None:
        ...


class PollingMotionService(MotionService):
    """Delivers the most recent reading every ``interval`` seconds from an asyncio task.

    Subclasses implement ``_read`` and may override ``_open``/``_close`` for
    connection setup and teardown.
    """

    def __init__(self):
        self._task: Optional[asyncio.Task] = None
        self._handler: Optional[ReadingHandler] = None
        self._on_error: Optional[ErrorHandler] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start_updates(self, interval, handler, on_error=None):
        if self.is_running:
            self.stop_updates()
        self._handler = handler
        self._on_error = on_error
        self._task = asyncio.ensure_future(self._run(interval))

    def stop_updates(self):
        if self._task is not None:
            self._task.cancel()
        self._task = None
        self._handler = None

    async def _run(self, interval: float):
        try:
            await self._open()
            while True:
                await asyncio.sleep(interval)
                reading = self._read()
                if reading is not None and self._handler is not None:
                    self._deliver(reading)
        except asyncio.CancelledError:
            raise
        except SensorUnavailableError as e:
            self._task = None
            self._report(e)
        except Exception as e:
            self._task = None
            self._report(SensorUnavailableError(str(e)))
        finally:
            await self._close()

    def _deliver(self, reading: MotionReading):
        # Consumer errors are logged; the sensor link stays up
        try:
            self._handler(reading)
        except Exception:
            logger.exception("Reading handler failed")

    def _report(self, error: Exception):
        logger.error("Motion updates stopped: %s", error)
        if self._on_error is not None:
            self._on_error(error)

    async def _open(self):
        pass

    async def _close(self):
        pass

    @abstractmethod
    def _read(self) -> Optional[MotionReading]:
        ...


class SimulatedMotionService(PollingMotionService):
    """Synthetic user acceleration: a slow bounce on z plus sensor noise."""

    def __init__(self, frequency_hz: float = 0.5, amplitude_g: float = 0.3,
                 noise_g: float = 0.02, seed: Optional[int] = None):
        super().__init__()
        self.frequency_hz = frequency_hz
        self.amplitude_g = amplitude_g
        self.noise_g = noise_g
        self._rng = np.random.default_rng(seed)
        self._t = 0.0
        self._step = 0.0

    def is_available(self) -> bool:
        return True

    def start_updates(self, interval, handler, on_error=None):
        self._step = interval
        super().start_updates(interval, handler, on_error)

    def _read(self) -> MotionReading:
        self._t += self._step
        noise = self._rng.normal(0.0, self.noise_g, size=3)
        z_g = self.amplitude_g * math.sin(2 * math.pi * self.frequency_hz * self._t) + noise[2]
        return MotionReading(
            x=float(noise[0]) * STANDARD_GRAVITY,
            y=float(noise[1]) * STANDARD_GRAVITY,
            z=float(z_g) * STANDARD_GRAVITY,
        )
