from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class MotionReading:
    """3-axis linear (user) acceleration in m/s^2, as delivered by a motion service."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Sample:
    """One timestamped z-axis acceleration measurement in g."""
    timestamp: datetime
    value: float


@dataclass(frozen=True)
class SeriesSnapshot:
    """Read-only copy of the resident series and session flags."""
    samples: Tuple[Sample, ...] = ()
    is_measuring: bool = False
    start_time: Optional[datetime] = None

    def __len__(self):
        return len(self.samples)

    @property
    def latest(self) -> Optional[float]:
        return self.samples[-1].value if self.samples else None

    def value_range(self) -> Optional[Tuple[float, float]]:
        """(min, max) of the resident values, used to scale the chart."""
        if not self.samples:
            return None
        values = [s.value for s in self.samples]
        return min(values), max(values)
