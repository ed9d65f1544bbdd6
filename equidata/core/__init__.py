from .errors import ExportError, MotionError, SensorUnavailableError
from .exporter import DataExporter, format_elapsed, generate_csv
from .models import MotionReading, Sample, SeriesSnapshot
from .motion_manager import MotionManager
from .motion_service import MotionService, PollingMotionService, SimulatedMotionService

__all__ = [
    "DataExporter",
    "ExportError",
    "MotionError",
    "MotionManager",
    "MotionReading",
    "MotionService",
    "PollingMotionService",
    "Sample",
    "SensorUnavailableError",
    "SeriesSnapshot",
    "SimulatedMotionService",
    "format_elapsed",
    "generate_csv",
]
