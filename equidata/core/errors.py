class MotionError(Exception):
    """Base class for recorder errors."""


class SensorUnavailableError(MotionError):
    """Motion hardware is absent, disabled or stopped delivering readings."""


class ExportError(MotionError):
    """Writing the exported CSV failed."""
