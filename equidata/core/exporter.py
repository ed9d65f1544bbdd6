import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional, Union

import pandas as pd

from .errors import ExportError
from .models import Sample
from .settings import CSV_COLUMNS, EXPORT_FILENAME

logger = logging.getLogger(__name__)

_MS = timedelta(milliseconds=1)


def format_elapsed(elapsed: timedelta) -> str:
    """Format a duration as HH:MM:SS.mmm; hours keep counting past 23."""
    total_ms = max(elapsed, timedelta(0)) // _MS
    hours = total_ms // 3_600_000
    minutes = total_ms // 60_000 % 60
    seconds = total_ms // 1000 % 60
    millis = total_ms % 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def generate_csv(samples: Iterable[Sample], start_time: Optional[datetime]) -> str:
    """
    Serialize samples as ``Time,Acceleration`` rows.

    Time is elapsed since ``start_time``; without one every row reads
    00:00:00.000. Values are written as raw floats in g.
    """
    rows = []
    for sample in samples:
        origin = start_time if start_time is not None else sample.timestamp
        rows.append({
            CSV_COLUMNS[0]: format_elapsed(sample.timestamp - origin),
            # + 0.0 turns -0.0 into 0.0
            CSV_COLUMNS[1]: float(sample.value) + 0.0,
        })
    df = pd.DataFrame(rows, columns=list(CSV_COLUMNS))
    return df.to_csv(index=False, lineterminator="\n")


class DataExporter:
    """Write exported CSV text to disk."""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        self.directory = Path(directory) if directory is not None else Path.cwd()

    def default_path(self) -> Path:
        return self.directory / f"{EXPORT_FILENAME}.csv"

    def export_csv(self, text: str, filename: Optional[Union[str, Path]] = None) -> Path:
        """Save ``text`` as UTF-8. Raises ExportError if the file cannot be written."""
        path = Path(filename) if filename else self.default_path()
        try:
            path.write_text(text, encoding="utf-8", newline="")
        except OSError as e:
            logger.error("Failed to save %s: %s", path, e)
            raise ExportError(f"Could not save {path}: {e}") from e
        rows = max(text.count("\n") - 1, 0)
        logger.info("Saved %d samples to %s", rows, path)
        return path
