import numpy as np
import pyqtgraph as pg
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from equidata.core.models import SeriesSnapshot


class PlotWidget(QWidget):
    """Rolling chart of the resident series, x in seconds since the oldest sample."""

    def __init__(self, title="Z acceleration", color='b'):
        super().__init__()
        layout = QVBoxLayout(self)
        self.plot = pg.PlotWidget(title=title)
        self.plot.setLabel("left", "Acceleration", units="g")
        self.plot.setLabel("bottom", "Time", units="s")
        self.plot.showGrid(x=True, y=True, alpha=0.3)
        layout.addWidget(self.plot)
        self.curve = self.plot.plot(pen=pg.mkPen(color, width=2))

    def refresh(self, snapshot: SeriesSnapshot):
        # A polyline needs two points
        if len(snapshot) < 2:
            self.curve.clear()
            return
        t0 = snapshot.samples[0].timestamp
        x = np.fromiter(((s.timestamp - t0).total_seconds() for s in snapshot.samples), float)
        y = np.fromiter((s.value for s in snapshot.samples), float)
        self.curve.setData(x, y)
        lo, hi = snapshot.value_range()
        if hi > lo:
            self.plot.setYRange(lo, hi, padding=0.05)

    def reset(self):
        self.curve.clear()
