import logging

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QFileDialog, QHBoxLayout, QLabel, QMainWindow, QMessageBox,
    QPushButton, QVBoxLayout, QWidget
)

from equidata.core.errors import ExportError
from equidata.core.exporter import DataExporter
from equidata.core.models import SeriesSnapshot
from equidata.core.motion_manager import MotionManager
from equidata.core.settings import EXPORT_FILENAME
from .plot_widget import PlotWidget

logger = logging.getLogger(__name__)

BUTTON_COLORS = {
    "start": "#2e9d49",
    "stop": "#d93a3a",
    "reset": "#f08c00",
    "save": "#1f6fd1",
}


class MotionDashboard(QMainWindow):
    def __init__(self, manager: MotionManager, exporter: DataExporter = None):
        super().__init__()
        self.manager = manager
        self.exporter = exporter or DataExporter()
        self.setWindowTitle("Equidata - Z Acceleration")
        self.resize(900, 480)

        # --- controls
        self.btn_toggle = QPushButton("Start")
        self.btn_reset = QPushButton("Reset")
        self.btn_save = QPushButton("Save")
        for btn in (self.btn_toggle, self.btn_reset, self.btn_save):
            btn.setFont(QFont("Segoe UI", 11, QFont.Weight.Bold))
            btn.setMinimumHeight(40)
        self._style_button(self.btn_reset, "reset")
        self._style_button(self.btn_save, "save")

        top_bar = QWidget()
        top_layout = QHBoxLayout(top_bar)
        top_layout.addWidget(self.btn_toggle)
        top_layout.addWidget(self.btn_reset)
        top_layout.addWidget(self.btn_save)

        self.lbl_status = QLabel("Status: Idle")
        self.lbl_status.setFont(QFont("Segoe UI", 9, QFont.Weight.Bold))
        self.lbl_stats = QLabel("0 samples")
        self.lbl_stats.setFont(QFont("Segoe UI", 9))
        status_bar = QWidget()
        status_layout = QHBoxLayout(status_bar)
        status_layout.addWidget(self.lbl_status)
        status_layout.addStretch(1)
        status_layout.addWidget(self.lbl_stats)

        self.plot = PlotWidget("Z acceleration (last 20 s)")
        self.plot.setVisible(False)

        root = QWidget()
        root_layout = QVBoxLayout(root)
        root_layout.addWidget(top_bar)
        root_layout.addWidget(status_bar)
        root_layout.addWidget(self.plot, 1)
        self.setCentralWidget(root)

        # --- signals
        self.btn_toggle.clicked.connect(self.do_toggle)
        self.btn_reset.clicked.connect(self.do_reset)
        self.btn_save.clicked.connect(self.do_save)

        # Session changes are pushed; the chart pulls a snapshot on a timer
        self._was_measuring = False
        self._user_action = False
        self.manager.add_listener(self.on_session_changed)
        self.on_session_changed(self.manager.snapshot())

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.refresh)
        self.timer.start(100)
        self.refresh()

    # ========== Actions ==========
    def do_toggle(self):
        self._user_action = True
        try:
            self.manager.toggle()
        finally:
            self._user_action = False
        if self.manager.is_measuring and not self.manager.service.is_available():
            self.error("Motion sensor unavailable.")
        elif self.manager.is_measuring:
            self.set_status("Measuring...", "streaming")
        else:
            self.set_status("Stopped", "normal")

    def do_reset(self):
        self.manager.reset()
        self.plot.reset()
        self.set_status("Measurements cleared", "normal")

    def do_save(self):
        self._user_action = True
        try:
            self.manager.stop()
        finally:
            self._user_action = False
        text = self.manager.generate_csv()
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save acceleration data",
            str(self.exporter.directory / EXPORT_FILENAME),
            "Text files (*.txt *.csv);;All files (*)",
        )
        if not filename:
            logger.info("Save cancelled")
            self.set_status("Save cancelled", "normal")
            return
        try:
            path = self.exporter.export_csv(text, filename)
        except ExportError as e:
            self.error(f"Failed to save: {e}")
            return
        self.set_status(f"Saved to {path}", "success")

    # ========== UI Management ==========
    def refresh(self):
        snap = self.manager.snapshot()
        self.plot.setVisible(len(snap) > 0)
        self.plot.refresh(snap)

    def on_session_changed(self, snap: SeriesSnapshot):
        latest = f", z={snap.latest:+.3f} g" if snap.latest is not None else ""
        self.lbl_stats.setText(f"{len(snap)} samples{latest}")
        if self._was_measuring and not snap.is_measuring and not self._user_action:
            self.set_status("Sensor stopped delivering readings", "error")
        self._was_measuring = snap.is_measuring
        if snap.is_measuring:
            self.btn_toggle.setText("Stop")
            self._style_button(self.btn_toggle, "stop")
        else:
            self.btn_toggle.setText("Start")
            self._style_button(self.btn_toggle, "start")

    def set_status(self, msg: str, status_type: str = "normal"):
        """Set status message with color coding

        Args:
            msg: Status message to display
            status_type: "normal", "success", "streaming" or "error"
        """
        self.lbl_status.setText(f"Status: {msg}")
        if status_type == "success":
            self.lbl_status.setStyleSheet("color: #2e9d49; font-weight: bold;")
        elif status_type == "streaming":
            self.lbl_status.setStyleSheet("color: #1f6fd1; font-weight: bold;")
        elif status_type == "error":
            self.lbl_status.setStyleSheet("color: #d93a3a; font-weight: bold;")
        else:
            self.lbl_status.setStyleSheet("")

    def error(self, msg: str):
        self.set_status(msg, "error")
        QMessageBox.critical(self, "Error", msg)

    def _style_button(self, btn: QPushButton, kind: str):
        btn.setStyleSheet(
            f"background-color: {BUTTON_COLORS[kind]}; color: white; border-radius: 10px;"
        )

    def closeEvent(self, event):
        self.timer.stop()
        self.manager.remove_listener(self.on_session_changed)
        self.manager.shutdown()
        super().closeEvent(event)
