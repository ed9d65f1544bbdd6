"""
Fixed pipeline constants and runtime source configuration.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

# Sampling
SAMPLE_INTERVAL_S = 0.1                      # 10 Hz
RETENTION_WINDOW = timedelta(seconds=20)     # rolling chart / export window
STANDARD_GRAVITY = 9.81                      # m/s^2 -> g

# Export
CSV_COLUMNS = ("Time", "Acceleration")
EXPORT_FILENAME = "accelerationData"

# ESP32-C6 IMU BLE service
IMU_SERVICE_UUID = "00001815-0000-1000-8000-00805f9b34fb"
IMU_CHAR_UUID = "00002a58-0000-1000-8000-00805f9b34fb"
BLE_CONNECT_TIMEOUT_S = 10.0

SOURCE_SIMULATED = "simulated"
SOURCE_BLE = "ble"


@dataclass
class SourceConfig:
    """Which motion source feeds the recorder."""
    kind: str = SOURCE_SIMULATED
    address: Optional[str] = None
    char_uuid: str = IMU_CHAR_UUID
