import logging
from typing import Optional

from bleak import BleakClient, BleakError

from .errors import SensorUnavailableError
from .frame_parser import FrameParser
from .models import MotionReading
from .motion_service import PollingMotionService
from .settings import BLE_CONNECT_TIMEOUT_S, IMU_CHAR_UUID

logger = logging.getLogger(__name__)


class GravityFilter:
    """Separates gravity from raw acceleration with a one-pole low-pass estimate."""

    def __init__(self, alpha: float = 0.9):
        self.alpha = alpha
        self.gravity: Optional[MotionReading] = None

    def apply(self, raw: MotionReading) -> MotionReading:
        g = self.gravity
        if g is None:
            g = raw
        else:
            a = self.alpha
            g = MotionReading(
                x=a * g.x + (1 - a) * raw.x,
                y=a * g.y + (1 - a) * raw.y,
                z=a * g.z + (1 - a) * raw.z,
            )
        self.gravity = g
        return MotionReading(x=raw.x - g.x, y=raw.y - g.y, z=raw.z - g.z)

    def reset(self):
        self.gravity = None


class BLEMotionService(PollingMotionService):
    """Motion readings from an ESP32-C6 IMU over BLE notifications."""

    def __init__(self, address: Optional[str], char_uuid: str = IMU_CHAR_UUID):
        super().__init__()
        self.address = address
        self.char_uuid = char_uuid
        self.parser = FrameParser()
        self.gravity = GravityFilter()
        self.client: Optional[BleakClient] = None
        self._latest: Optional[MotionReading] = None

    def is_available(self) -> bool:
        return bool(self.address)

    async def _open(self):
        if not self.address:
            raise SensorUnavailableError("No BLE device address configured.")
        self._latest = None
        self.gravity.reset()
        self.parser.reset_stats()
        self.client = BleakClient(self.address, disconnected_callback=self._on_disconnect)
        try:
            await self.client.connect(timeout=BLE_CONNECT_TIMEOUT_S)
            await self.client.start_notify(self.char_uuid, self._on_notify)
        except (BleakError, OSError, TimeoutError) as e:
            raise SensorUnavailableError(f"BLE connect to {self.address} failed: {e}") from e
        logger.info("Connected to %s, notify %s", self.address, self.char_uuid)

    async def _close(self):
        client, self.client = self.client, None
        if client is None:
            return
        try:
            if client.is_connected:
                await client.stop_notify(self.char_uuid)
                await client.disconnect()
        except BleakError as e:
            logger.warning("BLE teardown failed: %s", e)
        logger.info("Disconnected from %s", self.address)

    def _on_notify(self, _sender, data: bytearray):
        self.handle_frame(bytes(data))

    def _on_disconnect(self, _client):
        # self.client is cleared before an intentional disconnect
        if self.client is not None and self.is_running:
            logger.warning("Device %s disconnected", self.address)
            self._task.cancel()
            self._report(SensorUnavailableError(f"Device {self.address} disconnected."))

    def handle_frame(self, data: bytes):
        raw = self.parser.parse(data)
        if raw is not None:
            self._latest = self.gravity.apply(raw)

    def _read(self) -> Optional[MotionReading]:
        return self._latest
