"""
ESP32-C6 IMU BLE frame decoder.

Frame layout (little-endian):
    header  uint16 frame_len, uint8 version, uint8 flags, uint16 sensor_mask,
            uint32 timestamp_us, uint32 sequence            (14 bytes)
    payload TLV blocks: uint8 type, uint8 len, <len bytes>

Only the accelerometer blocks are decoded; readings are returned in m/s^2.
"""
import logging
import struct
from dataclasses import dataclass
from typing import Dict, Optional

from .models import MotionReading
from .settings import STANDARD_GRAVITY

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<HBBHII")
AXES = struct.Struct("<hhh")
FRAME_VERSION = 1

# TLV type codes
TLV_IIS3DWB_ACCEL = 0x01
TLV_ICM_ACCEL = 0x10
TLV_SCL_ACCEL = 0x31

# Preferred accelerometer first when a frame carries several
ACCEL_TLVS = (TLV_ICM_ACCEL, TLV_IIS3DWB_ACCEL, TLV_SCL_ACCEL)

SCALE_ACCEL = 16384.0      # int16 -> g


@dataclass
class FrameHeader:
    frame_len: int
    version: int
    flags: int
    sensor_mask: int
    timestamp_us: int
    sequence: int


class FrameParser:
    """Parse IMU frames and keep link statistics."""

    def __init__(self):
        self.last_sequence = -1
        self.frame_count = 0
        self.error_count = 0
        self.lost_count = 0

    def parse(self, data: bytes) -> Optional[MotionReading]:
        """
        Decode one BLE notification.
        Returns the acceleration reading, or None if the frame is invalid or
        carries no accelerometer block.
        """
        if len(data) < HEADER.size:
            self.error_count += 1
            logger.warning("Frame too short: %d bytes", len(data))
            return None

        header = FrameHeader(*HEADER.unpack_from(data))
        if header.version != FRAME_VERSION:
            self.error_count += 1
            logger.warning("Unknown frame version: %d", header.version)
            return None
        if header.frame_len != len(data):
            # Still parseable; the TLV walk is bounds-checked
            logger.debug("Length mismatch: header=%d, actual=%d", header.frame_len, len(data))

        if self.last_sequence >= 0:
            expected = (self.last_sequence + 1) & 0xFFFFFFFF
            if header.sequence != expected:
                lost = (header.sequence - expected) & 0xFFFFFFFF
                self.lost_count += lost
                logger.warning("Lost %d frame(s). Expected seq=%d, got=%d",
                               lost, expected, header.sequence)
        self.last_sequence = header.sequence
        self.frame_count += 1

        blocks = self._accel_blocks(data[HEADER.size:])
        for tlv_type in ACCEL_TLVS:
            if tlv_type in blocks:
                x, y, z = AXES.unpack(blocks[tlv_type])
                return MotionReading(
                    x=x / SCALE_ACCEL * STANDARD_GRAVITY,
                    y=y / SCALE_ACCEL * STANDARD_GRAVITY,
                    z=z / SCALE_ACCEL * STANDARD_GRAVITY,
                )
        return None

    def _accel_blocks(self, payload: bytes) -> Dict[int, bytes]:
        blocks = {}
        offset = 0
        while offset + 2 <= len(payload):
            tlv_type = payload[offset]
            tlv_len = payload[offset + 1]
            offset += 2
            if offset + tlv_len > len(payload):
                self.error_count += 1
                logger.warning("TLV overflow: type=0x%02X, len=%d", tlv_type, tlv_len)
                break
            if tlv_type in ACCEL_TLVS and tlv_len == AXES.size:
                blocks[tlv_type] = payload[offset:offset + tlv_len]
            offset += tlv_len
        return blocks

    def get_stats(self) -> Dict[str, int]:
        return {
            "frame_count": self.frame_count,
            "error_count": self.error_count,
            "lost_count": self.lost_count,
            "last_sequence": self.last_sequence,
        }

    def reset_stats(self):
        self.last_sequence = -1
        self.frame_count = 0
        self.error_count = 0
        self.lost_count = 0
