"""
Equidata - z-axis acceleration recorder.

Usage:
    equidata                                   # simulated sensor
    equidata --source ble --address AA:BB:...  # ESP32-C6 IMU over BLE
"""
import argparse
import asyncio
import logging
import sys

from PyQt6.QtWidgets import QApplication
from qasync import QEventLoop

from equidata.core.ble_motion import BLEMotionService
from equidata.core.motion_manager import MotionManager
from equidata.core.motion_service import MotionService, SimulatedMotionService
from equidata.core.settings import SOURCE_BLE, SOURCE_SIMULATED, SourceConfig
from equidata.ui.main_window import MotionDashboard


def parse_args(argv=None) -> argparse.Namespace:
    default = SourceConfig()
    parser = argparse.ArgumentParser(description="Record and export z-axis acceleration")
    parser.add_argument(
        '--source',
        choices=[SOURCE_SIMULATED, SOURCE_BLE],
        default=default.kind,
        help=f'Motion source (default: {default.kind})'
    )
    parser.add_argument(
        '--address',
        default=default.address,
        help='BLE device address (required for --source ble)'
    )
    parser.add_argument(
        '--char-uuid',
        default=default.char_uuid,
        help=f'BLE notify characteristic (default: {default.char_uuid})'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO)'
    )
    return parser.parse_args(argv)


def build_service(config: SourceConfig) -> MotionService:
    if config.kind == SOURCE_BLE:
        return BLEMotionService(config.address, config.char_uuid)
    return SimulatedMotionService()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='[%(levelname)s] %(name)s: %(message)s',
        stream=sys.stdout
    )
    config = SourceConfig(kind=args.source, address=args.address, char_uuid=args.char_uuid)

    app = QApplication(sys.argv[:1])
    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)

    manager = MotionManager(build_service(config))
    window = MotionDashboard(manager)
    window.show()

    with loop:
        loop.run_forever()


if __name__ == "__main__":
    main()
