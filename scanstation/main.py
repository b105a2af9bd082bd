"""Main entry point for the attendance scan station."""
import argparse
import logging
import signal
import sys
import time

from scanstation.config.settings import CameraConfig, HardwareConfig, PathConfig, ProcessingConfig
from scanstation.core.scan_coordinator import ScanCoordinator, ScanSource
from scanstation.core.status_board import LoggingStatusListener, StatusBoard
from scanstation.input.keyed_input import KeyedInputProducer
from scanstation.storage.attendance_ledger import AttendanceLedger
from scanstation.storage.database import Database, StorageError
from scanstation.storage.subject_registry import EnrollmentError, SubjectRegistry
from scanstation.utils.logging_config import setup_logging

class ScanStation:
    def __init__(self, db_path=None, use_camera=True, use_keyboard=True,
                 use_hardware=HardwareConfig.ENABLED,
                 camera_index=CameraConfig.CAMERA_INDEX,
                 camera_backend=CameraConfig.BACKEND):
        """Initialize the scan station and wire its components."""
        self.logger = logging.getLogger(__name__)
        self.database = Database(db_path)
        self.registry = SubjectRegistry(self.database)
        self.ledger = AttendanceLedger(self.database)
        self.status_board = StatusBoard(listeners=[LoggingStatusListener()])
        self.coordinator = ScanCoordinator(self.registry, self.ledger, self.status_board)

        self.hardware_controller = None
        if use_hardware:
            from scanstation.hardware.hardware_controller import HardwareController
            self.hardware_controller = HardwareController()
            self.status_board.add_listener(self.hardware_controller)

        self.camera = None
        self.display = None
        self.frame_producer = None
        if use_camera:
            try:
                self._setup_camera_pipeline(camera_index, camera_backend)
            except Exception as e:
                self.logger.error(f"Camera pipeline unavailable, using keyboard input only: {e}")
                self.camera = None
                self.display = None
                self.frame_producer = None

        self.keyed_input = KeyedInputProducer(self.coordinator) if use_keyboard else None
        self.running = False

    def _setup_camera_pipeline(self, camera_index, camera_backend):
        from scanstation.core.camera_manager import CameraManager, PiCameraManager
        from scanstation.core.frame_producer import FrameProducer
        from scanstation.core.qr_decoder import QRDecoder
        from scanstation.ui.display import FrameDisplay

        if camera_backend == "picamera2":
            self.camera = PiCameraManager()
        else:
            self.camera = CameraManager(index=camera_index)
        self.display = FrameDisplay()
        self.frame_producer = FrameProducer(
            self.camera, QRDecoder(), self.coordinator, display=self.display
        )
        self.status_board.add_listener(self.display)

    def _handle_shutdown(self, signum, frame):
        """Handle shutdown signals."""
        self.logger.info("Shutdown signal received")
        self.running = False

    def start(self):
        """Start the producers."""
        self.running = True
        signal.signal(signal.SIGINT, self._handle_shutdown)
        signal.signal(signal.SIGTERM, self._handle_shutdown)

        if self.camera is not None:
            try:
                self.camera.start()
                self.frame_producer.start()
            except Exception as e:
                self.logger.error(f"Camera unavailable, continuing without it: {e}")
                self.camera = None
                self.frame_producer = None

        if self.keyed_input is not None:
            self.keyed_input.start()

        if self.hardware_controller is not None:
            self.hardware_controller.reset_to_idle()

        self.logger.info(f"Scan station started - recording to {self.database.db_path}")

    def run_forever(self):
        """Keep the main thread alive, pumping the preview window if there is one."""
        while self.running:
            if self.frame_producer is not None:
                if not self.display.render():
                    break
                time.sleep(ProcessingConfig.FRAME_INTERVAL)
            elif self.keyed_input is not None and self.keyed_input.running:
                time.sleep(0.2)
            else:
                break

    def stop(self):
        """Stop the scan station."""
        self.logger.info("Stopping scan station...")
        self.running = False

        if self.frame_producer is not None:
            self.frame_producer.stop()
        if self.camera is not None:
            self.camera.stop()
        if self.display is not None:
            self.display.close()
        if self.keyed_input is not None:
            self.keyed_input.stop()

        self.status_board.stop()
        if self.hardware_controller is not None:
            self.hardware_controller.cleanup()
        self.database.close()
        self.logger.info("Scan station stopped")


def cmd_run(args):
    station = ScanStation(
        db_path=args.db,
        use_camera=not args.no_camera,
        use_keyboard=not args.no_keyboard,
        use_hardware=args.hardware or HardwareConfig.ENABLED,
        camera_index=args.camera_index,
        camera_backend=args.camera_backend,
    )
    try:
        station.start()
        print("Scanner running. Scan a code, or press q in the preview window to quit.")
        station.run_forever()
    finally:
        station.stop()
    return 0


def cmd_enroll(args):
    db = Database(args.db)
    try:
        subject = SubjectRegistry(db).enroll(args.name, args.major, args.code)
    except EnrollmentError as e:
        print(f"Enrollment rejected: {e}")
        return 1
    finally:
        db.close()
    print(f"Subject added: {subject.name} ({subject.subject_code})")
    return 0


def cmd_scan(args):
    db = Database(args.db)
    try:
        coordinator = ScanCoordinator(SubjectRegistry(db), AttendanceLedger(db))
        outcome = coordinator.submit(args.text, ScanSource.KEYED_INPUT)
    finally:
        db.close()
    if outcome is None:
        print("Nothing to scan")
        return 1
    print(outcome.message)
    if outcome.count_message:
        print(outcome.count_message)
    return 0


def cmd_records(args):
    db = Database(args.db)
    try:
        print(AttendanceLedger(db).format_records(), end="")
    finally:
        db.close()
    return 0


def cmd_students(args):
    db = Database(args.db)
    try:
        for s in SubjectRegistry(db).list_subjects():
            print(f"{s.subject_code:<8} {s.name:<25} {s.major}")
    finally:
        db.close()
    return 0


def cmd_export(args):
    db = Database(args.db)
    try:
        count = AttendanceLedger(db).export_csv(args.path)
    finally:
        db.close()
    print(f"Exported {count} records to {args.path}")
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="scanstation", description="QR / barcode attendance recorder")
    p.add_argument("--db", default=PathConfig.DB_PATH, help="SQLite database path")
    p.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...)")
    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Start camera and keyboard scanning")
    run.add_argument("--camera-index", type=int, default=CameraConfig.CAMERA_INDEX)
    run.add_argument("--camera-backend", default=CameraConfig.BACKEND, choices=["opencv", "picamera2"])
    run.add_argument("--no-camera", action="store_true", help="Keyboard-wedge input only")
    run.add_argument("--no-keyboard", action="store_true", help="Camera input only")
    run.add_argument("--hardware", action="store_true", help="Drive the GPIO status LED and buzzer")
    run.set_defaults(func=cmd_run)

    enroll = sub.add_parser("enroll", help="Add a subject to the registry")
    enroll.add_argument("name")
    enroll.add_argument("major")
    enroll.add_argument("code", help="6 character code, e.g. ABC123")
    enroll.set_defaults(func=cmd_enroll)

    scan = sub.add_parser("scan", help="Submit one raw scan text")
    scan.add_argument("text")
    scan.set_defaults(func=cmd_scan)

    sub.add_parser("records", help="Print all attendance records").set_defaults(func=cmd_records)
    sub.add_parser("students", help="List enrolled subjects").set_defaults(func=cmd_students)

    export = sub.add_parser("export", help="Export attendance records to CSV")
    export.add_argument("path", nargs="?", default=PathConfig.EXPORT_PATH)
    export.set_defaults(func=cmd_export)
    return p


def main(argv=None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, str(args.log_level).upper(), logging.INFO))
    try:
        return args.func(args)
    except StorageError as e:
        logging.error(f"Storage error: {e}")
        print(f"Storage error: {e}")
        return 1
    except Exception as e:
        logging.error(f"Critical error: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
