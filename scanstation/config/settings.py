# scanstation/config/settings.py
"""Configuration settings for the attendance scan station."""
import os
from dataclasses import dataclass

@dataclass
class CameraConfig:
    CAMERA_INDEX = int(os.getenv("SCANSTATION_CAMERA_INDEX", "0"))
    BACKEND = os.getenv("SCANSTATION_CAMERA_BACKEND", "opencv")  # opencv | picamera2
    MAIN_RESOLUTION = (640, 480)

@dataclass
class ProcessingConfig:
    FRAME_INTERVAL = 0.033       # ~30 Hz frame cadence
    DEBOUNCE_WINDOW = 3.0        # same code within this window is one physical scan
    STATUS_RESET_DELAY = 3.0     # seconds before the status line returns to idle
    CODE_LENGTH = 6              # enrollment only, never enforced on the scan path
    DECODE_WORKERS = 1

@dataclass
class PathConfig:
    BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    DB_PATH = os.getenv("SCANSTATION_DB_PATH", "attendance.db")
    LOG_DIR = os.getenv("SCANSTATION_LOG_DIR", os.path.join(BASE_DIR, 'logs'))
    EXPORT_PATH = "attendance_export.csv"

@dataclass
class HardwareConfig:
    ENABLED = os.getenv("SCANSTATION_HARDWARE", "0") == "1"
    RED_PIN = 17
    GREEN_PIN = 27
    BLUE_PIN = 22
    BUZZER_PIN = 18
    BEEP_DURATION = 0.05

@dataclass
class DisplayConfig:
    WINDOW_TITLE = "QR Attendance Recorder - press q to quit"
    FONT_SCALE = 0.8
    TEXT_ORIGIN = (20, 40)
    COUNT_ORIGIN = (20, 75)
    # BGR colours per status, as OpenCV expects
    COLORS = {
        "idle": (200, 200, 200),
        "success": (0, 200, 0),
        "info": (0, 165, 255),
        "error": (0, 0, 255),
    }
