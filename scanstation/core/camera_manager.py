# scanstation/core/camera_manager.py
import logging

import cv2

from scanstation.config.settings import CameraConfig

class CameraManager:
    """OpenCV webcam exposed as ``next_frame()`` / ``is_open()``."""

    def __init__(self, index=CameraConfig.CAMERA_INDEX, resolution=CameraConfig.MAIN_RESOLUTION):
        """Initialize the camera system."""
        self.logger = logging.getLogger(__name__)
        self.index = index
        self.resolution = resolution
        self.capture = None

    def start(self):
        """Open the camera device."""
        self.capture = cv2.VideoCapture(self.index)
        if not self.capture.isOpened():
            self.logger.error(f"Could not open camera {self.index}")
            self.capture.release()
            self.capture = None
            raise RuntimeError(f"Camera {self.index} is not available")
        width, height = self.resolution
        self.capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self.capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        self.logger.info(f"Camera {self.index} opened")

    def is_open(self):
        return self.capture is not None and self.capture.isOpened()

    def next_frame(self):
        """Read one frame. Returns (frame, ok)."""
        if not self.is_open():
            return None, False
        ok, frame = self.capture.read()
        return frame, bool(ok)

    def stop(self):
        """Release the camera."""
        if self.capture is not None:
            self.capture.release()
            self.capture = None
            self.logger.info("Camera released")


class PiCameraManager:
    """Raspberry Pi camera module via picamera2 (install the ``pi`` extra)."""

    def __init__(self, resolution=CameraConfig.MAIN_RESOLUTION):
        self.logger = logging.getLogger(__name__)
        from picamera2 import Picamera2

        self.picam2 = Picamera2()
        self.config = self.picam2.create_video_configuration(
            main={"size": resolution, "format": "RGB888"},
            buffer_count=4,
        )
        self.picam2.configure(self.config)
        self._started = False

    def start(self):
        """Start the camera."""
        self.picam2.start()
        self._started = True
        self.logger.info("Pi camera started")

    def is_open(self):
        return self._started

    def next_frame(self):
        """Capture a frame from the main stream. Returns (frame, ok)."""
        if not self._started:
            return None, False
        try:
            return self.picam2.capture_array("main"), True
        except Exception as e:
            self.logger.error(f"Failed to capture frame: {e}")
            return None, False

    def stop(self):
        """Stop the camera."""
        if self._started:
            self.picam2.stop()
            self._started = False
