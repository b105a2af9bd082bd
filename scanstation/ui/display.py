# scanstation/ui/display.py
"""OpenCV preview window with the scan status drawn over the live frame."""
import logging
import threading

import cv2

from scanstation.config.settings import DisplayConfig
from scanstation.core.scan_coordinator import OutcomeKind
from scanstation.core.status_board import IDLE_MESSAGE

KIND_COLORS = {
    OutcomeKind.SUCCESS: "success",
    OutcomeKind.ALREADY_SCANNED_TODAY: "info",
    OutcomeKind.BAD_FORMAT: "error",
    OutcomeKind.UNKNOWN_CODE: "error",
    OutcomeKind.STORAGE_FAILURE: "error",
}

class FrameDisplay:
    """
    Display sink for the frame producer and status listener for the board.

    ``show`` only stores the latest frame so the producer never waits on the
    GUI. ``render`` must be called from the main thread.
    """

    def __init__(self, title=DisplayConfig.WINDOW_TITLE):
        self.logger = logging.getLogger(__name__)
        self.title = title
        self._lock = threading.Lock()
        self._frame = None
        self._status = IDLE_MESSAGE
        self._count = ""
        self._color = DisplayConfig.COLORS["idle"]

    def show(self, frame):
        with self._lock:
            self._frame = frame

    def publish(self, outcome):
        with self._lock:
            self._status = outcome.message
            self._count = outcome.count_message
            self._color = DisplayConfig.COLORS[KIND_COLORS[outcome.kind]]

    def reset_to_idle(self):
        with self._lock:
            self._status = IDLE_MESSAGE
            self._count = ""
            self._color = DisplayConfig.COLORS["idle"]

    def render(self, wait_ms=1):
        """Draw the latest frame. Returns False once the user pressed q."""
        with self._lock:
            frame = self._frame
            status, count, color = self._status, self._count, self._color

        if frame is not None:
            frame = frame.copy()
            cv2.putText(frame, status, DisplayConfig.TEXT_ORIGIN,
                        cv2.FONT_HERSHEY_SIMPLEX, DisplayConfig.FONT_SCALE, color, 2)
            if count:
                cv2.putText(frame, count, DisplayConfig.COUNT_ORIGIN,
                            cv2.FONT_HERSHEY_SIMPLEX, DisplayConfig.FONT_SCALE, color, 2)
            cv2.imshow(self.title, frame)

        return (cv2.waitKey(wait_ms) & 0xFF) != ord('q')

    def close(self):
        cv2.destroyAllWindows()
