# scanstation/hardware/hardware_controller.py
from gpiozero import RGBLED, DigitalOutputDevice
import threading
import logging
from enum import Enum
from scanstation.config.settings import HardwareConfig
from scanstation.core.scan_coordinator import OutcomeKind

class LEDStatus(Enum):
    """LED status indicators."""
    READY = "ready"              # Blue - waiting for a scan
    SUCCESS = "success"          # Green - attendance recorded
    WARNING = "warning"          # Yellow - already scanned today
    ERROR = "error"              # Red - bad format, unknown code, storage error
    OFF = "off"                  # All off

LED_COLORS = {
    LEDStatus.READY: (0, 0, 1),
    LEDStatus.SUCCESS: (0, 1, 0),
    LEDStatus.WARNING: (1, 1, 0),
    LEDStatus.ERROR: (1, 0, 0),
}

OUTCOME_STATUS = {
    OutcomeKind.SUCCESS: LEDStatus.SUCCESS,
    OutcomeKind.ALREADY_SCANNED_TODAY: LEDStatus.WARNING,
    OutcomeKind.BAD_FORMAT: LEDStatus.ERROR,
    OutcomeKind.UNKNOWN_CODE: LEDStatus.ERROR,
    OutcomeKind.STORAGE_FAILURE: LEDStatus.ERROR,
}

class HardwareController:
    """Status LED and buzzer, driven as a listener of the status board."""

    def __init__(self):
        """Initialize hardware controller."""
        self.logger = logging.getLogger(__name__)

        try:
            self.led = RGBLED(
                red=HardwareConfig.RED_PIN,
                green=HardwareConfig.GREEN_PIN,
                blue=HardwareConfig.BLUE_PIN
            )
            self.logger.info("RGB LED initialized successfully")
        except Exception as e:
            self.logger.error(f"Failed to initialize RGB LED: {e}")
            raise

        try:
            self.buzzer = DigitalOutputDevice(
                HardwareConfig.BUZZER_PIN,
                active_high=True,
                initial_value=False
            )
            self.logger.info("Active buzzer initialized successfully")
        except Exception as e:
            self.logger.error(f"Failed to initialize buzzer: {e}")
            self.led.close()
            raise

        self._current_status = LEDStatus.OFF
        self._led_lock = threading.Lock()
        self._buzzer_lock = threading.Lock()
        self._buzzer_timer = None

    def set_status(self, status: LEDStatus):
        """Set LED status indicator with solid colors."""
        try:
            with self._led_lock:
                if status == LEDStatus.OFF:
                    self.led.off()
                else:
                    self.led.color = LED_COLORS[status]
                self._current_status = status
                self.logger.debug(f"LED status set to: {status.value}")
        except Exception as e:
            self.logger.error(f"Error setting LED status: {e}")

    def get_status(self) -> LEDStatus:
        """Get current LED status."""
        return self._current_status

    def publish(self, outcome):
        """Show a scan outcome; a recorded attendance also beeps."""
        self.set_status(OUTCOME_STATUS[outcome.kind])
        if outcome.kind is OutcomeKind.SUCCESS:
            self.play_scan_sound()

    def reset_to_idle(self):
        self.set_status(LEDStatus.READY)

    def _stop_buzzer_timer(self):
        """Cancel any existing buzzer timer."""
        if self._buzzer_timer is not None:
            self._buzzer_timer.cancel()
            self._buzzer_timer = None

    def _delayed_buzzer_stop(self):
        """Stop the buzzer and clear the timer."""
        try:
            with self._buzzer_lock:
                self.buzzer.off()
                self._buzzer_timer = None
        except Exception as e:
            self.logger.error(f"Error stopping buzzer: {e}")

    def play_scan_sound(self, duration=HardwareConfig.BEEP_DURATION):
        """
        Play a short beep when attendance is recorded.

        Args:
            duration (float): Duration of the beep in seconds. Default is 50ms.
        """
        try:
            with self._buzzer_lock:
                self._stop_buzzer_timer()
                self.buzzer.on()
                self._buzzer_timer = threading.Timer(duration, self._delayed_buzzer_stop)
                self._buzzer_timer.daemon = True
                self._buzzer_timer.start()

            self.logger.debug("Played scan sound")

        except Exception as e:
            self.logger.error(f"Error playing scan sound: {e}")
            self.buzzer.off()

    def cleanup(self):
        """Clean up hardware resources."""
        try:
            self.set_status(LEDStatus.OFF)

            with self._buzzer_lock:
                self._stop_buzzer_timer()
            self.buzzer.off()
            self.buzzer.close()
            self.led.close()

            self.logger.info("Hardware resources cleaned up")

        except Exception as e:
            self.logger.error(f"Error cleaning up hardware resources: {e}")
