# scanstation/core/dedup_gate.py
"""Short-horizon suppression of repeated scans of the same code."""
import logging
import threading
import time

from scanstation.config.settings import ProcessingConfig

class DedupGate:
    def __init__(self, debounce_window=ProcessingConfig.DEBOUNCE_WINDOW):
        """Initialize the gate with an empty last-accepted state."""
        self.logger = logging.getLogger(__name__)
        self.debounce_window = debounce_window
        self.last_accepted_code = ""
        self.last_accepted_at = 0.0
        self._lock = threading.Lock()

    def should_process(self, code, now=None):
        """
        Decide whether a scan of ``code`` starts a new processing cycle.

        Args:
            code: Normalized subject code
            now: Current timestamp (defaults to time.monotonic())

        Returns:
            bool: True if the code differs from the last accepted one or the
            debounce window has elapsed since it was accepted
        """
        if now is None:
            now = time.monotonic()

        with self._lock:
            if (code != self.last_accepted_code or
                    now - self.last_accepted_at >= self.debounce_window):
                self.last_accepted_code = code
                self.last_accepted_at = now
                return True

        self.logger.debug(f"Suppressed repeated scan of {code}")
        return False
