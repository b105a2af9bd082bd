# scanstation/input/keyed_input.py
"""Keyboard-wedge barcode reader: each completed line is one scan."""
import logging
import sys
import threading

from scanstation.core.scan_coordinator import ScanSource

class KeyedInputProducer:
    def __init__(self, coordinator, stream=None):
        """
        Initialize the producer.

        Args:
            coordinator: ScanCoordinator receiving each line
            stream: Text stream the reader types into (defaults to stdin)
        """
        self.logger = logging.getLogger(__name__)
        self.coordinator = coordinator
        self.stream = stream if stream is not None else sys.stdin
        self.running = False
        self._thread = None

    def handle_line(self, line):
        """Forward one completed line, ignoring blank ones."""
        text = (line or "").strip()
        if not text:
            return None
        self.logger.info(f"Keyed scan: {text}")
        return self.coordinator.submit(text, ScanSource.KEYED_INPUT)

    def read_loop(self):
        """Read lines until the stream ends or the producer is stopped."""
        for line in self.stream:
            if not self.running:
                break
            try:
                self.handle_line(line)
            except Exception as e:
                self.logger.error(f"Error handling keyed input: {e}")
        self.running = False
        self.logger.info("Keyed input stream closed")

    def start(self):
        self.running = True
        self._thread = threading.Thread(target=self.read_loop, name="keyed-input", daemon=True)
        self._thread.start()
        self.logger.info("Keyed input producer started")

    def stop(self):
        # a blocking read on stdin cannot be interrupted; the daemon thread ends with the process
        self.running = False

    def join(self, timeout=None):
        if self._thread is not None:
            self._thread.join(timeout)
