# scanstation/core/frame_producer.py
"""Fixed-cadence camera loop feeding the display and the QR decoder."""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from scanstation.config.settings import ProcessingConfig
from scanstation.core.scan_coordinator import ScanSource

def frame_is_empty(frame) -> bool:
    return frame is None or getattr(frame, "size", 0) == 0

class FrameProducer:
    def __init__(self, camera, decoder, coordinator, display=None,
                 interval=ProcessingConfig.FRAME_INTERVAL, executor=None):
        """
        Initialize the frame producer.

        Args:
            camera: Object with ``next_frame() -> (frame, ok)`` and ``is_open()``
            decoder: Object with ``decode(frame) -> (text, found)``
            coordinator: ScanCoordinator receiving decoded text
            display: Optional object with ``show(frame)``
            interval: Seconds between ticks
            executor: Pool for decodes. Without one, decodes run inside the
                tick until start() creates a pool
        """
        self.logger = logging.getLogger(__name__)
        self.camera = camera
        self.decoder = decoder
        self.coordinator = coordinator
        self.display = display
        self.interval = interval

        self.running = False
        self._stop_event = threading.Event()
        self._thread = None
        self._decode_lock = threading.Lock()
        self._decode_in_flight = False
        self._pending = None
        self._executor = executor

        self.frames_shown = 0
        self.decodes_started = 0
        self.decodes_skipped = 0
        self.ticks_overrun = 0

    @property
    def decode_in_flight(self) -> bool:
        with self._decode_lock:
            return self._decode_in_flight

    def start(self):
        """Start the tick loop in its own thread."""
        if self.running:
            return
        self.running = True
        self._stop_event.clear()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=ProcessingConfig.DECODE_WORKERS, thread_name_prefix="qr-decode"
            )
        self._thread = threading.Thread(target=self._run, name="frame-producer", daemon=True)
        self._thread.start()
        self.logger.info(f"Frame producer started ({1 / self.interval:.0f} Hz)")

    def stop(self):
        """Stop ticking and wait for an in-flight decode to finish."""
        self.running = False
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=2)
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.logger.info("Frame producer stopped")

    def _run(self):
        next_tick = time.monotonic()
        while self.running:
            try:
                self.tick()
            except Exception as e:
                self.logger.error(f"Error in frame tick: {e}")

            next_tick += self.interval
            now = time.monotonic()
            if now > next_tick:
                # overran; drop the missed ticks instead of queuing them
                self.ticks_overrun += 1
                next_tick = now
            self._stop_event.wait(max(0.0, next_tick - now))

    def tick(self):
        """
        Pull one frame, show it, and start a decode if none is in flight.

        Returns:
            bool: True if a decode was started for this frame
        """
        if not self.camera.is_open():
            return False

        frame, ok = self.camera.next_frame()
        if not ok or frame_is_empty(frame):
            return False

        if self.display is not None:
            try:
                self.display.show(frame)
                self.frames_shown += 1
            except Exception as e:
                self.logger.error(f"Error showing frame: {e}")

        with self._decode_lock:
            if self._decode_in_flight:
                self.decodes_skipped += 1
                return False
            self._decode_in_flight = True
            self.decodes_started += 1

        try:
            if self._executor is not None:
                self._pending = self._executor.submit(self._decode_and_submit, frame)
            else:
                self._decode_and_submit(frame)
        except RuntimeError as e:
            # executor already shut down
            self.logger.debug(f"Decode not scheduled: {e}")
            self._clear_in_flight()
            return False
        return True

    def _decode_and_submit(self, frame):
        try:
            text, found = self.decoder.decode(frame)
            if found:
                self.coordinator.submit(text, ScanSource.CAMERA)
        except Exception as e:
            self.logger.error(f"Error decoding frame: {e}")
        finally:
            self._clear_in_flight()

    def _clear_in_flight(self):
        with self._decode_lock:
            self._decode_in_flight = False

    def wait_for_decode(self, timeout=None) -> bool:
        """Block until the last scheduled decode has finished."""
        pending = self._pending
        if pending is None:
            return True
        try:
            pending.result(timeout=timeout)
        except Exception as e:
            self.logger.debug(f"Waiting for decode ended with: {e}")
            return False
        return True
