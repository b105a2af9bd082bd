# scanstation/core/status_board.py
"""Observable scan status with a delayed return to idle."""
import logging
import threading
from typing import Optional

from scanstation.config.settings import ProcessingConfig

IDLE_MESSAGE = "Ready to scan"

class StatusBoard:
    """
    Holds the outcome currently on display and fans it out to listeners.

    Every published outcome arms a one-shot reset timer. Each outcome gets a
    generation number and a timer only reverts to idle if its generation is
    still the latest, so an older timer cannot clear a newer outcome.
    """

    def __init__(self, reset_delay=ProcessingConfig.STATUS_RESET_DELAY, listeners=None):
        self.logger = logging.getLogger(__name__)
        self.reset_delay = reset_delay
        self._listeners = list(listeners or [])
        self._lock = threading.Lock()
        self._current = None
        self._generation = 0
        self._reset_timer = None

    def add_listener(self, listener):
        """Register an object with ``publish(outcome)`` and ``reset_to_idle()``."""
        with self._lock:
            self._listeners.append(listener)

    @property
    def current(self):
        """The outcome on display, or None when idle."""
        with self._lock:
            return self._current

    @property
    def message(self) -> str:
        current = self.current
        return current.message if current is not None else IDLE_MESSAGE

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def publish(self, outcome):
        """Show ``outcome`` and schedule its reset."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._current = outcome
            self._stop_reset_timer()
            self._reset_timer = threading.Timer(
                self.reset_delay, self._reset_if_current, args=(generation,)
            )
            self._reset_timer.daemon = True
            self._reset_timer.start()
            listeners = list(self._listeners)

        self.logger.info(f"Status: {outcome.message}")
        self._notify(listeners, "publish", outcome)

    def _stop_reset_timer(self):
        if self._reset_timer is not None:
            self._reset_timer.cancel()
            self._reset_timer = None

    def _reset_if_current(self, generation: int) -> bool:
        with self._lock:
            if generation != self._generation or self._current is None:
                return False
            self._current = None
            self._reset_timer = None
            listeners = list(self._listeners)

        self.logger.debug(f"Status reverted to idle (generation {generation})")
        self._notify(listeners, "reset_to_idle")
        return True

    def _notify(self, listeners, method, *args):
        for listener in listeners:
            try:
                getattr(listener, method)(*args)
            except Exception as e:
                self.logger.error(f"Status listener {listener!r} failed in {method}: {e}")

    def stop(self):
        with self._lock:
            self._stop_reset_timer()


class LoggingStatusListener:
    """Writes every status change to the log."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def publish(self, outcome):
        self.logger.info(f"[{outcome.kind.value}] {outcome.message}")
        if outcome.count_message:
            self.logger.info(outcome.count_message)

    def reset_to_idle(self):
        self.logger.debug(IDLE_MESSAGE)
