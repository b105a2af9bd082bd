import threading
from datetime import date

import numpy as np
import pytest

from scanstation.core.dedup_gate import DedupGate
from scanstation.core.scan_coordinator import ScanCoordinator
from scanstation.storage.attendance_ledger import AttendanceLedger
from scanstation.storage.database import Database
from scanstation.storage.subject_registry import SubjectRegistry

TODAY = date(2024, 3, 14)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingSink:
    """Status sink/listener that remembers everything it was given."""

    def __init__(self):
        self.outcomes = []
        self.resets = 0
        self._lock = threading.Lock()

    def publish(self, outcome):
        with self._lock:
            self.outcomes.append(outcome)

    def reset_to_idle(self):
        with self._lock:
            self.resets += 1


class FakeCamera:
    def __init__(self, frames=None, opened=True):
        self.frames = list(frames or [])
        self.opened = opened
        self.reads = 0

    def is_open(self):
        return self.opened

    def next_frame(self):
        self.reads += 1
        if self.frames:
            frame = self.frames.pop(0)
        else:
            frame = np.zeros((4, 4, 3), dtype=np.uint8)
        if frame is None:
            return None, False
        return frame, True


class FakeDecoder:
    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls = 0

    def decode(self, frame):
        self.calls += 1
        if self.results:
            text = self.results.pop(0)
            if text is not None:
                return text, True
        return "", False


class FakeDisplay:
    def __init__(self):
        self.frames = []

    def show(self, frame):
        self.frames.append(frame)


@pytest.fixture()
def database(tmp_path):
    db = Database(tmp_path / "attendance_test.db")
    yield db
    db.close()


@pytest.fixture()
def registry(database):
    return SubjectRegistry(database)


@pytest.fixture()
def ledger(database):
    return AttendanceLedger(database)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def coordinator(registry, ledger, sink, clock):
    return ScanCoordinator(
        registry, ledger, status_sink=sink,
        dedup_gate=DedupGate(debounce_window=3.0),
        clock=clock, today=lambda: TODAY,
    )


def frame():
    return np.full((8, 8, 3), 255, dtype=np.uint8)
