# scanstation/core/scan_coordinator.py
"""Scan pipeline shared by the camera and keyboard-wedge producers."""
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from scanstation.core.dedup_gate import DedupGate
from scanstation.core.payload_parser import ScanPayload, gate_key, parse_payload
from scanstation.storage.database import StorageError
from scanstation.storage.subject_registry import normalize_code

class ScanSource(Enum):
    """Where a raw scan came from."""
    CAMERA = "QR code"
    KEYED_INPUT = "Barcode"

class OutcomeKind(Enum):
    """Terminal results of one processing cycle."""
    SUCCESS = "success"
    ALREADY_SCANNED_TODAY = "already_scanned_today"
    BAD_FORMAT = "bad_format"
    UNKNOWN_CODE = "unknown_code"
    STORAGE_FAILURE = "storage_failure"

@dataclass(frozen=True)
class RawScanEvent:
    text: str
    source: ScanSource
    observed_at: float

@dataclass(frozen=True)
class ScanOutcome:
    kind: OutcomeKind
    message: str
    source: ScanSource
    payload: Optional[ScanPayload] = None
    total_scans: int = 0
    observed_at: float = field(default=0.0, compare=False)

    @property
    def count_message(self) -> str:
        if self.kind is not OutcomeKind.SUCCESS or self.payload is None:
            return ""
        times = "time" if self.total_scans == 1 else "times"
        return f"{self.payload.name} - attended {self.total_scans} {times}"


class ScanCoordinator:
    def __init__(self, registry, ledger, status_sink=None, dedup_gate=None,
                 clock=time.monotonic, today=date.today):
        """
        Initialize the coordinator.

        Args:
            registry: SubjectRegistry used for bare codes
            ledger: AttendanceLedger that owns the once-per-day rule
            status_sink: Object with ``publish(outcome)``, e.g. a StatusBoard
            dedup_gate: DedupGate in front of the pipeline
            clock: Monotonic time source for debouncing
            today: Callable returning the current calendar day
        """
        self.logger = logging.getLogger(__name__)
        self.registry = registry
        self.ledger = ledger
        self.status_sink = status_sink
        self.dedup_gate = dedup_gate or DedupGate()
        self.clock = clock
        self.today = today
        self._lock = threading.Lock()
        self._in_flight = 0

    def submit(self, text, source=ScanSource.KEYED_INPUT) -> Optional[ScanOutcome]:
        """
        Run one raw scan through the pipeline.

        Safe to call concurrently from the frame producer and the keyed
        input producer.

        Returns:
            ScanOutcome or None when the scan was empty or debounced
        """
        if text is None or not text.strip():
            return None

        event = RawScanEvent(text=text, source=source, observed_at=self.clock())
        key = gate_key(event.text)

        with self._lock:
            if not self.dedup_gate.should_process(key, event.observed_at):
                return None
            self._in_flight += 1

        try:
            outcome = self._process(event)
        finally:
            with self._lock:
                self._in_flight -= 1

        self._publish(outcome)
        return outcome

    def _process(self, event: RawScanEvent) -> ScanOutcome:
        source = event.source
        self.logger.info(f"Processing {source.value}: {event.text!r}")
        try:
            payload, ok = parse_payload(event.text)
            if not ok:
                return self._bad_format(event)

            if payload.structured:
                # the payload is trusted as-is, no registry lookup
                if not payload.is_valid():
                    return self._bad_format(event)
            else:
                code = normalize_code(payload.subject_code)
                subject = self.registry.resolve(code)
                if subject is None:
                    return ScanOutcome(
                        kind=OutcomeKind.UNKNOWN_CODE,
                        message=f"Unknown code: {code}",
                        source=source,
                        observed_at=event.observed_at,
                    )
                payload = ScanPayload(
                    name=subject.name,
                    major=subject.major,
                    subject_code=subject.subject_code,
                )
                if not payload.is_valid():
                    return self._bad_format(event)

            return self._record(event, payload)

        except StorageError as e:
            self.logger.error(f"Storage failure while processing {event.text!r}: {e}")
        except Exception as e:
            self.logger.exception(f"Unexpected error while processing {event.text!r}: {e}")

        return ScanOutcome(
            kind=OutcomeKind.STORAGE_FAILURE,
            message=f"Error while processing {source.value}!",
            source=source,
            observed_at=event.observed_at,
        )

    def _record(self, event: RawScanEvent, payload: ScanPayload) -> ScanOutcome:
        day = self.today()
        code = payload.subject_code

        if self.ledger.has_record_today(code, day):
            return self._already_scanned(event, payload)

        if not self.ledger.record_attendance(payload.name, payload.major, code, day):
            # lost a race against a concurrent cycle for the same code
            return self._already_scanned(event, payload)

        total = self.ledger.total_scans(code)
        self.logger.info(f"Attendance recorded for {payload.name} ({code}), total days: {total}")
        return ScanOutcome(
            kind=OutcomeKind.SUCCESS,
            message=f"{payload.name} recorded successfully! ({event.source.value})",
            source=event.source,
            payload=payload,
            total_scans=total,
            observed_at=event.observed_at,
        )

    def _already_scanned(self, event, payload):
        self.logger.info(f"{payload.name} ({payload.subject_code}) already scanned today")
        return ScanOutcome(
            kind=OutcomeKind.ALREADY_SCANNED_TODAY,
            message=f"{payload.name} was already scanned today!",
            source=event.source,
            payload=payload,
            observed_at=event.observed_at,
        )

    def _bad_format(self, event):
        self.logger.warning(f"Invalid {event.source.value} format: {event.text!r}")
        return ScanOutcome(
            kind=OutcomeKind.BAD_FORMAT,
            message=f"Invalid {event.source.value} format!",
            source=event.source,
            observed_at=event.observed_at,
        )

    def _publish(self, outcome: ScanOutcome):
        if self.status_sink is None:
            return
        try:
            self.status_sink.publish(outcome)
        except Exception as e:
            self.logger.error(f"Error publishing scan outcome: {e}")
