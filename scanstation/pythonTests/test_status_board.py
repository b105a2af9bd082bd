import time

from conftest import RecordingSink
from scanstation.core.scan_coordinator import OutcomeKind, ScanOutcome, ScanSource
from scanstation.core.status_board import IDLE_MESSAGE, LoggingStatusListener, StatusBoard


def outcome(message="Alice recorded successfully! (QR code)", kind=OutcomeKind.SUCCESS):
    return ScanOutcome(kind=kind, message=message, source=ScanSource.CAMERA)


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_idle_by_default():
    board = StatusBoard(reset_delay=0.05)
    assert board.current is None
    assert board.message == IDLE_MESSAGE


def test_publish_notifies_listeners_and_reverts_to_idle():
    listener = RecordingSink()
    board = StatusBoard(reset_delay=0.05, listeners=[listener])
    first = outcome()

    board.publish(first)

    assert board.current is first
    assert board.message == first.message
    assert listener.outcomes == [first]
    assert wait_until(lambda: board.current is None)
    assert listener.resets == 1


def test_newer_outcome_is_not_cleared_by_older_timer():
    listener = RecordingSink()
    board = StatusBoard(reset_delay=0.2, listeners=[listener])
    board.publish(outcome("first"))
    time.sleep(0.12)
    second = outcome("second", OutcomeKind.ALREADY_SCANNED_TODAY)
    board.publish(second)

    # the first outcome's reset would have fired by now
    time.sleep(0.12)
    assert board.current is second
    assert listener.resets == 0

    assert wait_until(lambda: board.current is None)
    assert listener.resets == 1
    board.stop()


def test_stale_generation_reset_is_ignored():
    board = StatusBoard(reset_delay=5)
    board.publish(outcome("first"))
    stale = board.generation
    latest = outcome("second")
    board.publish(latest)

    assert board._reset_if_current(stale) is False
    assert board.current is latest
    assert board._reset_if_current(board.generation) is True
    assert board.current is None
    board.stop()


def test_failing_listener_does_not_block_others():
    class Broken:
        def publish(self, outcome):
            raise RuntimeError("boom")

        def reset_to_idle(self):
            raise RuntimeError("boom")

    good = RecordingSink()
    board = StatusBoard(reset_delay=0.05, listeners=[Broken(), good])
    board.publish(outcome())
    assert good.outcomes
    assert wait_until(lambda: good.resets == 1)


def test_logging_listener(caplog):
    listener = LoggingStatusListener()
    scanned = ScanOutcome(
        kind=OutcomeKind.UNKNOWN_CODE, message="Unknown code: NOPE00", source=ScanSource.KEYED_INPUT
    )
    with caplog.at_level("INFO"):
        listener.publish(scanned)
    assert "[unknown_code] Unknown code: NOPE00" in caplog.text
