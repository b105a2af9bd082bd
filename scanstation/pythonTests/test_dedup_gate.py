from scanstation.core.dedup_gate import DedupGate


def test_first_scan_is_processed():
    gate = DedupGate(debounce_window=3.0)
    assert gate.should_process("ABC123", now=10.0)
    assert gate.last_accepted_code == "ABC123"
    assert gate.last_accepted_at == 10.0


def test_same_code_within_window_is_suppressed():
    gate = DedupGate(debounce_window=3.0)
    assert gate.should_process("ABC123", now=10.0)
    assert not gate.should_process("ABC123", now=11.0)
    assert not gate.should_process("ABC123", now=12.99)


def test_suppressed_scan_does_not_extend_window():
    gate = DedupGate(debounce_window=3.0)
    gate.should_process("ABC123", now=10.0)
    gate.should_process("ABC123", now=12.0)
    assert gate.should_process("ABC123", now=13.0)


def test_same_code_after_window_is_processed():
    gate = DedupGate(debounce_window=3.0)
    assert gate.should_process("ABC123", now=10.0)
    assert gate.should_process("ABC123", now=13.0)


def test_different_code_is_processed_immediately():
    gate = DedupGate(debounce_window=3.0)
    assert gate.should_process("ABC123", now=10.0)
    assert gate.should_process("XYZ789", now=10.1)
    # the gate only remembers the last accepted code
    assert gate.should_process("ABC123", now=10.2)
