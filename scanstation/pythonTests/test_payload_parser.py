import pytest

from scanstation.core.payload_parser import ScanPayload, gate_key, is_structured, parse_payload


def test_structured_payload():
    payload, ok = parse_payload("Name=Alice;Major=CS;Neptun=ABC123")
    assert ok
    assert payload == ScanPayload(name="Alice", major="CS", subject_code="ABC123", structured=True)
    assert payload.is_valid()


def test_structured_fields_in_any_order_with_whitespace():
    payload, _ = parse_payload(" Neptun = XYZ789 ; Name= Bob Smith ;Major =EE ")
    assert (payload.name, payload.major, payload.subject_code) == ("Bob Smith", "EE", "XYZ789")


def test_malformed_segment_is_ignored():
    payload, ok = parse_payload("Name=Alice;Garbage;Neptun=ABC123")
    assert ok
    assert (payload.name, payload.major, payload.subject_code) == ("Alice", "", "ABC123")
    assert payload.is_valid()


def test_segment_with_extra_equals_is_ignored():
    payload, _ = parse_payload("Name=Alice=Bob;Neptun=ABC123")
    assert payload.name == ""
    assert payload.subject_code == "ABC123"
    assert not payload.is_valid()


def test_trailing_equals_still_counts_as_pair():
    payload, _ = parse_payload("Name=Alice=;Neptun=ABC123")
    assert payload.name == "Alice"


def test_keys_are_case_sensitive():
    payload, _ = parse_payload("name=Alice;NEPTUN=ABC123")
    assert payload == ScanPayload(structured=True)


def test_missing_name_is_left_empty():
    payload, ok = parse_payload("Major=CS;Neptun=ABC123")
    assert ok
    assert payload.name == ""
    assert not payload.is_valid()


def test_structured_code_is_not_upper_cased_by_parser():
    payload, _ = parse_payload("Name=Alice;Neptun=abc123")
    assert payload.subject_code == "abc123"


def test_bare_code():
    payload, ok = parse_payload("  abc123 \n")
    assert ok
    assert not payload.structured
    assert payload.subject_code == "abc123"
    assert payload.name == ""


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_input_is_not_ok(raw):
    payload, ok = parse_payload(raw)
    assert not ok
    assert payload == ScanPayload()


def test_shape_depends_only_on_equals_sign():
    assert is_structured("Anything=else")
    assert is_structured("garbage=")
    assert not is_structured("Name:Alice;Neptun:ABC123")


def test_gate_key():
    assert gate_key("Name=Alice;Major=CS;Neptun=abc123") == "ABC123"
    assert gate_key(" abc123 ") == "ABC123"
    assert gate_key("Name=Alice") == "Name=Alice"
    assert gate_key("") == ""
