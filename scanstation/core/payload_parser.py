# scanstation/core/payload_parser.py
"""Parsing of raw scan text into attendance payloads.

Two shapes are accepted:

* structured: ``Name=<value>;Major=<value>;Neptun=<value>`` in any order
* bare code: any text without ``=``, taken as the subject code itself
"""
from dataclasses import dataclass
from typing import Tuple

FIELD_SEPARATOR = ";"
KEY_VALUE_SEPARATOR = "="

# payload key -> ScanPayload attribute
FIELD_KEYS = {
    "Name": "name",
    "Major": "major",
    "Neptun": "subject_code",
}

@dataclass(frozen=True)
class ScanPayload:
    """Normalized scan content, either parsed or resolved from the registry."""
    name: str = ""
    major: str = ""
    subject_code: str = ""
    structured: bool = False

    def is_valid(self) -> bool:
        """Name and code are required, major may be empty."""
        return bool(self.name) and bool(self.subject_code)


def is_structured(raw: str) -> bool:
    """The shape is decided solely by the presence of '='."""
    return KEY_VALUE_SEPARATOR in raw


def _split_pair(segment: str):
    parts = segment.split(KEY_VALUE_SEPARATOR)
    # trailing empty pieces do not count as parts ("Name=Alice=" is a pair)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def parse_payload(raw: str) -> Tuple[ScanPayload, bool]:
    """
    Parse raw scan text.

    Args:
        raw: Text from the camera decoder or the keyboard wedge

    Returns:
        tuple: (ScanPayload, ok). ``ok`` is False only for empty input.
        Missing required fields are left empty for the caller to validate.
    """
    if raw is None or not raw.strip():
        return ScanPayload(), False

    if not is_structured(raw):
        return ScanPayload(subject_code=raw.strip()), True

    fields = {}
    for segment in raw.split(FIELD_SEPARATOR):
        parts = _split_pair(segment)
        if len(parts) != 2:
            continue
        key = parts[0].strip()
        attr = FIELD_KEYS.get(key)
        if attr is not None:
            fields[attr] = parts[1].strip()

    return ScanPayload(structured=True, **fields), True


def gate_key(raw: str) -> str:
    """
    Subject code used to debounce repeated scans of the same code.

    Structured text is keyed on its Neptun field, bare text on itself.
    Structured text without a code falls back to the whole text.
    """
    payload, ok = parse_payload(raw)
    if not ok:
        return ""
    if payload.subject_code:
        return payload.subject_code.upper()
    return raw.strip()
