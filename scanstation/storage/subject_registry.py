# scanstation/storage/subject_registry.py
"""Registry of enrolled subjects, looked up by their short code."""
import logging
import sqlite3
from dataclasses import dataclass
from typing import List, Optional

from scanstation.config.settings import ProcessingConfig


@dataclass(frozen=True)
class Subject:
    subject_code: str
    name: str
    major: str


class EnrollmentError(ValueError):
    """Raised when an enrollment request is rejected."""


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class SubjectRegistry:
    def __init__(self, database, code_length=ProcessingConfig.CODE_LENGTH):
        self.logger = logging.getLogger(__name__)
        self.db = database
        self.code_length = code_length

    def resolve(self, code: str) -> Optional[Subject]:
        """Look up a subject by code, case-insensitively. None if unknown."""
        code = normalize_code(code)
        rows = self.db.query(
            "SELECT neptun, name, major FROM students WHERE neptun = ?", (code,)
        )
        if not rows:
            self.logger.info(f"Subject not found in registry: {code}")
            return None
        row = rows[0]
        return Subject(subject_code=row["neptun"], name=row["name"], major=row["major"])

    def enroll(self, name: str, major: str, code: str) -> Subject:
        """
        Enroll a new subject.

        Args:
            name: Full name
            major: Major / programme
            code: Subject code, stored upper-cased

        Returns:
            Subject: The stored subject

        Raises:
            EnrollmentError: If a field is empty, the code has the wrong
                length or the code is already enrolled
        """
        name = (name or "").strip()
        major = (major or "").strip()
        code = normalize_code(code)

        if not name or not major or not code:
            raise EnrollmentError("Name, major and code are all required")
        if len(code) != self.code_length:
            raise EnrollmentError(
                f"Code must be {self.code_length} characters long (e.g. ABC123), got {code!r}"
            )

        try:
            with self.db.transaction() as cur:
                cur.execute(
                    "INSERT INTO students (neptun, name, major) VALUES (?, ?, ?)",
                    (code, name, major),
                )
        except sqlite3.IntegrityError:
            raise EnrollmentError(f"Code already enrolled: {code}")

        self.logger.info(f"Enrolled subject: {name} ({code})")
        return Subject(subject_code=code, name=name, major=major)

    def list_subjects(self) -> List[Subject]:
        rows = self.db.query("SELECT neptun, name, major FROM students ORDER BY neptun")
        return [Subject(subject_code=r["neptun"], name=r["name"], major=r["major"]) for r in rows]
