# scanstation/storage/attendance_ledger.py
"""Append-only, day-keyed attendance records."""
import csv
import logging
import sqlite3
from dataclasses import dataclass
from datetime import date as Date
from typing import List, Union

CSV_HEADER = ["ID", "Name", "Major", "Neptun", "Date", "Scans"]


@dataclass(frozen=True)
class AttendanceRecord:
    id: int
    name: str
    major: str
    subject_code: str
    date: str
    scan_count: int = 1


def _day(value: Union[Date, str]) -> str:
    if isinstance(value, Date):
        return value.isoformat()
    return str(value)


class AttendanceLedger:
    """
    Authority for "at most one record per subject per day".

    The check and the insert are a single INSERT against the
    UNIQUE(neptun, date) constraint; a conflict means another caller got
    there first and is reported as ``created=False``.
    """

    def __init__(self, database):
        self.logger = logging.getLogger(__name__)
        self.db = database

    def has_record_today(self, code: str, day: Union[Date, str]) -> bool:
        rows = self.db.query(
            "SELECT COUNT(*) FROM attendance_records WHERE neptun = ? AND date = ?",
            (code, _day(day)),
        )
        return rows[0][0] > 0

    def record_attendance(self, name: str, major: str, code: str, day: Union[Date, str]) -> bool:
        """
        Create the record for ``(code, day)`` if there is none yet.

        Returns:
            bool: True if a record was created, False if one already existed

        Raises:
            StorageError: If the store fails for any other reason
        """
        try:
            with self.db.transaction() as cur:
                cur.execute(
                    "INSERT INTO attendance_records (name, major, neptun, date, scans) "
                    "VALUES (?, ?, ?, ?, 1)",
                    (name, major or "", code, _day(day)),
                )
        except sqlite3.IntegrityError:
            self.logger.info(f"Attendance for {code} on {_day(day)} already recorded")
            return False

        self.logger.info(f"Recorded attendance: {name} ({code}) on {_day(day)}")
        return True

    def total_scans(self, code: str) -> int:
        """Number of days on which ``code`` has a record."""
        rows = self.db.query(
            "SELECT COUNT(*) FROM attendance_records WHERE neptun = ?", (code,)
        )
        return rows[0][0]

    def all_records(self) -> List[AttendanceRecord]:
        rows = self.db.query(
            "SELECT id, name, major, neptun, date, scans FROM attendance_records "
            "ORDER BY date DESC, id DESC"
        )
        return [
            AttendanceRecord(
                id=r["id"],
                name=r["name"],
                major=r["major"],
                subject_code=r["neptun"],
                date=r["date"],
                scan_count=r["scans"],
            )
            for r in rows
        ]

    def format_records(self) -> str:
        """Render all records as a fixed-width text table."""
        lines = [
            f"{'ID':<5} {'Name':<25} {'Major':<30} {'Neptun':<10} {'Date':<12} {'Scans':<6}",
            "=" * 100,
        ]
        for r in self.all_records():
            lines.append(
                f"{r.id:<5d} {r.name:<25} {r.major:<30} {r.subject_code:<10} "
                f"{r.date:<12} {r.scan_count:<6d}"
            )
        return "\n".join(lines) + "\n"

    def export_csv(self, path) -> int:
        """Write every record to ``path`` as CSV. Returns the row count."""
        records = self.all_records()
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(CSV_HEADER)
            for r in records:
                writer.writerow([r.id, r.name, r.major, r.subject_code, r.date, r.scan_count])
        self.logger.info(f"Exported {len(records)} attendance records to {path}")
        return len(records)
