# scanstation/storage/database.py
"""SQLite backing store shared by the subject registry and attendance ledger."""
import logging
import sqlite3
import threading
from contextlib import contextmanager

from scanstation.config.settings import PathConfig

SCHEMA = (
    '''
    CREATE TABLE IF NOT EXISTS students (
        neptun TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        major TEXT NOT NULL
    )
    ''',
    # one row per subject per day; the constraint is the day-level authority
    '''
    CREATE TABLE IF NOT EXISTS attendance_records (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        major TEXT NOT NULL,
        neptun TEXT NOT NULL,
        date TEXT NOT NULL,
        scans INTEGER DEFAULT 1,
        UNIQUE(neptun, date)
    )
    ''',
)


class StorageError(Exception):
    """Raised when the backing store is unreachable or a statement fails."""


class Database:
    def __init__(self, db_path=None):
        """Open the SQLite database and make sure the schema exists."""
        self.logger = logging.getLogger(__name__)
        self.db_path = str(db_path or PathConfig.DB_PATH)
        self._lock = threading.RLock()
        self._conn = None
        self.connect()
        self.init_schema()

    def connect(self):
        """Connect with settings suited to several producer threads."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=15, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            cur = conn.cursor()
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA busy_timeout=5000;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.close()
        except sqlite3.Error as e:
            self.logger.error(f"Failed to open database {self.db_path}: {e}")
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e
        self._conn = conn
        self.logger.info(f"Connected to database: {self.db_path}")

    def init_schema(self):
        with self.transaction() as cur:
            for statement in SCHEMA:
                cur.execute(statement)

    @contextmanager
    def transaction(self):
        """
        Yield a cursor inside a serialized transaction.

        Commits on success and rolls back on error. ``sqlite3.IntegrityError``
        is re-raised untouched so callers can treat a constraint conflict as a
        signal; every other ``sqlite3.Error`` becomes a StorageError.
        """
        with self._lock:
            if self._conn is None:
                raise StorageError("Database connection is closed")
            cur = self._conn.cursor()
            try:
                yield cur
                self._conn.commit()
            except sqlite3.IntegrityError:
                self._conn.rollback()
                raise
            except sqlite3.Error as e:
                self._conn.rollback()
                self.logger.error(f"Database error: {e}")
                raise StorageError(str(e)) from e
            except Exception:
                self._conn.rollback()
                raise
            finally:
                cur.close()

    def query(self, sql, params=()):
        """Run a read-only statement and return all rows."""
        with self.transaction() as cur:
            cur.execute(sql, params)
            return cur.fetchall()

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                self.logger.info("Database connection closed")
