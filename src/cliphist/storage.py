import functools
import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path

from cliphist.config import DB_PATH, DEFAULT_CONTENT_TYPE, DEFAULT_LIMIT, PREVIEW_LENGTH
from cliphist.models import ClipboardEntry
from cliphist.preview import preview

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS clipboard_history (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    content      TEXT NOT NULL,
    content_type TEXT DEFAULT 'text',
    created_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now')),
    char_count   INTEGER
);

CREATE INDEX IF NOT EXISTS idx_clipboard_created_at ON clipboard_history(created_at DESC);
"""

# Newest first; id breaks ties between entries sharing a timestamp.
ORDER_NEWEST = "ORDER BY created_at DESC, id DESC"


class StorageError(Exception):
    """The history database is unreachable, missing its schema, or rejected a write."""


def _storage_op(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            with self._lock:
                return method(self, *args, **kwargs)
        except sqlite3.Error as exc:
            raise StorageError(f"{method.__name__} failed: {exc}") from exc

    return wrapper


class StorageManager:
    """Persisted clipboard history backed by SQLite.

    Calls are synchronous and may come from any thread. One lock serializes
    every operation on the shared connection, so the newest-entry check in
    ``insert`` and the write that follows it cannot interleave with another
    call on the same manager. Separate managers (or processes) opened on one
    database file are not coordinated and can still race.
    """

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = str(db_path) if db_path else str(DB_PATH)
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open {self._db_path}: {exc}") from exc
        self.init_db()

    @_storage_op
    def init_db(self) -> None:
        self._conn.executescript(SCHEMA)
        self._conn.commit()

    @_storage_op
    def insert(self, content: str, content_type: str = DEFAULT_CONTENT_TYPE) -> int | None:
        """Store ``content`` and return its new id.

        Returns None without writing when the content is blank or exactly
        equals the newest entry's content. Only the newest entry is compared,
        so a value may reappear once something else has been copied.
        """
        if not content.strip():
            return None

        row = self._conn.execute(
            f"SELECT content, created_at FROM clipboard_history {ORDER_NEWEST} LIMIT 1"
        ).fetchone()
        if row is not None and row["content"] == content:
            return None

        # UTC, and never earlier than the newest entry, so a clock stepping
        # backwards cannot sort a new entry below older ones.
        created_at = datetime.now(timezone.utc)
        if row is not None:
            created_at = max(created_at, datetime.fromisoformat(row["created_at"]))

        cursor = self._conn.execute(
            """INSERT INTO clipboard_history (content, content_type, created_at, char_count)
               VALUES (?, ?, ?, ?)""",
            (content, getattr(content_type, "value", content_type), created_at.isoformat(timespec="microseconds"), len(content)),
        )
        self._conn.commit()
        return cursor.lastrowid

    @_storage_op
    def fetch(self, limit: int = DEFAULT_LIMIT) -> list[ClipboardEntry]:
        rows = self._conn.execute(
            f"SELECT * FROM clipboard_history {ORDER_NEWEST} LIMIT ?",
            (limit,),
        ).fetchall()
        return [self._row_to_entry(r) for r in rows]

    @_storage_op
    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[ClipboardEntry]:
        """Entries whose content contains ``query``, case-sensitively.

        instr() matches the query literally, so ``%`` and ``_`` have no
        pattern meaning. An empty query matches every entry.
        """
        rows = self._conn.execute(
            f"""SELECT * FROM clipboard_history
                WHERE instr(content, ?) > 0
                {ORDER_NEWEST}
                LIMIT ?""",
            (query, limit),
        ).fetchall()
        return [self._row_to_entry(r) for r in rows]

    @_storage_op
    def get_entry(self, entry_id: int) -> ClipboardEntry | None:
        row = self._conn.execute(
            "SELECT * FROM clipboard_history WHERE id = ?", (entry_id,)
        ).fetchone()
        return self._row_to_entry(row) if row else None

    @_storage_op
    def delete(self, entry_id: int) -> None:
        self._conn.execute("DELETE FROM clipboard_history WHERE id = ?", (entry_id,))
        self._conn.commit()

    @_storage_op
    def clear(self) -> None:
        self._conn.execute("DELETE FROM clipboard_history")
        self._conn.commit()

    @_storage_op
    def trim(self, max_entries: int) -> int:
        """Keep the ``max_entries`` newest entries and return how many were removed."""
        if max_entries < 0:
            raise ValueError(f"max_entries must be non-negative, got {max_entries}")

        cursor = self._conn.execute(
            f"""DELETE FROM clipboard_history WHERE id NOT IN (
                    SELECT id FROM clipboard_history {ORDER_NEWEST} LIMIT ?
                )""",
            (max_entries,),
        )
        self._conn.commit()
        removed = cursor.rowcount
        if removed:
            logger.info("Trimmed %d entries (keeping %d)", removed, max_entries)
        return removed

    @_storage_op
    def count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) as cnt FROM clipboard_history").fetchone()
        return row["cnt"]

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> ClipboardEntry:
        content = row["content"]
        char_count = row["char_count"]
        return ClipboardEntry(
            id=row["id"],
            content=content,
            content_type=row["content_type"],
            created_at=datetime.fromisoformat(row["created_at"]),
            char_count=char_count if char_count is not None else len(content),
            preview=preview(content, PREVIEW_LENGTH),
        )
