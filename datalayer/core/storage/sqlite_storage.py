import sqlite3
import threading
from pathlib import Path
from typing import Iterator, Optional, Tuple

from datalayer.core.storage.base import DEFAULT_QUOTA_BYTES, Storage
from datalayer.utils.logger import get_logger

logger = get_logger("storage.sqlite")


class SQLiteStorage(Storage):
    """
    SQLite-backed persistent namespace.

    Backs ``localStorage``: entries survive process restarts. Entries are
    enumerated in the order their keys were first written; overwriting a key
    keeps its position.
    """

    def __init__(self, db_path: Path, quota: Optional[int] = DEFAULT_QUOTA_BYTES):
        super().__init__(quota)
        self.db_path = Path(db_path)
        self._conn_local = threading.local()
        # Quota check and write must not interleave across threads
        self._write_lock = threading.Lock()

        # Ensure directory exists
        if not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

        logger.debug(f"SQLiteStorage initialized at {self.db_path} (quota={quota})")

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread."""
        if getattr(self._conn_local, "conn", None) is None:
            self._conn_local.conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                check_same_thread=False
            )
            self._conn_local.conn.row_factory = sqlite3.Row
            # Enable WAL mode for better concurrency
            self._conn_local.conn.execute("PRAGMA journal_mode=WAL;")
            self._conn_local.conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn_local.conn

    def _init_schema(self):
        """Initialize database schema."""
        conn = self._get_conn()
        with conn:
            # rowid keeps first-write order for key(index)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    def close(self):
        """Close the connection owned by the calling thread."""
        conn = getattr(self._conn_local, "conn", None)
        if conn is not None:
            conn.close()
            self._conn_local.conn = None

    # =========================================================================
    # Storage interface
    # =========================================================================

    @property
    def length(self) -> int:
        conn = self._get_conn()
        cursor = conn.execute("SELECT COUNT(*) AS cnt FROM kv_store")
        return cursor.fetchone()["cnt"]

    def key(self, index: int) -> Optional[str]:
        if index < 0:
            return None
        conn = self._get_conn()
        cursor = conn.execute(
            "SELECT key FROM kv_store ORDER BY rowid LIMIT 1 OFFSET ?", (index,)
        )
        row = cursor.fetchone()
        return row["key"] if row else None

    def get_item(self, key: str) -> Optional[str]:
        conn = self._get_conn()
        try:
            cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (str(key),))
        except UnicodeEncodeError:
            # Not UTF-8 encodable, so never stored
            return None
        row = cursor.fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        key, value = str(key), str(value)
        conn = self._get_conn()
        with self._write_lock, conn:
            if self.quota is not None:
                self._ensure_capacity(
                    key, value, self._used_bytes(conn), self._entry_bytes(conn, key)
                )
            conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value)
            )

    def remove_item(self, key: str) -> None:
        conn = self._get_conn()
        try:
            with self._write_lock, conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (str(key),))
        except UnicodeEncodeError:
            return

    def clear(self) -> None:
        conn = self._get_conn()
        with self._write_lock, conn:
            conn.execute("DELETE FROM kv_store")

    def items(self) -> Iterator[Tuple[str, str]]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT key, value FROM kv_store ORDER BY rowid")
        return iter([(row["key"], row["value"]) for row in cursor])

    # =========================================================================
    # Quota accounting
    # =========================================================================

    @staticmethod
    def _used_bytes(conn: sqlite3.Connection) -> int:
        cursor = conn.execute(
            "SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0)"
            " AS used FROM kv_store"
        )
        return cursor.fetchone()["used"]

    @staticmethod
    def _entry_bytes(conn: sqlite3.Connection, key: str) -> int:
        cursor = conn.execute(
            "SELECT LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB)) AS size"
            " FROM kv_store WHERE key = ?",
            (key,)
        )
        row = cursor.fetchone()
        return row["size"] if row else 0

    @property
    def used_bytes(self) -> int:
        return self._used_bytes(self._get_conn())
