# =============================================================================
# daycare_core/offline/local_store.py
# Persistent Local Store (SQLite key/value slots)
# =============================================================================
"""
LocalStore - durable, always-available storage for every collection.

Each collection is one JSON document in a single-row slot of the
``collections`` table. A write replaces the whole slot inside one SQLite
transaction, so readers never observe a partially written collection.

Failures are logged and reported through return values; nothing here raises
to callers, because the local store is the fallback for everything else.
"""

from __future__ import annotations
import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import logging

from daycare_core.config import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)


# Collection keys
CHILDREN = "children"
PARENTS = "parents"
DAILY_LOGS = "daily_logs"
HOLIDAYS = "holidays"
SETTINGS = "settings"
SEND_LOGS = "send_logs"
AUTH_FLAG = "auth_flag"

LIST_COLLECTIONS = (CHILDREN, PARENTS, DAILY_LOGS, HOLIDAYS, SEND_LOGS)


class LocalStore:
    """
    SQLite-backed key/value store with thread-local connections.

    Usage:
        store = LocalStore(Path("local_data/daycare.db"))
        children = store.get("children", [])
        store.set("children", children + [child.to_dict()])
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS collections (
            key TEXT PRIMARY KEY,
            value TEXT,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._init_lock = threading.Lock()
        self._initialized = False

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=10,
            )
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> None:
        """Create the schema once."""
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            with self.transaction() as conn:
                conn.execute(self.SCHEMA)
            self._initialized = True
            logger.info(f"Local store initialized at: {self.db_path}")

    # =========================================================================
    # SLOT OPERATIONS
    # =========================================================================

    def get(self, collection: str, default: Any = None) -> Any:
        """
        Read a collection.

        Returns:
            The decoded JSON value, or ``default`` when the slot is empty,
            undecodable, or the database cannot be read.
        """
        try:
            self.initialize()
            row = self._get_connection().execute(
                "SELECT value FROM collections WHERE key = ?", [collection]
            ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to read local collection '{collection}': {e}")
            return default

        if row is None or row["value"] is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt local collection '{collection}': {e}")
            return default

    def set(self, collection: str, value: Any) -> bool:
        """
        Replace a collection atomically.

        Returns:
            True if the value was durably written
        """
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize local collection '{collection}': {e}")
            return False

        try:
            self.initialize()
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO collections (key, value, updated_at)
                    VALUES (?, ?, ?)
                    """,
                    [collection, payload, datetime.now().isoformat()],
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to write local collection '{collection}': {e}")
            return False
        return True

    def delete(self, collection: str) -> bool:
        """Clear a collection slot."""
        try:
            self.initialize()
            with self.transaction() as conn:
                conn.execute("DELETE FROM collections WHERE key = ?", [collection])
        except sqlite3.Error as e:
            logger.error(f"Failed to clear local collection '{collection}': {e}")
            return False
        return True

    def keys(self) -> list:
        """Names of all populated slots."""
        try:
            self.initialize()
            rows = self._get_connection().execute(
                "SELECT key FROM collections ORDER BY key"
            ).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to list local collections: {e}")
            return []
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close this thread's database connection."""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None
