# =============================================================================
# lifetrack_core/offline/local_store.py
# Local SQLite Slot Store for Offline Operations
# =============================================================================
"""
LocalStore - SQLite-backed key/value store holding whole record lists.

Features:
- One row per named slot (e.g. "local_waterIntakes", "pending_waterIntakes")
- Full-replace writes, committed before returning
- Corrupt or unreadable slots read as empty, never raise
- Small scalar settings table (manual offline flag and similar)
- Thread-local connections
"""

from __future__ import annotations
import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import numpy as np
import pandas as pd

from lifetrack_core.errors import SerializationError, handle_error
from lifetrack_core.services.base_service import ServiceResult

logger = logging.getLogger(__name__)


class LocalStore:
    """
    Local SQLite store for offline data.

    Each slot holds a JSON-serialized list of records, read and written as a
    whole. The owning repository is the only writer of its slots.
    """

    DEFAULT_DB_PATH = Path("local_data") / "lifetrack.db"

    SCHEMA = {
        "slots": """
            CREATE TABLE IF NOT EXISTS slots (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """,
        "app_settings": """
            CREATE TABLE IF NOT EXISTS app_settings (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """,
    }

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Initialize local store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self._ensure_directory()
        self._local = threading.local()
        self._schema_lock = threading.Lock()
        self._initialized = False

    def _ensure_directory(self) -> None:
        """Ensure database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
            )
            self._local.connection.row_factory = sqlite3.Row
        if not self._initialized:
            self.initialize()
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
        """Initialize database schema."""
        with self._schema_lock:
            if self._initialized:
                return

            conn = self._local.connection
            for table_name, schema in self.SCHEMA.items():
                conn.execute(schema)
                logger.debug(f"Created/verified table: {table_name}")

            conn.commit()
            self._initialized = True
            logger.info(f"Local store initialized at: {self.db_path}")

    def close(self) -> None:
        """Close this thread's connection."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None

    # =========================================================================
    # SLOT OPERATIONS
    # =========================================================================

    def read(self, key: str) -> ServiceResult:
        """
        Read a slot, reporting why it is empty when it is.

        Returns:
            ServiceResult whose data is always a list:
            - success, metadata["missing"] True: slot never written
            - success: decoded records
            - failure (LOCAL_002): slot unreadable, data is []
        """
        try:
            row = self._get_connection().execute(
                "SELECT value FROM slots WHERE key = ?", [key]
            ).fetchone()
        except sqlite3.Error as e:
            error = SerializationError(f"Could not read local slot: {e}", slot=key)
            handle_error(error)
            return ServiceResult.fail(error.message, error.code, metadata=error.details, data=[])

        if row is None:
            return ServiceResult.ok([], metadata={"missing": True})

        try:
            records = json.loads(row["value"])
            if not isinstance(records, list):
                raise ValueError(f"expected a list, found {type(records).__name__}")
        except ValueError as e:
            error = SerializationError(f"Corrupt local slot: {e}", slot=key)
            handle_error(error)
            return ServiceResult.fail(error.message, error.code, metadata=error.details, data=[])

        dropped = sum(1 for r in records if not isinstance(r, dict))
        if dropped:
            logger.warning(f"Ignoring {dropped} malformed entries in slot {key}")
            records = [r for r in records if isinstance(r, dict)]

        return ServiceResult.ok(records, metadata={"missing": False})

    def read_all(self, key: str) -> List[Dict[str, Any]]:
        """Read a slot; empty list on missing or corrupt data."""
        return self.read(key).data

    def write_all(self, key: str, records: List[Dict[str, Any]]) -> None:
        """
        Replace a slot's contents.

        Args:
            key: Slot name
            records: Full list of records to store
        """
        payload = json.dumps([clean_record(r) for r in records])
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO slots (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                [key, payload, datetime.now().isoformat()],
            )

    def clear(self, key: str) -> None:
        with self.transaction() as conn:
            conn.execute("DELETE FROM slots WHERE key = ?", [key])

    def keys(self) -> List[str]:
        rows = self._get_connection().execute("SELECT key FROM slots ORDER BY key").fetchall()
        return [row["key"] for row in rows]

    # =========================================================================
    # SETTINGS
    # =========================================================================

    def get_setting(self, key: str, default: Any = None) -> Any:
        row = self._get_connection().execute(
            "SELECT value FROM app_settings WHERE key = ?", [key]
        ).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except ValueError:
            logger.warning(f"Ignoring unreadable setting: {key}")
            return default

    def set_setting(self, key: str, value: Any) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO app_settings (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                [key, json.dumps(clean_value(value)), datetime.now().isoformat()],
            )


def clean_value(value: Any) -> Any:
    """Normalize numpy/pandas/datetime values for JSON."""
    if isinstance(value, dict):
        return clean_record(value)
    if isinstance(value, (list, tuple)):
        return [clean_value(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return None if np.isnan(value) else float(value)
    if isinstance(value, float) and pd.isna(value):
        return None
    return value


def clean_record(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: clean_value(v) for k, v in record.items()}
