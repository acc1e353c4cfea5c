"""SQLite-based cache for scraper API responses."""

import json
import sqlite3
import time
from pathlib import Path
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class ResponseCache:
    """SQLite-backed key/value cache with a per-entry expiry."""

    def __init__(self, db_path: Path, ttl_days: int = 30):
        """Initialize cache with database path and TTL.

        Args:
            db_path: Path to SQLite database file
            ttl_days: Time-to-live in days (default: 30)
        """
        self.db_path = Path(db_path).expanduser()
        self.ttl_seconds = ttl_days * 24 * 60 * 60
        self._init_db()
        logger.debug("Initialized response cache", db_path=str(self.db_path), ttl_days=ttl_days)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self):
        """Create the schema if missing."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS responses (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    expires_at INTEGER NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str) -> Optional[dict]:
        """Return the cached value, or None if missing or expired."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT value FROM responses WHERE key = ? AND expires_at > ?",
                (key, int(time.time())),
            ).fetchone()
        finally:
            conn.close()

        if row:
            logger.debug("Cache hit", key=key)
            return json.loads(row[0])
        logger.debug("Cache miss", key=key)
        return None

    def set(self, key: str, value: dict):
        """Store a JSON-serializable value with the configured TTL."""
        conn = self._connect()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO responses (key, value, expires_at) VALUES (?, ?, ?)",
                (key, json.dumps(value), int(time.time()) + self.ttl_seconds),
            )
            conn.commit()
        finally:
            conn.close()

    def cleanup_expired(self) -> int:
        """Delete expired entries and return how many were removed."""
        conn = self._connect()
        try:
            cursor = conn.execute(
                "DELETE FROM responses WHERE expires_at <= ?", (int(time.time()),)
            )
            conn.commit()
            count = cursor.rowcount
        finally:
            conn.close()

        if count > 0:
            logger.info("Cleaned up expired cache entries", count=count)
        return count
