import datetime
import json
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Optional

import pytz
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from .logger import get_logger

logger = get_logger(__name__)

DB_PATH = os.getenv("SHOP_DB_PATH", "/data/shop_state.sqlite3")
WRITE_RETRIES = int(os.getenv("SHOP_WRITE_RETRIES", "3"))

CATALOG_KEY = "catalog"
CART_KEY = "cart"
SESSION_KEY = "session"

def _is_locked(exc: BaseException) -> bool:
    return isinstance(exc, sqlite3.OperationalError) and "locked" in str(exc).lower()


# Only lock contention is retried; other errors fail on the first attempt.
_retry_locked = retry(
    retry=retry_if_exception(_is_locked),
    wait=wait_exponential_jitter(initial=0.05, max=1),
    stop=stop_after_attempt(max(1, WRITE_RETRIES)),
    reraise=True,
)


def now_utc_iso() -> str:
    return datetime.datetime.now(tz=pytz.UTC).isoformat()


class KeyValueStore:
    """
    Durable string key/value store backed by a single SQLite table.

    All methods are synchronous. Failures are logged and absorbed:
    load() returns None, save() returns False, clear() does nothing.
    """

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self.ensure_db()

    @contextmanager
    def _connect(self):
        con = sqlite3.connect(self.db_path, timeout=5)
        try:
            with con:
                yield con
        finally:
            con.close()

    def ensure_db(self) -> bool:
        """Create the kv table. False (logged) when the file can't be opened."""
        try:
            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with self._connect() as con:
                con.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT
                    )
                """
                )
        except (sqlite3.Error, OSError) as e:
            logger.error("Failed to open state database %s: %s", self.db_path, e)
            return False
        return True

    def load(self, key: str) -> Optional[str]:
        try:
            with self._connect() as con:
                row = con.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to read key %r from %s: %s", key, self.db_path, e)
            return None
        return row[0] if row else None

    @_retry_locked
    def _write(self, key: str, raw: str):
        with self._connect() as con:
            con.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?,?,?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=excluded.updated_at
            """,
                (key, raw, now_utc_iso()),
            )

    @_retry_locked
    def _delete(self, key: str):
        with self._connect() as con:
            con.execute("DELETE FROM kv WHERE key=?", (key,))

    def save(self, key: str, raw: str) -> bool:
        try:
            self._write(key, raw)
        except sqlite3.Error as e:
            logger.error("Failed to write key %r to %s: %s", key, self.db_path, e)
            return False
        return True

    def clear(self, key: str):
        try:
            self._delete(key)
        except sqlite3.Error as e:
            logger.error("Failed to clear key %r in %s: %s", key, self.db_path, e)

    def load_json(self, key: str) -> Any:
        """Decoded JSON value for key, or None when absent or malformed."""
        raw = self.load(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("Malformed data under key %r, treating as absent: %s", key, e)
            return None

    def save_json(self, key: str, value: Any) -> bool:
        return self.save(key, json.dumps(value, ensure_ascii=False))

    def updated_at(self, key: str) -> Optional[str]:
        try:
            with self._connect() as con:
                row = con.execute("SELECT updated_at FROM kv WHERE key=?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to read timestamp of %r: %s", key, e)
            return None
        return row[0] if row else None
