# src/smart_calendar/tasks/task_storage.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from pathlib import Path

from .task_models import Task, tasks_from_payload, tasks_to_payload

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "ceo-smart-tasks"


def encode_tasks(tasks: list[Task]) -> str:
    return json.dumps(tasks_to_payload(tasks), ensure_ascii=False)


def decode_tasks(blob: str | None, *, source: str = "storage") -> list[Task]:
    """
    Decode a persisted collection. Never raises.

    Absent blob -> [] (first run). Corrupt blob or wrong shape -> [] with a warning.
    """
    if blob is None or blob == "":
        return []
    try:
        payload = json.loads(blob)
    except (TypeError, ValueError):
        logger.warning("Persisted task collection in %s is not valid JSON; starting empty.", source)
        return []
    if not isinstance(payload, list):
        logger.warning(
            "Persisted task collection in %s is a %s, not an array; starting empty.",
            source,
            type(payload).__name__,
        )
        return []
    return tasks_from_payload(payload)


class SqliteTaskStorage:
    """
    Local key-value storage backed by SQLite.

    One table `kv(key, value)`; the whole collection lives under a single
    namespaced key as a JSON array. Each call opens its own connection.
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3", *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._key = key
        self._ensure_schema()
        logger.info("SqliteTaskStorage ready db=%s key=%s", self._db_path, self._key)

    @property
    def key(self) -> str:
        return self._key

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def get_raw(self) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,)).fetchone()
            return None if row is None else row[0]
        finally:
            conn.close()

    def set_raw(self, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO kv(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (self._key, value),
            )
            conn.commit()
        finally:
            conn.close()

    # ---- TaskStorage ----

    def load(self) -> list[Task]:
        try:
            blob = self.get_raw()
        except sqlite3.Error:
            logger.exception("Failed to read task collection from %s; starting empty.", self._db_path)
            return []
        tasks = decode_tasks(blob, source=f"{self._db_path}:{self._key}")
        logger.debug("Loaded %d tasks from %s", len(tasks), self._db_path)
        return tasks

    def save(self, tasks: list[Task]) -> bool:
        try:
            self.set_raw(encode_tasks(tasks))
        except sqlite3.Error:
            logger.exception("Failed to write task collection to %s", self._db_path)
            return False
        return True


class InMemoryTaskStorage:
    """
    Storage adapter holding the serialized blob in memory.

    Keeps the same encode/decode path as the SQLite adapter, so tests can
    seed it with a corrupt blob.
    """

    def __init__(self, blob: str | None = None) -> None:
        self.blob = blob
        self.writes = 0

    def load(self) -> list[Task]:
        return decode_tasks(self.blob, source="memory")

    def save(self, tasks: list[Task]) -> bool:
        self.blob = encode_tasks(tasks)
        self.writes += 1
        return True
