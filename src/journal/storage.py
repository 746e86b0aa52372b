"""Persistence port for the journal slot

The whole entry collection lives in one named slot holding a serialized JSON
array. A slot only knows how to read and write that blob; EntryStore owns the
entry semantics on top of it.

Design Reference: DESIGN.md (Persistence port)
Related Classes: EntryStore (store.py)
"""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from src.mindful_journal.config import StorageConfig

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_SLOT_KEY = "journal_entries"


class StorageSlot(ABC):
    """A single durable key/value slot holding one serialized blob."""

    max_bytes: Optional[int] = None

    @abstractmethod
    def read(self) -> Optional[str]:
        """Return the stored blob, or None when the slot is empty.

        Raises:
            PersistenceError: the underlying storage could not be read
        """

    @abstractmethod
    def write(self, blob: str) -> None:
        """Replace the stored blob atomically.

        Raises:
            PersistenceError: the write failed; the previous blob is kept
        """

    def _check_quota(self, blob: str) -> None:
        if self.max_bytes is not None:
            size = len(blob.encode("utf-8"))
            if size > self.max_bytes:
                raise PersistenceError(
                    f"Storage quota exceeded: {size} bytes > {self.max_bytes} bytes"
                )


class MemorySlot(StorageSlot):
    """In-process slot, used by tests and as a throwaway backend."""

    def __init__(
        self,
        initial: Optional[str] = None,
        max_bytes: Optional[int] = None,
        fail_writes: bool = False,
    ):
        self.blob = initial
        self.max_bytes = max_bytes
        self.fail_writes = fail_writes
        self.writes = 0

    def read(self) -> Optional[str]:
        return self.blob

    def write(self, blob: str) -> None:
        if self.fail_writes:
            raise PersistenceError("Simulated write failure")
        self._check_quota(blob)
        self.blob = blob
        self.writes += 1


class FileSlot(StorageSlot):
    """Slot backed by a JSON file, replaced via a temp file + os.replace."""

    def __init__(self, path: Path | str, max_bytes: Optional[int] = None):
        self.path = Path(path)
        self.max_bytes = max_bytes

    def read(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"Failed to read {self.path}: {exc}") from exc

    def write(self, blob: str) -> None:
        self._check_quota(blob)
        tmp_path: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {self.path}: {exc}") from exc


class SqliteSlot(StorageSlot):
    """Slot stored as one row of a SQLite key/value table."""

    def __init__(
        self,
        db_path: Optional[Path | str] = None,
        key: str = DEFAULT_SLOT_KEY,
        max_bytes: Optional[int] = None,
    ):
        root = Path(__file__).resolve().parents[2]
        default_path = root / "data" / "mindful_journal.db"
        env_path = os.getenv("MINDFUL_JOURNAL_DB_PATH")
        if db_path:
            self.db_path = Path(db_path)
        elif env_path:
            self.db_path = Path(env_path)
        else:
            self.db_path = default_path
        self.key = key
        self.max_bytes = max_bytes
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._initialize()
        except (OSError, sqlite3.Error) as exc:
            raise PersistenceError(f"Failed to open {self.db_path}: {exc}") from exc

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS journal_slots (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def read(self) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM journal_slots WHERE key = ?", (self.key,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to read slot {self.key!r}: {exc}") from exc
        return row["value"] if row else None

    def write(self, blob: str) -> None:
        self._check_quota(blob)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO journal_slots (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (self.key, blob, self._now()),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to write slot {self.key!r}: {exc}") from exc


def create_slot(config: Optional[StorageConfig] = None) -> StorageSlot:
    """Build the slot backend named by `config.backend`.

    Raises:
        ValueError: unknown backend name
    """
    config = config or StorageConfig()
    backend = config.backend.lower()
    logger.debug("Creating %s storage slot at %s", backend, config.path)
    if backend == "sqlite":
        return SqliteSlot(config.path, key=config.key, max_bytes=config.max_bytes)
    if backend == "file":
        return FileSlot(config.path, max_bytes=config.max_bytes)
    if backend == "memory":
        return MemorySlot(max_bytes=config.max_bytes)
    raise ValueError(f"Unknown storage backend: {config.backend}")
