"""Entry Store

Whole-collection read-modify-write over a single StorageSlot. There is one
writer (one user, one device), so no locking: two callers saving from stale
snapshots means the last writer wins. Callers re-read with get_all() after
every mutation; the store sends no change notifications.

Design Reference: DESIGN.md (Entry Store)
Related Classes: StorageSlot (storage.py), JournalEntry (models.py)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from .exceptions import ImportFormatError, PersistenceError
from .models import JournalEntry, to_epoch_ms
from .storage import StorageSlot

logger = logging.getLogger(__name__)


def parse_entries(text: str) -> List[JournalEntry]:
    """Deserialize a JSON array of entries.

    Raises:
        ImportFormatError: invalid JSON, not an array, an element that is not an
            entry, or a repeated id
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ImportFormatError(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ImportFormatError(
            f"Invalid data format: expected a JSON array, got {type(data).__name__}"
        )

    entries: List[JournalEntry] = []
    seen_ids = set()
    for index, item in enumerate(data):
        try:
            entry = JournalEntry.model_validate(item)
        except ValidationError as exc:
            raise ImportFormatError(f"Entry {index} is not a journal entry: {exc}") from exc
        if entry.id in seen_ids:
            raise ImportFormatError(f"Duplicate entry id: {entry.id}")
        seen_ids.add(entry.id)
        entries.append(entry)
    return entries


def backup_filename(now: Optional[datetime] = None) -> str:
    """File name used for exported backups."""
    now = now or datetime.now()
    return f"journal-backup-{now.strftime('%Y-%m-%d')}.json"


class EntryStore:
    """CRUD and bulk export/import over the persisted entry collection."""

    def __init__(self, slot: StorageSlot, clock: Optional[Callable[[], int]] = None):
        """
        Args:
            slot: persistence port holding the serialized collection
            clock: returns "now" in epoch milliseconds (injectable for tests)
        """
        self.slot = slot
        self._clock = clock or (lambda: to_epoch_ms(datetime.now()))

    def get_all(self) -> List[JournalEntry]:
        """All entries in stored order; [] when the slot is empty or unreadable."""
        try:
            blob = self.slot.read()
            if not blob:
                return []
            return parse_entries(blob)
        except (PersistenceError, ImportFormatError) as exc:
            logger.error("Error reading journal entries: %s", exc)
            return []

    def get(self, entry_id: str) -> Optional[JournalEntry]:
        for entry in self.get_all():
            if entry.id == entry_id:
                return entry
        return None

    def save(self, entry: JournalEntry) -> JournalEntry:
        """Upsert by id, keeping the position of an existing entry.

        Returns:
            the entry as stored, with updated_at refreshed

        Raises:
            PersistenceError: the stored collection is unreadable or could not be
                written; nothing is changed
        """
        stored = entry.model_copy(
            update={"updated_at": max(self._clock(), entry.created_at)}
        )
        entries = self._load_for_update()
        for index, existing in enumerate(entries):
            if existing.id == stored.id:
                entries[index] = stored
                break
        else:
            entries.append(stored)

        try:
            self._write(entries)
        except PersistenceError as exc:
            logger.error("Error saving journal entry %s: %s", stored.id, exc)
            raise
        logger.info("Saved journal entry %s", stored.id)
        return stored

    def delete(self, entry_id: str) -> bool:
        """Remove the entry with `entry_id`; absent ids are a no-op.

        Returns:
            True if an entry was removed

        Raises:
            PersistenceError: the stored collection is unreadable or could not be
                written; nothing is changed
        """
        entries = self._load_for_update()
        remaining = [entry for entry in entries if entry.id != entry_id]
        try:
            self._write(remaining)
        except PersistenceError as exc:
            logger.error("Error deleting journal entry %s: %s", entry_id, exc)
            raise
        deleted = len(remaining) != len(entries)
        if deleted:
            logger.info("Deleted journal entry %s", entry_id)
        return deleted

    def export_all(self) -> str:
        """Pretty-printed JSON snapshot of every entry."""
        return json.dumps(
            [entry.to_dict() for entry in self.get_all()], ensure_ascii=False, indent=2
        )

    def import_all(self, text: str) -> int:
        """Replace the whole collection with the entries in `text`.

        Nothing is written unless `text` parses completely.

        Returns:
            number of imported entries

        Raises:
            ImportFormatError: `text` is not a JSON array of entries
            PersistenceError: the collection could not be written
        """
        try:
            entries = parse_entries(text)
        except ImportFormatError as exc:
            logger.error("Error importing data: %s", exc)
            raise
        self._write(entries)
        logger.info("Imported %d journal entries", len(entries))
        return len(entries)

    def _write(self, entries: List[JournalEntry]) -> None:
        try:
            blob = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Failed to serialize entries: {exc}") from exc
        self.slot.write(blob)

    def _load_for_update(self) -> List[JournalEntry]:
        """Current collection for a mutation; unlike get_all() it never degrades to [].

        Raises:
            PersistenceError: the slot could not be read or holds invalid data
        """
        blob = self.slot.read()
        if not blob:
            return []
        try:
            return parse_entries(blob)
        except ImportFormatError as exc:
            logger.error("Refusing to overwrite unreadable journal data: %s", exc)
            raise PersistenceError(f"Stored journal data is invalid: {exc}") from exc
