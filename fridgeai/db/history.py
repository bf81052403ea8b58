"""Scan history kept as one JSON array under a single key-value slot."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
import uuid

from ..models import HistoryEntry, ScanResult
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "scanHistory"


class HistoryStore:
    """Ordered scan history, newest first.

    The whole list is rewritten on every append. There is no eviction, size
    cap or deduplication, so the stored blob grows without bound. There is
    no locking either: two overlapping appends from separate processes both
    rewrite the full list and the last write wins.
    """

    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_KEY) -> None:
        self._kv = kv
        self._key = key
        self._entries: list[HistoryEntry] = []
        self._loaded = False

    def load(self) -> list[HistoryEntry]:
        """Read the persisted list, treating a missing or corrupt blob as empty."""
        self._entries = self._read()
        self._loaded = True
        return list(self._entries)

    def _ensure_loaded(self) -> None:
        """Load the persisted list on first use so a flush never drops it."""
        if not self._loaded:
            self.load()

    def _read(self) -> list[HistoryEntry]:
        try:
            blob = self._kv.get(self._key)
        except (sqlite3.Error, OSError):
            logger.exception("could not read scan history; starting empty")
            return []

        if not blob:
            return []

        try:
            items = json.loads(blob)
        except (ValueError, RecursionError):
            logger.warning("stored scan history is not valid JSON; starting empty")
            return []

        if not isinstance(items, list):
            logger.warning("stored scan history is not a list; starting empty")
            return []

        entries: list[HistoryEntry] = []
        for item in items:
            try:
                entries.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("skipping malformed history entry: %s", e)
        return entries

    def append(self, result: ScanResult) -> HistoryEntry:
        """Record a scan result as the newest entry and persist the list."""
        self._ensure_loaded()
        entry_id = uuid.uuid4().hex
        while self.get(entry_id) is not None:
            entry_id = uuid.uuid4().hex
        entry = HistoryEntry(
            id=entry_id,
            timestamp=int(time.time() * 1000),
            found_ingredients=tuple(result.found_ingredients),
            recipes=tuple(result.recipes),
        )
        self._entries.insert(0, entry)
        self.flush()
        return entry

    def list(self) -> list[HistoryEntry]:
        self._ensure_loaded()
        return list(self._entries)

    def get(self, entry_id: str) -> HistoryEntry | None:
        self._ensure_loaded()
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._entries)

    def flush(self) -> None:
        """Overwrite the persisted blob with the full list (best effort)."""
        self._ensure_loaded()
        blob = json.dumps(
            [e.to_dict() for e in self._entries], ensure_ascii=False
        )
        try:
            self._kv.set(self._key, blob)
        except (sqlite3.Error, OSError):
            logger.exception("could not persist scan history")
