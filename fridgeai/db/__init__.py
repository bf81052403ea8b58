"""SQLite-backed local persistence for scan history."""

from .history import HistoryStore
from .kv import KeyValueStore
from .schema import ensure_schema

__all__ = [
    "HistoryStore",
    "KeyValueStore",
    "ensure_schema",
]
