"""Music Sheets - persisted playlist state with change notifications."""

from music_sheets.core.store import MemoryStore, SqliteStore
from music_sheets.domain.sheets import (
    DEFAULT_SHEET_ID,
    MusicSheet,
    MusicSheetItem,
    SheetManager,
    SubscriptionHub,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SHEET_ID",
    "MemoryStore",
    "MusicSheet",
    "MusicSheetItem",
    "SheetManager",
    "SqliteStore",
    "SubscriptionHub",
]
