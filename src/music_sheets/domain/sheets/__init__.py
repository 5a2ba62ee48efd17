"""Sheets domain - user playlists ("sheets") with durable persistence.

This domain handles:
- The sheet cache and its cold-start bootstrap
- Sheet and track mutations (create, delete, rename, add/remove tracks)
- Change notification for observers
- Copy-safe projections of sheets with their tracks
"""

from .events import SubscriptionHub
from .manager import SheetManager
from .models import (
    DEFAULT_SHEET_ID,
    DEFAULT_SHEET_TITLE,
    SHEETS_STORAGE_KEY,
    MusicSheet,
    MusicSheetItem,
    default_sheet,
    new_id,
)

__all__ = [
    "SubscriptionHub",
    "SheetManager",
    "DEFAULT_SHEET_ID",
    "DEFAULT_SHEET_TITLE",
    "SHEETS_STORAGE_KEY",
    "MusicSheet",
    "MusicSheetItem",
    "default_sheet",
    "new_id",
]
