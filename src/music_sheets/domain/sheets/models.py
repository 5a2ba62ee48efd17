"""
Sheet domain models.

Contains the persisted sheet record and its projected view.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..library.models import MusicItem

# Storage key holding the ordered list of sheet records
SHEETS_STORAGE_KEY = "music-sheets"

DEFAULT_SHEET_ID = "favorite"
DEFAULT_SHEET_TITLE = "我喜欢"


def new_id() -> str:
    """Generate a unique sheet id."""
    return uuid.uuid4().hex


@dataclass
class MusicSheet:
    """A named collection of tracks, without its track list."""

    id: str
    title: str
    cover_img: Optional[str] = None  # Artwork of the most recently added track

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored JSON shape."""
        return {"id": self.id, "title": self.title, "coverImg": self.cover_img}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MusicSheet":
        """Build a sheet from its stored JSON shape.

        Raises:
            ValueError: If the record has no usable id
        """
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise ValueError(f"Malformed sheet record: {data!r}")
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            cover_img=data.get("coverImg"),
        )


@dataclass
class MusicSheetItem:
    """A sheet together with a snapshot of its tracks."""

    id: str
    title: str
    cover_img: Optional[str] = None
    music_list: List[MusicItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "coverImg": self.cover_img,
            "musicList": self.music_list,
        }


def default_sheet(title: str = DEFAULT_SHEET_TITLE) -> MusicSheet:
    """Create the built-in favorites sheet."""
    return MusicSheet(id=DEFAULT_SHEET_ID, title=title, cover_img=None)
