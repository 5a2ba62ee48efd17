"""
Music library domain models.

Tracks arrive from plugins as plain JSON objects. Only a few fields are
read here; everything else is carried through to storage untouched.
"""

from typing import Any, Dict, Optional

# A playable item as supplied by a source plugin, e.g.
# {"platform": "local", "id": "42", "title": "...", "artwork": "https://..."}
MusicItem = Dict[str, Any]


def get_artwork(music_item: Optional[MusicItem]) -> Optional[str]:
    """Return the artwork reference of a track, or None."""
    if not music_item:
        return None
    return music_item.get("artwork")
