"""
Track identity matching.

Two records denote the same track when they come from the same platform
and carry the same platform id. Titles, artwork and other metadata may
differ between copies of the same track and are ignored.
"""

from typing import Callable, Optional, Sequence

from .models import MusicItem

MusicEquality = Callable[[MusicItem, MusicItem], bool]


def is_same_music_item(a: Optional[MusicItem], b: Optional[MusicItem]) -> bool:
    """Check whether two track records refer to the same underlying track.

    Examples:
        >>> is_same_music_item({"platform": "local", "id": "1"}, {"platform": "local", "id": "1", "title": "x"})
        True
        >>> is_same_music_item({"platform": "local", "id": "1"}, {"platform": "bili", "id": "1"})
        False
    """
    if not a or not b:
        return False
    return a.get("id") == b.get("id") and a.get("platform") == b.get("platform")


def find_music_index(
    music_list: Sequence[MusicItem],
    music_item: MusicItem,
    same: MusicEquality = is_same_music_item,
) -> int:
    """Return the position of the first track equal to music_item, or -1."""
    for index, candidate in enumerate(music_list):
        if same(candidate, music_item):
            return index
    return -1
