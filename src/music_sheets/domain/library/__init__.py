"""Music library domain - track records and identity matching."""

from .models import MusicItem, get_artwork
from .matching import is_same_music_item, find_music_index

__all__ = [
    "MusicItem",
    "get_artwork",
    "is_same_music_item",
    "find_music_index",
]
