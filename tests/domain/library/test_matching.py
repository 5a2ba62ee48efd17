"""Tests for track identity matching."""

from music_sheets.domain.library import find_music_index, get_artwork, is_same_music_item


def test_same_platform_and_id_match_despite_other_fields():
    a = {"platform": "local", "id": "1", "title": "Song", "artwork": "a.jpg"}
    b = {"platform": "local", "id": "1", "title": "Song (Remastered)"}
    assert is_same_music_item(a, b)
    assert is_same_music_item(b, a)


def test_different_platform_or_id_do_not_match():
    base = {"platform": "local", "id": "1"}
    assert not is_same_music_item(base, {"platform": "bilibili", "id": "1"})
    assert not is_same_music_item(base, {"platform": "local", "id": "2"})


def test_missing_items_never_match():
    assert not is_same_music_item(None, {"platform": "local", "id": "1"})
    assert not is_same_music_item({}, {})


def test_find_music_index_returns_first_match():
    music_list = [
        {"platform": "local", "id": "1"},
        {"platform": "local", "id": "2"},
        {"platform": "local", "id": "2", "title": "dup"},
    ]
    assert find_music_index(music_list, {"platform": "local", "id": "2"}) == 1
    assert find_music_index(music_list, {"platform": "local", "id": "9"}) == -1


def test_find_music_index_custom_equality():
    music_list = [{"title": "A"}, {"title": "B"}]
    by_title = lambda x, y: x["title"] == y["title"]
    assert find_music_index(music_list, {"title": "B"}, by_title) == 1


def test_get_artwork():
    assert get_artwork({"artwork": "cover.png"}) == "cover.png"
    assert get_artwork({"title": "no art"}) is None
    assert get_artwork(None) is None
