"""Tests for sheet records."""

import pytest

from music_sheets.domain.sheets.models import (
    DEFAULT_SHEET_ID,
    MusicSheet,
    MusicSheetItem,
    default_sheet,
    new_id,
)


def test_sheet_round_trips_stored_shape():
    data = {"id": "x1", "title": "Road Trip", "coverImg": "c.jpg"}
    assert MusicSheet.from_dict(data).to_dict() == data


def test_from_dict_tolerates_missing_optional_fields():
    sheet = MusicSheet.from_dict({"id": "x1"})
    assert sheet.title == ""
    assert sheet.cover_img is None


@pytest.mark.parametrize("data", [{"title": "no id"}, {"id": 5}, "favorite", None])
def test_from_dict_rejects_malformed_records(data):
    with pytest.raises(ValueError):
        MusicSheet.from_dict(data)


def test_default_sheet():
    sheet = default_sheet()
    assert sheet.id == DEFAULT_SHEET_ID == "favorite"
    assert sheet.title == "我喜欢"
    assert sheet.cover_img is None


def test_sheet_item_to_dict():
    item = MusicSheetItem(id="x1", title="T", music_list=[{"id": "1"}])
    assert item.to_dict() == {
        "id": "x1",
        "title": "T",
        "coverImg": None,
        "musicList": [{"id": "1"}],
    }


def test_new_id_is_unique():
    ids = {new_id() for _ in range(100)}
    assert len(ids) == 100
