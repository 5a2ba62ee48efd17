"""
Sheet cache and mutation operations.

SheetManager owns the in-memory copy of every sheet record and track list,
persists each change to a durable store and notifies subscribers once the
change is committed.

The sheet list and each track list are separate store keys written one
after the other, so a crash between writes can leave a sheet without a
stored track list. setup() treats that as an empty list.

Mutations are not serialized. Callers must await one mutation before
issuing another against the same sheet, otherwise a later write can
persist a stale track list.
"""

import copy
import dataclasses
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from loguru import logger

from music_sheets.core.store import DurableStore

from ..library.matching import MusicEquality, find_music_index, is_same_music_item
from ..library.models import MusicItem, get_artwork
from .events import Listener, SubscriptionHub, Unsubscribe
from .models import (
    DEFAULT_SHEET_ID,
    DEFAULT_SHEET_TITLE,
    SHEETS_STORAGE_KEY,
    MusicSheet,
    MusicSheetItem,
    default_sheet,
    new_id,
)

PATCHABLE_FIELDS = {"title", "cover_img"}


def _as_list(value: Union[Any, Iterable[Any]]) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class SheetManager:
    """In-memory sheet cache backed by a durable store.

    Args:
        store: Async key-value store for sheet records and track lists
        hub: Subscription hub to notify; a private one is created if omitted
        id_factory: Generates ids for new sheets
        same: Equality test deciding whether two tracks are the same
        default_title: Title given to the favorites sheet on first run
    """

    def __init__(
        self,
        store: DurableStore,
        hub: Optional[SubscriptionHub] = None,
        id_factory: Callable[[], str] = new_id,
        same: MusicEquality = is_same_music_item,
        default_title: str = DEFAULT_SHEET_TITLE,
    ) -> None:
        self.store = store
        self.hub = hub if hub is not None else SubscriptionHub()
        self._new_id = id_factory
        self._same = same
        self._default_title = default_title

        self._sheets: List[MusicSheet] = []
        self._music_map: Dict[str, List[MusicItem]] = {}

    # ------------------------------------------------------------------
    # Lifecycle

    async def setup(self) -> None:
        """Load sheets from the store, seeding the favorites sheet on first run.

        Any failure other than a missing sheet list is logged and leaves the
        cache as it was. Subscribers are notified once in every case.
        """
        try:
            stored_sheets = await self.store.get(SHEETS_STORAGE_KEY)
            if not isinstance(stored_sheets, list):
                await self._seed_default_sheet()
            else:
                sheets = [MusicSheet.from_dict(data) for data in stored_sheets]
                missing_default = all(sheet.id != DEFAULT_SHEET_ID for sheet in sheets)
                if missing_default:
                    logger.warning("Stored sheets lack the default sheet, restoring it")
                    sheets.insert(0, default_sheet(self._default_title))

                music_map: Dict[str, List[MusicItem]] = {}
                for sheet in sheets:
                    music_list = await self.store.get(sheet.id)
                    if not isinstance(music_list, list):
                        logger.warning(
                            f"No track list stored for sheet '{sheet.id}', using empty list"
                        )
                        music_list = []
                    music_map[sheet.id] = music_list

                if missing_default:
                    await self.store.set(
                        SHEETS_STORAGE_KEY, [sheet.to_dict() for sheet in sheets]
                    )
                    await self.store.set(DEFAULT_SHEET_ID, music_map[DEFAULT_SHEET_ID])

                self._sheets = sheets
                self._music_map = music_map
                logger.info(f"Loaded {len(sheets)} sheets from store")
        except Exception:
            logger.exception("Failed to load sheets; keeping current state")

        self.hub.notify()

    async def _seed_default_sheet(self) -> None:
        sheet = default_sheet(self._default_title)
        logger.info("No stored sheets found, creating default sheet")
        await self.store.set(SHEETS_STORAGE_KEY, [sheet.to_dict()])
        await self.store.set(sheet.id, [])
        self._sheets = [sheet]
        self._music_map = {sheet.id: []}

    # ------------------------------------------------------------------
    # Subscriptions

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a change listener; returns a callable that removes it."""
        return self.hub.subscribe(listener)

    # ------------------------------------------------------------------
    # Mutations

    def _find_sheet_index(self, sheet_id: str) -> int:
        for index, sheet in enumerate(self._sheets):
            if sheet.id == sheet_id:
                return index
        return -1

    async def update_and_save_sheet(
        self,
        sheet_id: str,
        basic: Optional[Dict[str, Any]] = None,
        music_list: Optional[List[MusicItem]] = None,
    ) -> bool:
        """
        Patch a sheet's record and/or replace its track list, then persist.

        Args:
            sheet_id: Sheet to update
            basic: Record fields to override (`title`, `cover_img`; the stored
                name `coverImg` is accepted too); the id is never changed
            music_list: Full replacement track list

        Returns:
            True if the sheet exists and was updated, False otherwise
        """
        index = self._find_sheet_index(sheet_id)
        if index == -1:
            logger.debug(f"Ignoring update for unknown sheet '{sheet_id}'")
            return False

        if basic:
            patch = dict(basic)
            patch.pop("id", None)
            if "coverImg" in patch:
                patch.setdefault("cover_img", patch.pop("coverImg"))
            ignored = set(patch) - PATCHABLE_FIELDS
            if ignored:
                logger.warning(
                    f"Ignoring unknown fields {sorted(ignored)} in update for sheet '{sheet_id}'"
                )
            current = self._sheets[index]
            updated = MusicSheet(
                id=sheet_id,
                title=patch.get("title", current.title),
                cover_img=patch.get("cover_img", current.cover_img),
            )
            new_sheets = list(self._sheets)
            new_sheets[index] = updated
            await self.store.set(
                SHEETS_STORAGE_KEY, [sheet.to_dict() for sheet in new_sheets]
            )
            self._sheets = new_sheets

        if music_list is not None:
            music_list = copy.deepcopy(music_list)
            await self.store.set(sheet_id, music_list)
            self._music_map[sheet_id] = music_list

        self.hub.notify()
        return True

    async def add_sheet(self, title: str) -> MusicSheet:
        """
        Create a new, empty sheet.

        Args:
            title: Display title

        Returns:
            A copy of the created sheet record
        """
        sheet = MusicSheet(id=self._new_id(), title=title, cover_img=None)
        new_sheets = self._sheets + [sheet]

        await self.store.set(
            SHEETS_STORAGE_KEY, [item.to_dict() for item in new_sheets]
        )
        await self.store.set(sheet.id, [])

        self._sheets = new_sheets
        self._music_map[sheet.id] = []
        logger.debug(f"Created sheet '{title}' ({sheet.id})")
        self.hub.notify()
        return dataclasses.replace(sheet)

    async def remove_sheet(self, sheet_id: str) -> bool:
        """
        Delete a sheet and its track list.

        The favorites sheet cannot be removed.

        Returns:
            True if a sheet was removed, False if protected or not found
        """
        if sheet_id == DEFAULT_SHEET_ID:
            logger.debug("Refusing to remove the default sheet")
            return False
        if self._find_sheet_index(sheet_id) == -1:
            return False

        new_sheets = [sheet for sheet in self._sheets if sheet.id != sheet_id]
        await self.store.delete(sheet_id)
        await self.store.set(
            SHEETS_STORAGE_KEY, [sheet.to_dict() for sheet in new_sheets]
        )

        self._sheets = new_sheets
        self._music_map.pop(sheet_id, None)
        logger.debug(f"Removed sheet {sheet_id}")
        self.hub.notify()
        return True

    async def rename_sheet(self, sheet_id: str, title: str) -> bool:
        """Change a sheet's title. Returns False if the sheet does not exist."""
        return await self.update_and_save_sheet(sheet_id, basic={"title": title})

    async def add_music(
        self, sheet_id: str, music_items: Union[MusicItem, List[MusicItem]]
    ) -> None:
        """
        Append tracks to a sheet, skipping ones already in it.

        Incoming tracks are only compared against the sheet's existing
        tracks, not against each other.

        Args:
            sheet_id: Target sheet
            music_items: One track or a list of tracks
        """
        items = _as_list(music_items)
        music_list = self._music_map.get(sheet_id, [])
        new_items = [
            item
            for item in items
            if find_music_index(music_list, item, self._same) == -1
        ]
        new_music_list = music_list + new_items
        logger.debug(
            f"Adding {len(new_items)} of {len(items)} tracks to sheet {sheet_id}"
        )

        await self.update_and_save_sheet(
            sheet_id,
            basic={"cover_img": get_artwork(new_music_list[-1] if new_music_list else None)},
            music_list=new_music_list,
        )

    async def remove_music_by_index(
        self, sheet_id: str, indices: Union[int, List[int]]
    ) -> None:
        """
        Remove tracks from a sheet by position.

        Args:
            sheet_id: Target sheet
            indices: One position or a list of positions; out-of-range
                positions are ignored
        """
        drop = set(_as_list(indices))
        music_list = self._music_map.get(sheet_id, [])
        new_music_list = [
            item for index, item in enumerate(music_list) if index not in drop
        ]

        await self.update_and_save_sheet(
            sheet_id,
            basic={"cover_img": get_artwork(new_music_list[-1] if new_music_list else None)},
            music_list=new_music_list,
        )

    async def remove_music(
        self, sheet_id: str, music_items: Union[MusicItem, List[MusicItem]]
    ) -> None:
        """Remove tracks from a sheet by identity. Tracks not in the sheet are skipped."""
        music_list = self._music_map.get(sheet_id, [])
        indices = [
            find_music_index(music_list, item, self._same)
            for item in _as_list(music_items)
        ]
        await self.remove_music_by_index(
            sheet_id, [index for index in indices if index != -1]
        )

    # ------------------------------------------------------------------
    # Projection

    def _project(self, sheet: MusicSheet) -> MusicSheetItem:
        return MusicSheetItem(
            id=sheet.id,
            title=sheet.title,
            cover_img=sheet.cover_img,
            music_list=copy.deepcopy(self._music_map.get(sheet.id, [])),
        )

    def get_sheets(self) -> List[MusicSheetItem]:
        """Snapshot of every sheet with its tracks, safe for callers to mutate."""
        return [self._project(sheet) for sheet in self._sheets]

    def get_sheet(self, sheet_id: str) -> Optional[MusicSheetItem]:
        """Snapshot of a single sheet, or None if it does not exist."""
        index = self._find_sheet_index(sheet_id)
        if index == -1:
            return None
        return self._project(self._sheets[index])

    def get_user_sheets(self) -> List[MusicSheetItem]:
        """Snapshot of every sheet except the favorites sheet."""
        return [
            self._project(sheet)
            for sheet in self._sheets
            if sheet.id != DEFAULT_SHEET_ID
        ]

    def get_music_list(self, sheet_id: str) -> List[MusicItem]:
        """Copy of a sheet's tracks (empty for unknown sheets)."""
        return copy.deepcopy(self._music_map.get(sheet_id, []))

    def is_in_sheet(self, sheet_id: str, music_item: MusicItem) -> bool:
        music_list = self._music_map.get(sheet_id, [])
        return find_music_index(music_list, music_item, self._same) != -1
