"""
Music Sheets CLI - manage sheets from the command line

Each invocation loads the configured store, bootstraps the sheet manager,
runs a single command and exits.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.markup import escape
from rich.table import Table

from music_sheets.core import (
    Config,
    MusicSheetsError,
    create_store,
    get_console,
    get_log_file_path,
    load_config,
    print_error,
    print_success,
    setup_loguru,
)
from music_sheets.domain.sheets import SheetManager


def build_manager(config: Config) -> SheetManager:
    """Create a sheet manager wired to the configured store."""
    return SheetManager(
        create_store(config), default_title=config.sheets.default_title
    )


def _read_tracks(source: str) -> list:
    """Read a JSON track or list of tracks from a file path or '-' for stdin."""
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)
    if isinstance(data, dict):
        return [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError("Track JSON must be an object or a list of objects")
    return data


def _print_sheets(manager: SheetManager) -> None:
    table = Table(title="Sheets")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Tracks", justify="right")
    table.add_column("Cover", style="dim")
    for sheet in manager.get_sheets():
        table.add_row(
            sheet.id,
            escape(sheet.title),
            str(len(sheet.music_list)),
            escape(sheet.cover_img or ""),
        )
    get_console().print(table)


def _print_sheet(manager: SheetManager, sheet_id: str) -> bool:
    sheet = manager.get_sheet(sheet_id)
    if sheet is None:
        print_error(f"Sheet not found: {sheet_id}")
        return False

    table = Table(title=escape(f"{sheet.title} ({sheet.id})"))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title")
    table.add_column("Artist")
    table.add_column("Platform", style="cyan")
    for index, item in enumerate(sheet.music_list):
        table.add_row(
            str(index),
            escape(str(item.get("title", ""))),
            escape(str(item.get("artist", ""))),
            str(item.get("platform", "")),
        )
    get_console().print(table)
    return True


async def run_command(args: argparse.Namespace, manager: SheetManager) -> int:
    """Bootstrap the manager and execute one parsed command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    await manager.setup()

    if args.command == "list":
        _print_sheets(manager)
        return 0

    if args.command == "show":
        return 0 if _print_sheet(manager, args.sheet_id) else 1

    if args.command == "create":
        sheet = await manager.add_sheet(args.title)
        print_success(f"Created sheet '{sheet.title}' ({sheet.id})")
        return 0

    if args.command == "delete":
        if await manager.remove_sheet(args.sheet_id):
            print_success(f"Deleted sheet {args.sheet_id}")
            return 0
        print_error(f"Cannot delete sheet: {args.sheet_id}")
        return 1

    if args.command == "rename":
        if await manager.rename_sheet(args.sheet_id, args.title):
            print_success(f"Renamed sheet to '{args.title}'")
            return 0
        print_error(f"Sheet not found: {args.sheet_id}")
        return 1

    if args.command == "add":
        if manager.get_sheet(args.sheet_id) is None:
            print_error(f"Sheet not found: {args.sheet_id}")
            return 1
        tracks = _read_tracks(args.source)
        before = len(manager.get_music_list(args.sheet_id))
        await manager.add_music(args.sheet_id, tracks)
        added = len(manager.get_music_list(args.sheet_id)) - before
        print_success(f"Added {added} of {len(tracks)} tracks")
        return 0

    if args.command == "remove":
        if manager.get_sheet(args.sheet_id) is None:
            print_error(f"Sheet not found: {args.sheet_id}")
            return 1
        before = len(manager.get_music_list(args.sheet_id))
        missing = sorted(
            {index for index in args.indices if not 0 <= index < before}
        )
        await manager.remove_music_by_index(args.sheet_id, args.indices)
        removed = before - len(manager.get_music_list(args.sheet_id))
        if missing:
            positions = ", ".join(str(index) for index in missing)
            print_error(f"No track at positions {positions}")
        print_success(f"Removed {removed} tracks")
        return 0

    print_error(f"Unknown command: {args.command}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-sheets", description="Manage music sheets (playlists)"
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to config.toml"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List all sheets")

    show = subparsers.add_parser("show", help="Show the tracks of a sheet")
    show.add_argument("sheet_id")

    create = subparsers.add_parser("create", help="Create a new sheet")
    create.add_argument("title")

    delete = subparsers.add_parser("delete", help="Delete a sheet")
    delete.add_argument("sheet_id")

    rename = subparsers.add_parser("rename", help="Rename a sheet")
    rename.add_argument("sheet_id")
    rename.add_argument("title")

    add = subparsers.add_parser("add", help="Add tracks from a JSON file")
    add.add_argument("sheet_id")
    add.add_argument("source", help="JSON file with a track or list of tracks, or '-' for stdin")

    remove = subparsers.add_parser("remove", help="Remove tracks by position")
    remove.add_argument("sheet_id")
    remove.add_argument("indices", type=int, nargs="+")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except MusicSheetsError as e:
        print_error(str(e))
        return 1

    setup_loguru(
        get_log_file_path(config),
        level=config.logging.level,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        console_output=config.logging.console_output,
    )

    try:
        return asyncio.run(run_command(args, build_manager(config)))
    except (MusicSheetsError, OSError, ValueError) as e:
        logger.exception(f"Command '{args.command}' failed")
        print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
