#!/usr/bin/env python3
"""
Export a week to a text file, or merge a text file into the board.

Usage:
    python -m scripts.sync export [--week "01/01/24 - 05/01/24"] [--out FILE]
    python -m scripts.sync import FILE

The import reads the whole file, parses it once and saves the merged board
only when something changed.
"""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

from taskboard.database import close_db, init_db
from taskboard.logging_config import setup_logging, get_logger
from taskboard.services import board
from taskboard.services.exchange import export_week, run_import
from taskboard.services.export import export_filename
from taskboard.storage import SqlTaskStore, TaskStore

logger = get_logger(__name__)


async def export_command(store: TaskStore, week: str | None, out: Path | None) -> int:
    week = week or board.week_label(date.today())
    tasks = await store.load()
    text = export_week(tasks, week)

    path = out or Path(export_filename(week))
    path.write_text(text, encoding="utf-8")
    print(f"Exported week '{week}' to {path}")
    return 0


async def import_command(store: TaskStore, path: Path) -> int:
    if not path.is_file():
        print(f"File not found: {path}")
        return 1

    text = path.read_text(encoding="utf-8-sig", errors="replace")
    tasks = await store.load()
    summary, result = run_import(tasks, text)

    if result is not None and result.changed:
        if not await store.save(result.tasks):
            print("Warning: the merged board could not be saved")

    print(summary.message)
    return 0


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sync the task board through plain-text files")
    sub = parser.add_subparsers(dest="command", required=True)

    export_parser = sub.add_parser("export", help="Write one week to a text file")
    export_parser.add_argument("--week", type=str, default=None, help="Week label (default: current week)")
    export_parser.add_argument("--out", type=Path, default=None, help="Output file")

    import_parser = sub.add_parser("import", help="Merge a text file into the board")
    import_parser.add_argument("file", type=Path, help="File produced by 'export'")

    args = parser.parse_args(argv)

    setup_logging()
    await init_db()
    store = SqlTaskStore()

    try:
        if args.command == "export":
            return await export_command(store, args.week, args.out)
        return await import_command(store, args.file)
    finally:
        await close_db()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
