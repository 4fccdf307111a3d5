"""
Tests for the command-line sync helpers.
"""

import pytest

from scripts.sync import export_command, import_command

from tests.conftest import MemoryTaskStore
from tests.factories import WEEK, make_task


@pytest.mark.asyncio
class TestSyncCommands:

    async def test_export_then_import_into_empty_board(self, tmp_path, capsys):
        source = MemoryTaskStore([make_task(title="Banner"), make_task(title="Logo")])
        out = tmp_path / "semana.txt"

        assert await export_command(source, WEEK, out) == 0
        assert out.read_text(encoding="utf-8").startswith(f"SEMANA: {WEEK}")

        target = MemoryTaskStore()
        assert await import_command(target, out) == 0

        assert sorted(t.title for t in target.tasks) == ["Banner", "Logo"]
        assert "2 tareas nuevas" in capsys.readouterr().out

    async def test_import_unchanged_board_does_not_save(self, tmp_path):
        store = MemoryTaskStore([make_task()])
        out = tmp_path / "semana.txt"
        await export_command(store, WEEK, out)

        await import_command(store, out)

        assert store.saves == 0

    async def test_missing_file(self, tmp_path, capsys):
        store = MemoryTaskStore()

        assert await import_command(store, tmp_path / "nope.txt") == 1
        assert "File not found" in capsys.readouterr().out
        assert store.saves == 0
