"""Tests for the local file service."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from claude_stacks.errors import StackIOError
from claude_stacks.files.local import LocalFileService


class TestLocalFileService:
    async def test_ensure_dir_creates_parents(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "c"
        await LocalFileService().ensure_dir(target)
        assert target.is_dir()

    async def test_ensure_dir_over_file_raises(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(StackIOError, match="Failed to create directory"):
            await LocalFileService().ensure_dir(blocker / "sub")

    async def test_write_text_is_verbatim(self, tmp_path: Path):
        target = tmp_path / "cmd.md"
        content = "a\r\nb\n\tc"
        await LocalFileService().write_text(target, content)
        assert target.read_bytes() == content.encode("utf-8")

    async def test_read_json_raises_decode_error(self, tmp_path: Path):
        target = tmp_path / "bad.json"
        target.write_text("{oops")
        with pytest.raises(json.JSONDecodeError):
            await LocalFileService().read_json(target)

    async def test_read_json_invalid_utf8_raises_decode_error(self, tmp_path: Path):
        target = tmp_path / "bad.json"
        target.write_bytes(b'{"k": "\xff"}')
        with pytest.raises(json.JSONDecodeError, match="Invalid UTF-8"):
            await LocalFileService().read_json(target)

    async def test_read_text_keeps_line_endings(self, tmp_path: Path):
        target = tmp_path / "doc.md"
        target.write_bytes(b"a\r\nb")
        assert await LocalFileService().read_text(target) == "a\r\nb"

    async def test_read_text_invalid_utf8_raises_io_error(self, tmp_path: Path):
        target = tmp_path / "doc.md"
        target.write_bytes(b"\xff")
        with pytest.raises(StackIOError, match="not valid UTF-8"):
            await LocalFileService().read_text(target)

    async def test_remove_missing_is_noop(self, tmp_path: Path):
        await LocalFileService().remove(tmp_path / "missing.json")


class TestAtomicWrite:
    async def test_writes_json(self, tmp_path: Path):
        target = tmp_path / "reg.json"
        await LocalFileService().write_json_atomic(target, {"projects": {}})
        assert json.loads(target.read_text()) == {"projects": {}}
        assert list(tmp_path.iterdir()) == [target]

    async def test_failed_rename_keeps_original_and_cleans_temp(self, tmp_path: Path):
        target = tmp_path / "reg.json"
        target.write_text('{"projects": {"keep": {}}}')
        before = target.read_bytes()

        with (
            patch("claude_stacks.files.local.os.replace", side_effect=OSError("disk full")),
            pytest.raises(StackIOError, match="disk full"),
        ):
            await LocalFileService().write_json_atomic(target, {"projects": {}})

        assert target.read_bytes() == before
        assert list(tmp_path.iterdir()) == [target]
