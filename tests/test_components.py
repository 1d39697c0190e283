"""Tests for the command/agent file writer."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from claude_stacks.errors import ComponentWriteError, StackIOError, StacksError
from claude_stacks.files.local import LocalFileService
from claude_stacks.models import RestoreOptions, StackCommand
from claude_stacks.presenter import CollectingPresenter
from claude_stacks.restore.components import FileComponentWriter, output_filename


def _cmd(name: str, content: str = "body") -> StackCommand:
    return StackCommand(name=name, file_path=f"commands/{name}.md", content=content)


def _writer(presenter: CollectingPresenter | None = None) -> FileComponentWriter:
    return FileComponentWriter(LocalFileService(), presenter or CollectingPresenter())


class TestOutputFilename:
    def test_plain(self):
        assert output_filename("review") == "review.md"

    def test_strips_local_qualifier(self):
        assert output_filename("review (local)") == "review.md"

    def test_strips_global_qualifier(self):
        assert output_filename("review (global)") == "review.md"

    def test_only_trailing_qualifier_stripped(self):
        assert output_filename("a (local) b") == "a (local) b.md"

    @pytest.mark.parametrize("name", ["", "..", "../evil", "a/b", "a\\b", " (local)"])
    def test_rejects_unsafe_names(self, name: str):
        with pytest.raises(StacksError, match="Invalid component name"):
            output_filename(name)


class TestFileComponentWriter:
    async def test_writes_content_verbatim(self, tmp_path: Path):
        target = tmp_path / "commands"
        report = await _writer().write([_cmd("a", "# A\r\n")], target, RestoreOptions())

        assert report.written == ["a.md"]
        assert (target / "a.md").read_bytes() == b"# A\r\n"

    async def test_existing_file_skipped_without_overwrite(self, tmp_path: Path):
        target = tmp_path / "commands"
        target.mkdir()
        (target / "a.md").write_text("mine")
        presenter = CollectingPresenter()

        report = await _writer(presenter).write([_cmd("a", "theirs")], target, RestoreOptions())

        assert report.skipped == ["a"]
        assert report.written == []
        assert (target / "a.md").read_text() == "mine"
        assert any("Skipped command" in m for m in presenter.messages("warning"))

    async def test_overwrite_replaces_existing(self, tmp_path: Path):
        target = tmp_path / "commands"
        target.mkdir()
        (target / "a.md").write_text("a much longer original body")

        await _writer().write([_cmd("a", "new")], target, RestoreOptions(overwrite=True))
        assert (target / "a.md").read_text() == "new"

    async def test_target_dir_failure_is_fatal(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(StackIOError):
            await _writer().write([_cmd("a")], blocker / "commands", RestoreOptions())

    async def test_item_failure_does_not_stop_siblings(self, tmp_path: Path):
        target = tmp_path / "commands"
        items = [_cmd("ok1"), _cmd("../escape"), _cmd("ok2")]

        with pytest.raises(ComponentWriteError) as exc_info:
            await _writer().write(items, target, RestoreOptions())

        assert (target / "ok1.md").exists()
        assert (target / "ok2.md").exists()
        assert [name for name, _ in exc_info.value.errors] == ["../escape"]

    async def test_collects_every_failure(self, tmp_path: Path):
        files = LocalFileService()
        real_write = files.write_text

        async def flaky(path: Path, content: str) -> None:
            if path.name.startswith("bad"):
                raise StackIOError(f"Failed to write {path}")
            await real_write(path, content)

        with patch.object(files, "write_text", AsyncMock(side_effect=flaky)):
            writer = FileComponentWriter(files, CollectingPresenter())
            with pytest.raises(ComponentWriteError) as exc_info:
                await writer.write(
                    [_cmd("bad1"), _cmd("good"), _cmd("bad2")], tmp_path, RestoreOptions()
                )

        assert sorted(name for name, _ in exc_info.value.errors) == ["bad1", "bad2"]
        assert (tmp_path / "good.md").exists()

    async def test_empty_list_still_creates_dir(self, tmp_path: Path):
        target = tmp_path / "agents"
        report = await _writer().write([], target, RestoreOptions())
        assert target.is_dir()
        assert report.written == [] and report.skipped == []

    async def test_duplicate_file_name_keeps_first(self, tmp_path: Path):
        presenter = CollectingPresenter()
        items = [_cmd("a", "first"), _cmd("a (local)", "second")]

        report = await _writer(presenter).write(items, tmp_path, RestoreOptions(overwrite=True))

        assert (tmp_path / "a.md").read_text() == "first"
        assert report.written == ["a.md"]
        assert report.skipped == ["a (local)"]
        warnings = presenter.messages("warning")
        assert warnings == ["Duplicate component 'a.md' in stack; keeping the first definition"]
        assert not any("already exists" in m for m in warnings)

    async def test_invalid_name_still_fails_next_to_duplicates(self, tmp_path: Path):
        items = [_cmd("a"), _cmd("a"), _cmd("../evil")]

        with pytest.raises(ComponentWriteError) as exc_info:
            await _writer().write(items, tmp_path, RestoreOptions())

        assert [name for name, _ in exc_info.value.errors] == ["../evil"]
        assert (tmp_path / "a.md").exists()
