"""Write CLAUDE.md documentation files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from claude_stacks.files.base import FileServicePort
from claude_stacks.models import ClaudeMdFile, RestoreOptions
from claude_stacks.presenter import PresenterPort


@dataclass
class ClaudeMdWriter:
    files: FileServicePort
    presenter: PresenterPort

    async def apply(self, doc: ClaudeMdFile, target: Path, options: RestoreOptions) -> bool:
        """Write *doc* to *target*. Returns False when an existing file was kept."""
        await self.files.ensure_dir(target.parent)
        if not options.overwrite and await self.files.exists(target):
            self.presenter.warning(f"Skipped CLAUDE.md: already exists at {target}")
            return False

        await self.files.write_text(target, doc.content)
        self.presenter.success(f"Restored CLAUDE.md to {target}")
        return True
