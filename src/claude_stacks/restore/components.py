"""Write command and agent Markdown files into a scope directory."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from claude_stacks.errors import ComponentWriteError, StacksError
from claude_stacks.files.base import FileServicePort
from claude_stacks.models import RestoreOptions, StackComponent, WriteReport
from claude_stacks.presenter import PresenterPort

logger = logging.getLogger(__name__)

_SCOPE_QUALIFIER = re.compile(r" \((?:local|global)\)$")


def output_filename(name: str) -> str:
    """``"review (local)"`` -> ``"review.md"``.

    Raises:
        StacksError: If the name would escape the target directory.
    """
    stem = _SCOPE_QUALIFIER.sub("", name)
    if not stem or stem in (".", "..") or "/" in stem or "\\" in stem:
        raise StacksError(f"Invalid component name '{name}': must be a plain file name.")
    return f"{stem}.md"


async def _skip() -> None:
    return None


@dataclass
class FileComponentWriter:
    """Write component files; one item's failure never stops its siblings."""

    files: FileServicePort
    presenter: PresenterPort

    async def write(
        self,
        items: list[StackComponent],
        target_dir: Path,
        options: RestoreOptions,
        *,
        label: str = "component",
    ) -> WriteReport:
        """Write every item into *target_dir*.

        Returns:
            WriteReport with written and skipped file names.

        Raises:
            StackIOError: If *target_dir* cannot be created (nothing attempted).
            ComponentWriteError: If any item failed, after all were attempted.
        """
        await self.files.ensure_dir(target_dir)

        duplicates = self._duplicate_indexes(items, label)
        outcomes = await asyncio.gather(
            *(
                _skip() if index in duplicates else self._write_one(item, target_dir, options, label)
                for index, item in enumerate(items)
            ),
            return_exceptions=True,
        )

        written: list[str] = []
        skipped: list[str] = []
        errors: list[tuple[str, Exception]] = []
        for item, outcome in zip(items, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                self.presenter.error(f"Failed to write {label} '{item.name}': {outcome}")
                errors.append((item.name, outcome))
            elif outcome is None:
                skipped.append(item.name)
            else:
                written.append(outcome)

        if errors:
            raise ComponentWriteError(label, errors)
        return WriteReport(written=written, skipped=skipped)

    def _duplicate_indexes(self, items: list[StackComponent], label: str) -> set[int]:
        """Items whose file name an earlier item already claims."""
        seen: set[str] = set()
        duplicates: set[int] = set()
        for index, item in enumerate(items):
            try:
                filename = output_filename(item.name)
            except StacksError:
                continue
            if filename in seen:
                self.presenter.warning(
                    f"Duplicate {label} '{filename}' in stack; keeping the first definition"
                )
                duplicates.add(index)
            seen.add(filename)
        return duplicates

    async def _write_one(
        self,
        item: StackComponent,
        target_dir: Path,
        options: RestoreOptions,
        label: str,
    ) -> str | None:
        """Write one item. Returns the file name, or None when skipped."""
        filename = output_filename(item.name)
        target = target_dir / filename

        if not options.overwrite and await self.files.exists(target):
            self.presenter.warning(f"Skipped {label} '{filename}': already exists at {target}")
            return None

        await self.files.write_text(target, item.content)
        self.presenter.success(f"Restored {label} '{filename}'")
        logger.debug("Wrote %s to %s", label, target)
        return filename
