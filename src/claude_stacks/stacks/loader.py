"""Load stack manifests from JSON files."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from claude_stacks.errors import ManifestNotFoundError, ManifestParseError
from claude_stacks.files.base import FileServicePort
from claude_stacks.models import StackManifest

logger = logging.getLogger(__name__)


def is_bare_filename(ref: str) -> bool:
    """True when *ref* has no path separator and is not absolute."""
    if os.path.isabs(ref):
        return False
    return "/" not in ref and os.sep not in ref


@dataclass
class ManifestLoader:
    """Resolve manifest references and parse them into StackManifest objects."""

    files: FileServicePort
    stacks_dir: Path

    async def resolve(self, ref: str) -> Path:
        """Resolve a manifest reference to an existing path.

        Args:
            ref: A bare filename (looked up in the stacks directory) or a
                relative/absolute path (used as given).

        Raises:
            ManifestNotFoundError: If the resolved path does not exist.
        """
        path = self.stacks_dir / ref if is_bare_filename(ref) else Path(ref)
        if not await self.files.exists(path):
            raise ManifestNotFoundError(f"Stack file not found: {path}")
        logger.debug("Resolved stack reference %r to %s", ref, path)
        return path

    async def load(self, path: Path) -> StackManifest:
        """Parse the manifest at *path*. Malformed JSON is fatal."""
        try:
            data = await self.files.read_json(path)
        except json.JSONDecodeError as exc:
            raise ManifestParseError(
                f"Invalid JSON in stack file {path}: {exc}. Re-export the stack or fix the syntax."
            ) from exc
        return StackManifest.from_dict(data, source=str(path))
