"""Install a fetched stack by staging it to a temp file and restoring it."""

from __future__ import annotations

import contextlib
import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from claude_stacks.errors import StacksError
from claude_stacks.models import RemoteStackInfo, RestoreOptions, RestoreSummary, StackManifest
from claude_stacks.restore.orchestrator import RestoreOrchestrator

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_stack_id(ref: str) -> str:
    """``"org/my stack"`` -> ``"org-my-stack"``."""
    return _UNSAFE_CHARS.sub("-", ref).strip("-.") or "stack"


def staging_path(temp_dir: Path, ref: str) -> Path:
    """Unique per call, so concurrent installs of one ref never collide."""
    return temp_dir / f"remote-stack-{safe_stack_id(ref)}-{uuid.uuid4().hex}.json"


@dataclass
class InstallAdapter:
    """Stage a remote manifest and hand it to the restore orchestrator."""

    orchestrator: RestoreOrchestrator

    async def install(
        self,
        manifest: StackManifest,
        source: RemoteStackInfo,
        ref: str,
        project_path: str,
        options: RestoreOptions | None = None,
    ) -> RestoreSummary:
        """Restore *manifest* via a uniquely named temp file.

        The temp file is removed on every exit path; a failed removal is
        ignored and never replaces the restore outcome.
        """
        files = self.orchestrator.files
        presenter = self.orchestrator.presenter
        tmp_path = staging_path(self.orchestrator.paths.temp_dir, ref)

        try:
            await files.ensure_dir(tmp_path.parent)
            await files.write_json(tmp_path, manifest.to_dict())
            logger.debug("Staged stack %s at %s", manifest.name, tmp_path)

            summary = await self.orchestrator.perform_restore(str(tmp_path), project_path, options)
            presenter.success(f'Successfully installed "{manifest.name}"')
            presenter.info(f"   Stack ID: {source.stack_id or ref}")
            presenter.info(f"   Author: {source.author or 'Unknown'}")
            return summary
        finally:
            with contextlib.suppress(StacksError):
                await files.remove(tmp_path)
