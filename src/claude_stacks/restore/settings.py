"""Replace or shallow-merge a settings JSON document."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from claude_stacks.errors import StackIOError
from claude_stacks.files.base import FileServicePort
from claude_stacks.models import RestoreOptions
from claude_stacks.paths import StackPaths
from claude_stacks.presenter import PresenterPort

logger = logging.getLogger(__name__)


@dataclass
class SettingsMerger:
    files: FileServicePort
    presenter: PresenterPort
    paths: StackPaths

    def target_path(self, project_path: str, options: RestoreOptions) -> Path:
        if options.global_only:
            return self.paths.global_settings_path
        return self.paths.local_settings_path(project_path)

    async def apply(
        self,
        settings: dict[str, object],
        project_path: str,
        options: RestoreOptions,
    ) -> Path:
        """Write *settings* to the scoped settings file and return its path.

        Without ``overwrite``, top-level keys are merged over the existing
        document (no recursive merge).
        """
        target = self.target_path(project_path, options)
        await self.files.ensure_dir(target.parent)

        if options.overwrite:
            result = dict(settings)
        else:
            existing = await self._read_existing(target)
            result = {**existing, **settings}

        await self.files.write_json(target, result)
        self.presenter.success(f"Restored settings to {target}")
        return target

    async def _read_existing(self, target: Path) -> dict[str, object]:
        if not await self.files.exists(target):
            return {}
        try:
            data = await self.files.read_json(target)
        except (json.JSONDecodeError, StackIOError) as exc:
            self.presenter.warning(f"Could not read {target} ({exc}); replacing it.")
            return {}
        if not isinstance(data, dict):
            self.presenter.warning(f"{target} is not a JSON object; replacing it.")
            return {}
        return data
