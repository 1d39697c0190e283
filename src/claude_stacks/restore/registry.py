"""Merge MCP server entries into the shared multi-project registry document.

Invariants:
  1. Sibling project entries and non-``mcpServers`` fields of the touched
     entry are round-tripped untouched.
  2. Writes are atomic: unique sibling temp file, then a single rename.
     A failed rename leaves the previous file byte-identical.
  3. A missing or corrupt registry starts from ``{"projects": {}}``.
  4. One read-modify-write per call, serialized in-process per path.
     There is no cross-process lock: concurrent processes race at the
     rename and the last writer wins.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from claude_stacks.files.base import FileServicePort
from claude_stacks.models import MergeReport, RestoreOptions, StackMcpServer
from claude_stacks.presenter import PresenterPort

logger = logging.getLogger(__name__)

_path_locks: dict[str, asyncio.Lock] = {}


def _get_path_lock(path: Path) -> asyncio.Lock:
    """Get or create an in-process lock for *path*."""
    key = str(path.resolve())
    if key not in _path_locks:
        _path_locks[key] = asyncio.Lock()
    return _path_locks[key]


def new_project_entry() -> dict[str, object]:
    """Minimal entry shape other registry consumers expect."""
    return {"allowedTools": [], "mcpServers": {}}


@dataclass
class SharedRegistryMerger:
    """Read-merge-write one project's ``mcpServers`` in the registry document."""

    files: FileServicePort
    presenter: PresenterPort
    registry_path: Path

    async def merge(
        self,
        servers: list[StackMcpServer],
        project_path: str,
        options: RestoreOptions,
    ) -> MergeReport:
        """Apply *servers* to ``projects[project_path].mcpServers``.

        With ``options.overwrite`` the project's server map is replaced
        wholesale; otherwise existing names are kept and new names added.
        A name repeated within *servers* keeps its first definition.

        Raises:
            StackIOError: If the registry cannot be read or written.
        """
        servers = self._first_of_each_name(servers)

        async with _get_path_lock(self.registry_path):
            document = await self._read_document()

            projects = document.setdefault("projects", {})
            entry = projects.get(project_path)
            if not isinstance(entry, dict):
                entry = new_project_entry()
                projects[project_path] = entry

            existing = entry.get("mcpServers")
            if not isinstance(existing, dict):
                existing = {}

            added: list[str] = []
            skipped: list[str] = []
            removed: list[str] = []

            if options.overwrite:
                incoming = {s.name: s.to_registry_entry() for s in servers}
                removed = [name for name in existing if name not in incoming]
                entry["mcpServers"] = incoming
                added = list(incoming)
                for name in removed:
                    self.presenter.info(f"Removed MCP server '{name}' (not in stack)")
            else:
                merged = dict(existing)
                for server in servers:
                    if server.name in merged:
                        self.presenter.warning(
                            f"Skipped MCP server '{server.name}': already configured for "
                            f"{project_path}"
                        )
                        skipped.append(server.name)
                        continue
                    merged[server.name] = server.to_registry_entry()
                    added.append(server.name)
                entry["mcpServers"] = merged

            await self.files.ensure_dir(self.registry_path.parent)
            await self.files.write_json_atomic(self.registry_path, document)

        for name in added:
            self.presenter.success(f"Configured MCP server '{name}'")
        return MergeReport(project_path=project_path, added=added, skipped=skipped, removed=removed)

    def _first_of_each_name(self, servers: list[StackMcpServer]) -> list[StackMcpServer]:
        unique: dict[str, StackMcpServer] = {}
        for server in servers:
            if server.name in unique:
                self.presenter.warning(
                    f"Duplicate MCP server '{server.name}' in stack; keeping the first definition"
                )
                continue
            unique[server.name] = server
        return list(unique.values())

    async def _read_document(self) -> dict[str, object]:
        if not await self.files.exists(self.registry_path):
            return {"projects": {}}
        try:
            data = await self.files.read_json(self.registry_path)
        except json.JSONDecodeError as exc:
            self.presenter.warning(
                f"Could not parse {self.registry_path} ({exc}); starting from an empty registry."
            )
            return {"projects": {}}
        if not isinstance(data, dict):
            self.presenter.warning(
                f"{self.registry_path} is not a JSON object; starting from an empty registry."
            )
            return {"projects": {}}
        if not isinstance(data.get("projects"), dict):
            data["projects"] = {}
        return data
