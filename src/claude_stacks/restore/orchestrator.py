"""Restore a stack manifest onto the global and local configuration trees.

Phases run strictly in order and never re-enter:

    resolve_path -> load -> check_dependencies -> restore_commands
    -> restore_agents -> restore_mcp_servers -> restore_settings
    -> restore_claude_md -> summarize

A failing phase raises RestoreError naming it; later phases do not run.
Inside the command and agent phases, per-file failures are collected by
FileComponentWriter and fail the phase only after every sibling was tried.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from claude_stacks.errors import RestoreError, StacksError
from claude_stacks.files.base import FileServicePort
from claude_stacks.models import (
    RestoreOptions,
    RestorePhase,
    RestoreSummary,
    StackComponent,
    StackManifest,
    WriteReport,
)
from claude_stacks.paths import StackPaths
from claude_stacks.presenter import LoggingPresenter, PresenterPort
from claude_stacks.restore.base import DependencyCheckerPort
from claude_stacks.restore.claude_md import ClaudeMdWriter
from claude_stacks.restore.components import FileComponentWriter
from claude_stacks.restore.registry import SharedRegistryMerger
from claude_stacks.restore.settings import SettingsMerger
from claude_stacks.stacks.base import ComponentClassifierPort, ManifestLoaderPort
from claude_stacks.stacks.classifier import PathPrefixClassifier
from claude_stacks.stacks.loader import ManifestLoader

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _ScopeCounts:
    global_written: int = 0
    local_written: int = 0
    skipped: int = 0

    def add(self, report: WriteReport, *, is_global: bool) -> None:
        if is_global:
            self.global_written += len(report.written)
        else:
            self.local_written += len(report.written)
        self.skipped += len(report.skipped)


@dataclass
class RestoreOrchestrator:
    """Sequence the restore phases for one manifest and one project."""

    files: FileServicePort
    paths: StackPaths
    presenter: PresenterPort = field(default_factory=LoggingPresenter)
    dependency_checker: DependencyCheckerPort | None = None
    classifier: ComponentClassifierPort = field(default_factory=PathPrefixClassifier)
    loader: ManifestLoaderPort | None = None

    def __post_init__(self) -> None:
        if self.loader is None:
            self.loader = ManifestLoader(self.files, self.paths.stacks_dir)
        self.component_writer = FileComponentWriter(self.files, self.presenter)
        self.registry_merger = SharedRegistryMerger(
            self.files, self.presenter, self.paths.registry_path
        )
        self.settings_merger = SettingsMerger(self.files, self.presenter, self.paths)
        self.claude_md_writer = ClaudeMdWriter(self.files, self.presenter)

    async def perform_restore(
        self,
        ref: str,
        project_path: str,
        options: RestoreOptions | None = None,
    ) -> RestoreSummary:
        """Restore the manifest at *ref* for the project at *project_path*.

        Args:
            ref: Manifest reference. A bare file name is looked up in the
                stacks directory.
            project_path: Absolute project directory. Keys the registry entry
                and roots the local scope.
            options: Overwrite and scope flags.

        Returns:
            Per-category counts, only when every phase succeeded.

        Raises:
            RestoreError: Naming the first phase that failed.
        """
        options = options or RestoreOptions()

        path = await self._run(RestorePhase.RESOLVE_PATH, lambda: self.loader.resolve(ref))
        manifest = await self._run(RestorePhase.LOAD, lambda: self.loader.load(path))

        self.presenter.info(f"Restoring stack: {manifest.name}")
        if manifest.description:
            self.presenter.info(f"Description: {manifest.description}")
        self.presenter.info(f"Mode: {'Overwrite' if options.overwrite else 'Add/Merge'}")

        await self._run(RestorePhase.CHECK_DEPENDENCIES, lambda: self._check_dependencies(manifest))

        commands = await self._run(
            RestorePhase.RESTORE_COMMANDS,
            lambda: self._restore_components(
                manifest.commands,
                self.paths.global_commands_dir,
                self.paths.local_commands_dir(project_path),
                options,
                label="command",
            ),
        )
        agents = await self._run(
            RestorePhase.RESTORE_AGENTS,
            lambda: self._restore_components(
                manifest.agents,
                self.paths.global_agents_dir,
                self.paths.local_agents_dir(project_path),
                options,
                label="agent",
            ),
        )

        mcp_count = 0
        mcp_skipped = 0
        if manifest.mcp_servers:
            self.presenter.info(f"Restoring {len(manifest.mcp_servers)} MCP server(s)...")
            merge = await self._run(
                RestorePhase.RESTORE_MCP_SERVERS,
                lambda: self.registry_merger.merge(manifest.mcp_servers, project_path, options),
            )
            mcp_count = len(merge.added)
            mcp_skipped = len(merge.skipped)

        settings_applied = False
        if manifest.settings:
            await self._run(
                RestorePhase.RESTORE_SETTINGS,
                lambda: self.settings_merger.apply(manifest.settings, project_path, options),
            )
            settings_applied = True

        claude_md_written, claude_md_skipped = await self._run(
            RestorePhase.RESTORE_CLAUDE_MD,
            lambda: self._restore_claude_md(manifest, project_path, options),
        )

        summary = RestoreSummary(
            stack_name=manifest.name,
            global_commands=commands.global_written,
            local_commands=commands.local_written,
            global_agents=agents.global_written,
            local_agents=agents.local_written,
            mcp_servers=mcp_count,
            settings_applied=settings_applied,
            claude_md_files=claude_md_written,
            skipped=commands.skipped + agents.skipped + mcp_skipped + claude_md_skipped,
        )
        return await self._run(RestorePhase.SUMMARIZE, lambda: self._present_summary(summary))

    async def _run(self, phase: RestorePhase, step: Callable[[], Awaitable[T]]) -> T:
        logger.debug("Entering restore phase %s", phase)
        try:
            return await step()
        except StacksError as exc:
            self.presenter.error(f"Restore failed during {phase}: {exc}")
            raise RestoreError(phase, exc) from exc

    async def _check_dependencies(self, manifest: StackManifest) -> None:
        """Advisory only: never fails the restore."""
        if self.dependency_checker is None or not manifest.mcp_servers:
            return
        self.presenter.info("Checking MCP server dependencies...")
        try:
            missing = await self.dependency_checker.check(manifest)
        except Exception as exc:
            logger.debug("Dependency check failed", exc_info=True)
            self.presenter.warning(f"Could not check MCP server dependencies: {exc}")
            return
        for dep in missing:
            message = f"Missing dependency '{dep.command}' required by {', '.join(dep.required_by)}"
            if dep.install_hint:
                message += f". {dep.install_hint}"
            self.presenter.warning(message)

    async def _restore_components(
        self,
        items: list[StackComponent],
        global_dir: Path,
        local_dir: Path,
        options: RestoreOptions,
        *,
        label: str,
    ) -> _ScopeCounts:
        counts = _ScopeCounts()
        classified = self.classifier.classify(items)

        if options.include_global and classified.global_items:
            self.presenter.info(f"Restoring {len(classified.global_items)} global {label}(s)...")
            report = await self.component_writer.write(
                classified.global_items, global_dir, options, label=label
            )
            counts.add(report, is_global=True)

        if options.include_local and classified.local_items:
            self.presenter.info(f"Restoring {len(classified.local_items)} local {label}(s)...")
            report = await self.component_writer.write(
                classified.local_items, local_dir, options, label=label
            )
            counts.add(report, is_global=False)

        return counts

    async def _restore_claude_md(
        self,
        manifest: StackManifest,
        project_path: str,
        options: RestoreOptions,
    ) -> tuple[int, int]:
        docs = manifest.claude_md
        if docs is None:
            return 0, 0

        targets = []
        if options.include_global and docs.global_doc is not None:
            targets.append((docs.global_doc, self.paths.global_claude_md_path))
        if options.include_local and docs.local_doc is not None:
            targets.append((docs.local_doc, self.paths.local_claude_md_path(project_path)))

        written = 0
        skipped = 0
        for doc, target in targets:
            if await self.claude_md_writer.apply(doc, target, options):
                written += 1
            else:
                skipped += 1
        return written, skipped

    async def _present_summary(self, summary: RestoreSummary) -> RestoreSummary:
        self.presenter.success(f'Stack "{summary.stack_name}" restored successfully!')
        self.presenter.info("Restoration Summary:")
        rows = [
            ("Global commands", summary.global_commands),
            ("Local commands", summary.local_commands),
            ("Global agents", summary.global_agents),
            ("Local agents", summary.local_agents),
            ("MCP servers", summary.mcp_servers),
            ("CLAUDE.md files", summary.claude_md_files),
            ("Skipped (already present)", summary.skipped),
        ]
        for label, count in rows:
            if count > 0:
                self.presenter.info(f"   {label}: {count}")
        if summary.settings_applied:
            self.presenter.info("   Settings: applied")
        return summary
