"""restore_stack tool -- replay a stack file onto this machine."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from claude_stacks.errors import StacksError
from claude_stacks.files.local import LocalFileService
from claude_stacks.presenter import CollectingPresenter
from claude_stacks.restore.orchestrator import RestoreOrchestrator
from claude_stacks.tools._helpers import (
    build_options,
    failure_result,
    get_context,
    resolve_project_path,
)


async def restore_stack(
    stack_file: str,
    ctx: Context,
    project_path: str = "",
    overwrite: bool = False,
    global_only: bool = False,
    local_only: bool = False,
) -> dict[str, object]:
    """Restore a previously exported stack file.

    Writes commands and agents into ~/.claude and <project>/.claude, merges
    MCP servers into the project's entry in ~/.claude.json, and applies
    settings and CLAUDE.md files.

    Args:
        stack_file: Stack file path, or a bare file name from ~/.claude/stacks.
        project_path: Project directory. Defaults to the current directory.
        overwrite: Replace existing files and the project's MCP servers
            instead of keeping what is already there.
        global_only: Only restore into the global scope.
        local_only: Only restore into the project scope.

    Returns:
        Result with success status, per-category summary, and the progress
        events (including skipped items).
    """
    presenter = CollectingPresenter()
    try:
        app = get_context(ctx)
        options = build_options(overwrite, global_only, local_only)
        orchestrator = RestoreOrchestrator(
            files=LocalFileService(),
            paths=app.paths,
            presenter=presenter,
            dependency_checker=app.dependency_checker,
        )
        summary = await orchestrator.perform_restore(
            stack_file, resolve_project_path(project_path), options
        )
        return {"success": True, "summary": summary.to_dict(), "events": presenter.events}

    except StacksError as exc:
        return failure_result(exc, presenter)
    except Exception as exc:
        await ctx.error(f"Unexpected error in restore_stack: {exc}")
        return {
            "success": False,
            "error": f"Internal error: {type(exc).__name__}",
            "events": presenter.events,
        }
