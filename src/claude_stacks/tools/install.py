"""install_stack tool -- fetch a published stack and restore it."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from claude_stacks.errors import StacksError
from claude_stacks.files.local import LocalFileService
from claude_stacks.presenter import CollectingPresenter
from claude_stacks.restore.install import InstallAdapter
from claude_stacks.restore.orchestrator import RestoreOrchestrator
from claude_stacks.tools._helpers import (
    build_options,
    failure_result,
    get_context,
    resolve_project_path,
)


async def install_stack(
    stack_id: str,
    ctx: Context,
    project_path: str = "",
    overwrite: bool = False,
    global_only: bool = False,
    local_only: bool = False,
) -> dict[str, object]:
    """Install a stack published to the stack registry.

    Args:
        stack_id: Published stack id in ``org/name`` form.
        project_path: Project directory. Defaults to the current directory.
        overwrite: Replace existing files and the project's MCP servers.
        global_only: Only install into the global scope.
        local_only: Only install into the project scope.

    Returns:
        Result with success status, per-category summary, and progress events.
    """
    presenter = CollectingPresenter()
    try:
        app = get_context(ctx)
        options = build_options(overwrite, global_only, local_only)

        await ctx.info(f"Fetching stack {stack_id}...")
        manifest, source = await app.stack_registry.fetch_stack(stack_id)

        adapter = InstallAdapter(
            RestoreOrchestrator(
                files=LocalFileService(),
                paths=app.paths,
                presenter=presenter,
                dependency_checker=app.dependency_checker,
            )
        )
        summary = await adapter.install(
            manifest, source, stack_id, resolve_project_path(project_path), options
        )
        await app.stack_registry.track_install(stack_id)
        return {"success": True, "summary": summary.to_dict(), "events": presenter.events}

    except StacksError as exc:
        return failure_result(exc, presenter)
    except Exception as exc:
        await ctx.error(f"Unexpected error in install_stack: {exc}")
        return {
            "success": False,
            "error": f"Internal error: {type(exc).__name__}",
            "events": presenter.events,
        }
