"""Helpers shared by the restore and install tools."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from mcp.server.fastmcp import Context

from claude_stacks.errors import RestoreError, StacksError
from claude_stacks.models import RestoreOptions
from claude_stacks.presenter import CollectingPresenter

if TYPE_CHECKING:
    from claude_stacks.server import AppContext


def get_context(ctx: Context) -> AppContext:
    """Extract AppContext from FastMCP's lifespan context.

    Raises TypeError if the lifespan context is not an AppContext instance.
    """
    from claude_stacks.server import AppContext

    app = ctx.request_context.lifespan_context
    if not isinstance(app, AppContext):
        msg = (
            f"Expected AppContext in lifespan_context, got {type(app).__name__}. "
            "Is the server configured with app_lifespan?"
        )
        raise TypeError(msg)
    return app


def resolve_project_path(project_path: str) -> str:
    """Absolute project directory; empty means the current working directory."""
    return os.path.abspath(os.path.expanduser(project_path or os.getcwd()))


def build_options(overwrite: bool, global_only: bool, local_only: bool) -> RestoreOptions:
    if global_only and local_only:
        raise StacksError("global_only and local_only cannot both be set.")
    return RestoreOptions(overwrite=overwrite, global_only=global_only, local_only=local_only)


def failure_result(exc: StacksError, presenter: CollectingPresenter) -> dict[str, object]:
    result: dict[str, object] = {"success": False, "error": str(exc)}
    if isinstance(exc, RestoreError):
        result["phase"] = exc.phase.value
    result["events"] = presenter.events
    return result
