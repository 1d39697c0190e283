"""MCP server that restores and installs Claude Code stacks."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from claude_stacks.dependencies.checker import DefaultDependencyChecker
from claude_stacks.paths import StackPaths, api_base_url
from claude_stacks.remote.client import StackRegistryClient
from claude_stacks.restore.base import DependencyCheckerPort
from claude_stacks.tools.install import install_stack
from claude_stacks.tools.restore import restore_stack


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations."""

    http_client: httpx.AsyncClient
    stack_registry: StackRegistryClient
    dependency_checker: DependencyCheckerPort
    paths: StackPaths


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage shared adapter lifecycle (composition root)."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(30.0, connect=10.0),
        follow_redirects=True,
        transport=httpx.AsyncHTTPTransport(retries=3),
    ) as http_client:
        yield AppContext(
            http_client=http_client,
            stack_registry=StackRegistryClient(http_client, api_base_url()),
            dependency_checker=DefaultDependencyChecker(),
            paths=StackPaths.from_env(),
        )


mcp = FastMCP(
    "claude-stacks",
    instructions=(
        "claude-stacks restores and installs stacks: bundles of Claude Code "
        "slash commands, agents, MCP servers, settings, and CLAUDE.md files.\n\n"
        "- **restore_stack** replays a local stack file (a bare name is looked up "
        "in ~/.claude/stacks).\n"
        "- **install_stack** fetches a published stack by `org/name` and restores it.\n\n"
        "Both keep existing files and MCP servers unless overwrite=True. "
        "Use global_only or local_only to limit the scope. Report skipped items "
        "from the returned events to the user."
    ),
    lifespan=app_lifespan,
)

# ─── Destructive tools ────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(destructiveHint=True))(restore_stack)
mcp.tool(annotations=ToolAnnotations(destructiveHint=True))(install_stack)
