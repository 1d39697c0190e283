"""Port: advisory dependency checks run before restoring."""

from __future__ import annotations

from typing import Protocol

from claude_stacks.models import MissingDependency, StackManifest


class DependencyCheckerPort(Protocol):
    """Report executables the stack's MCP servers need but cannot find."""

    async def check(self, manifest: StackManifest) -> list[MissingDependency]: ...
