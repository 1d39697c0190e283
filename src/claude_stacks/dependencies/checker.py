"""Check that stdio MCP server launchers are on PATH."""

from __future__ import annotations

import asyncio
import shutil

from claude_stacks.models import McpServerType, MissingDependency, StackManifest

_INSTALL_HINTS: dict[str, str] = {
    "npx": "Install Node.js (https://nodejs.org), which ships npx.",
    "node": "Install Node.js (https://nodejs.org).",
    "uvx": "Install uv: curl -LsSf https://astral.sh/uv/install.sh | sh",
    "uv": "Install uv: curl -LsSf https://astral.sh/uv/install.sh | sh",
    "python": "Install Python 3 (https://www.python.org/downloads/).",
    "python3": "Install Python 3 (https://www.python.org/downloads/).",
    "docker": "Install Docker (https://docs.docker.com/get-docker/).",
    "bunx": "Install Bun (https://bun.sh), which ships bunx.",
    "bun": "Install Bun (https://bun.sh).",
    "deno": "Install Deno (https://deno.land).",
}


def install_hint(command: str) -> str:
    return _INSTALL_HINTS.get(command, f"Install '{command}' and make sure it is on your PATH.")


class DefaultDependencyChecker:
    """Look up each stdio server's command with ``shutil.which``."""

    async def check(self, manifest: StackManifest) -> list[MissingDependency]:
        required: dict[str, list[str]] = {}
        for server in manifest.mcp_servers:
            if server.type is not McpServerType.STDIO or not server.command:
                continue
            required.setdefault(server.command, []).append(server.name)

        missing: list[MissingDependency] = []
        for command, servers in required.items():
            if await asyncio.to_thread(shutil.which, command) is None:
                missing.append(
                    MissingDependency(
                        command=command,
                        required_by=servers,
                        install_hint=install_hint(command),
                    )
                )
        return missing
