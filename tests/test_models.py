"""Tests for manifest parsing and serialization."""

from __future__ import annotations

import pytest

from claude_stacks.errors import ManifestParseError
from claude_stacks.models import (
    McpServerType,
    RestoreOptions,
    StackManifest,
    StackMcpServer,
)

FULL = {
    "name": "team-stack",
    "description": "Shared tools",
    "version": "1.2.0",
    "commands": [
        {"name": "review", "filePath": "~/.claude/commands/review.md", "content": "# Review\n"},
    ],
    "agents": [
        {
            "name": "helper (local)",
            "filePath": "./.claude/agents/helper.md",
            "content": "agent body",
            "description": "Helps",
        },
    ],
    "mcpServers": [
        {"name": "fs", "type": "stdio", "command": "npx", "args": ["pkg"]},
        {"name": "api", "type": "http", "url": "https://example.com/mcp"},
    ],
    "settings": {"theme": "dark"},
    "claudeMd": {"global": {"path": "~/.claude/CLAUDE.md", "content": "global doc"}},
    "metadata": {"created_at": "2026-01-01T00:00:00Z"},
}


class TestStackManifestFromDict:
    def test_parses_all_fields(self):
        manifest = StackManifest.from_dict(FULL)
        assert manifest.name == "team-stack"
        assert manifest.version == "1.2.0"
        assert manifest.commands[0].file_path == "~/.claude/commands/review.md"
        assert manifest.agents[0].description == "Helps"
        assert manifest.mcp_servers[1].type is McpServerType.HTTP
        assert manifest.settings == {"theme": "dark"}
        assert manifest.claude_md is not None
        assert manifest.claude_md.global_doc.content == "global doc"
        assert manifest.claude_md.local_doc is None

    def test_minimal_manifest_defaults(self):
        manifest = StackManifest.from_dict({"name": "empty", "description": ""})
        assert manifest.commands == []
        assert manifest.agents == []
        assert manifest.mcp_servers == []
        assert manifest.settings == {}
        assert manifest.claude_md is None
        assert manifest.version is None

    def test_content_is_not_transformed(self):
        content = "line one\r\n  indented\t\n\n"
        manifest = StackManifest.from_dict(
            {"name": "x", "commands": [{"name": "c", "filePath": "c.md", "content": content}]}
        )
        assert manifest.commands[0].content == content

    def test_rejects_non_object_root(self):
        with pytest.raises(ManifestParseError, match="expected a JSON object"):
            StackManifest.from_dict(["not", "a", "stack"])

    def test_rejects_non_list_commands(self):
        with pytest.raises(ManifestParseError, match="'commands' must be a list"):
            StackManifest.from_dict({"name": "bad", "commands": "nope"})

    def test_rejects_unknown_server_type(self):
        with pytest.raises(ManifestParseError, match="unknown type 'websocket'"):
            StackManifest.from_dict(
                {"name": "bad", "mcpServers": [{"name": "x", "type": "websocket"}]}
            )

    def test_skips_non_object_entries(self):
        manifest = StackManifest.from_dict(
            {"name": "mixed", "agents": ["junk", {"name": "ok", "filePath": "a", "content": ""}]}
        )
        assert [a.name for a in manifest.agents] == ["ok"]

    def test_to_dict_round_trips(self):
        manifest = StackManifest.from_dict(FULL)
        again = StackManifest.from_dict(manifest.to_dict())
        assert again == manifest


class TestStackMcpServer:
    def test_registry_entry_only_has_present_keys(self):
        server = StackMcpServer(name="fs", command="npx", args=["pkg"])
        assert server.to_registry_entry() == {"type": "stdio", "command": "npx", "args": ["pkg"]}

    def test_http_entry(self):
        server = StackMcpServer(
            name="api", type=McpServerType.SSE, url="https://x/sse", env={"TOKEN": "t"}
        )
        assert server.to_registry_entry() == {
            "type": "sse",
            "url": "https://x/sse",
            "env": {"TOKEN": "t"},
        }


class TestRestoreOptions:
    def test_default_includes_both_scopes(self):
        options = RestoreOptions()
        assert options.include_global and options.include_local

    def test_global_only(self):
        options = RestoreOptions(global_only=True)
        assert options.include_global and not options.include_local

    def test_local_only(self):
        options = RestoreOptions(local_only=True)
        assert options.include_local and not options.include_global
