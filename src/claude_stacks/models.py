"""Domain models for claude-stacks. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from claude_stacks.errors import ManifestParseError

# ─── Enumerations ─────────────────────────────────────────────


class McpServerType(StrEnum):
    STDIO = "stdio"
    HTTP = "http"
    SSE = "sse"


class Scope(StrEnum):
    GLOBAL = "global"
    LOCAL = "local"


class RestorePhase(StrEnum):
    RESOLVE_PATH = "resolve_path"
    LOAD = "load"
    CHECK_DEPENDENCIES = "check_dependencies"
    RESTORE_COMMANDS = "restore_commands"
    RESTORE_AGENTS = "restore_agents"
    RESTORE_MCP_SERVERS = "restore_mcp_servers"
    RESTORE_SETTINGS = "restore_settings"
    RESTORE_CLAUDE_MD = "restore_claude_md"
    SUMMARIZE = "summarize"


# ─── Manifest Models ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class StackCommand:
    """A slash command. ``content`` is persisted verbatim."""

    name: str
    file_path: str
    content: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class StackAgent:
    """A sub-agent definition. ``content`` is persisted verbatim."""

    name: str
    file_path: str
    content: str
    description: str = ""


StackComponent = StackCommand | StackAgent


@dataclass(frozen=True, slots=True)
class StackMcpServer:
    """An MCP server descriptor, keyed by ``name`` inside one project entry."""

    name: str
    type: McpServerType = McpServerType.STDIO
    command: str | None = None
    args: list[str] | None = None
    url: str | None = None
    env: dict[str, str] | None = None

    def to_registry_entry(self) -> dict[str, object]:
        """Shape stored under ``projects[path].mcpServers[name]``."""
        result: dict[str, object] = {"type": self.type.value}
        if self.command is not None:
            result["command"] = self.command
        if self.args is not None:
            result["args"] = list(self.args)
        if self.url is not None:
            result["url"] = self.url
        if self.env is not None:
            result["env"] = dict(self.env)
        return result

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, **self.to_registry_entry()}


@dataclass(frozen=True, slots=True)
class ClaudeMdFile:
    path: str
    content: str


@dataclass(frozen=True, slots=True)
class ClaudeMdDocs:
    global_doc: ClaudeMdFile | None = None
    local_doc: ClaudeMdFile | None = None

    def count(self) -> int:
        return int(self.global_doc is not None) + int(self.local_doc is not None)


@dataclass(frozen=True, slots=True)
class StackManifest:
    """An exported stack. Read-only input to the restore engine."""

    name: str
    description: str = ""
    version: str | None = None
    commands: list[StackCommand] = field(default_factory=list)
    agents: list[StackAgent] = field(default_factory=list)
    mcp_servers: list[StackMcpServer] = field(default_factory=list)
    settings: dict[str, object] = field(default_factory=dict)
    claude_md: ClaudeMdDocs | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: object, source: str = "") -> StackManifest:
        """Build a manifest from parsed JSON.

        Tolerant of missing optional keys; rejects a non-object root or
        component arrays that are not lists. Non-object array entries are
        skipped.
        """
        if not isinstance(data, dict):
            raise ManifestParseError(f"Invalid stack format in {source}: expected a JSON object.")

        commands = [
            StackCommand(
                name=str(entry.get("name", "")),
                file_path=str(entry.get("filePath", "")),
                content=str(entry.get("content", "")),
                description=str(entry.get("description", "")),
            )
            for entry in _entries(data, "commands", source)
        ]
        agents = [
            StackAgent(
                name=str(entry.get("name", "")),
                file_path=str(entry.get("filePath", "")),
                content=str(entry.get("content", "")),
                description=str(entry.get("description", "")),
            )
            for entry in _entries(data, "agents", source)
        ]
        servers = [_parse_server(entry, source) for entry in _entries(data, "mcpServers", source)]

        settings = data.get("settings") or {}
        if not isinstance(settings, dict):
            raise ManifestParseError(f"Invalid stack format in {source}: 'settings' must be an object.")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            metadata = {}

        version = data.get("version")
        return cls(
            name=str(data.get("name", "unnamed")),
            description=str(data.get("description", "")),
            version=str(version) if version is not None else None,
            commands=commands,
            agents=agents,
            mcp_servers=servers,
            settings=dict(settings),
            claude_md=_parse_claude_md(data.get("claudeMd")),
            metadata=dict(metadata),
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize back to the manifest file format."""
        result: dict[str, object] = {
            "name": self.name,
            "description": self.description,
        }
        if self.version is not None:
            result["version"] = self.version
        result["commands"] = [_component_to_dict(c) for c in self.commands]
        result["agents"] = [_component_to_dict(a) for a in self.agents]
        result["mcpServers"] = [s.to_dict() for s in self.mcp_servers]
        result["settings"] = dict(self.settings)
        if self.claude_md is not None:
            docs: dict[str, object] = {}
            if self.claude_md.global_doc is not None:
                docs["global"] = {
                    "path": self.claude_md.global_doc.path,
                    "content": self.claude_md.global_doc.content,
                }
            if self.claude_md.local_doc is not None:
                docs["local"] = {
                    "path": self.claude_md.local_doc.path,
                    "content": self.claude_md.local_doc.content,
                }
            result["claudeMd"] = docs
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        return result


def _entries(data: dict, key: str, source: str) -> list[dict]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ManifestParseError(f"Invalid stack format in {source}: '{key}' must be a list.")
    return [entry for entry in raw if isinstance(entry, dict)]


def _parse_server(entry: dict, source: str) -> StackMcpServer:
    raw_type = str(entry.get("type", "stdio"))
    try:
        server_type = McpServerType(raw_type)
    except ValueError:
        raise ManifestParseError(
            f"Invalid stack format in {source}: MCP server '{entry.get('name', '')}' "
            f"has unknown type '{raw_type}' (expected stdio, http, or sse)."
        ) from None

    args = entry.get("args")
    env = entry.get("env")
    return StackMcpServer(
        name=str(entry.get("name", "")),
        type=server_type,
        command=str(entry["command"]) if entry.get("command") is not None else None,
        args=[str(a) for a in args] if isinstance(args, list) else None,
        url=str(entry["url"]) if entry.get("url") is not None else None,
        env={str(k): str(v) for k, v in env.items()} if isinstance(env, dict) else None,
    )


def _parse_claude_md(raw: object) -> ClaudeMdDocs | None:
    if not isinstance(raw, dict):
        return None

    def _doc(value: object) -> ClaudeMdFile | None:
        if not isinstance(value, dict) or "content" not in value:
            return None
        return ClaudeMdFile(path=str(value.get("path", "")), content=str(value["content"]))

    docs = ClaudeMdDocs(global_doc=_doc(raw.get("global")), local_doc=_doc(raw.get("local")))
    return docs if docs.count() else None


def _component_to_dict(item: StackComponent) -> dict[str, object]:
    result: dict[str, object] = {
        "name": item.name,
        "filePath": item.file_path,
        "content": item.content,
    }
    if item.description:
        result["description"] = item.description
    return result


# ─── Restore Models ───────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RestoreOptions:
    """Neither ``global_only`` nor ``local_only`` set means both scopes."""

    overwrite: bool = False
    global_only: bool = False
    local_only: bool = False

    @property
    def include_global(self) -> bool:
        return not self.local_only

    @property
    def include_local(self) -> bool:
        return not self.global_only


@dataclass(frozen=True, slots=True)
class ClassifiedComponents:
    global_items: list[StackComponent] = field(default_factory=list)
    local_items: list[StackComponent] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class WriteReport:
    """Outcome of one FileComponentWriter call. Only built when no item failed."""

    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MergeReport:
    """Outcome of one registry merge."""

    project_path: str
    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RestoreSummary:
    """Per-category counts reported after a fully successful restore."""

    stack_name: str
    global_commands: int = 0
    local_commands: int = 0
    global_agents: int = 0
    local_agents: int = 0
    mcp_servers: int = 0
    settings_applied: bool = False
    claude_md_files: int = 0
    skipped: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "stack_name": self.stack_name,
            "global_commands": self.global_commands,
            "local_commands": self.local_commands,
            "global_agents": self.global_agents,
            "local_agents": self.local_agents,
            "mcp_servers": self.mcp_servers,
            "settings_applied": self.settings_applied,
            "claude_md_files": self.claude_md_files,
            "skipped": self.skipped,
        }


# ─── Dependency / Remote Models ───────────────────────────────


@dataclass(frozen=True, slots=True)
class MissingDependency:
    """An executable required by one or more stdio MCP servers but not on PATH."""

    command: str
    required_by: list[str] = field(default_factory=list)
    install_hint: str = ""


@dataclass(frozen=True, slots=True)
class RemoteStackInfo:
    """Metadata about a stack fetched from the remote registry."""

    stack_id: str
    name: str = ""
    author: str = ""
