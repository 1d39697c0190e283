"""Filesystem locations for the global scope, local scope, and shared registry.

Global scope: ``~/.claude`` (override with ``CLAUDE_CONFIG_DIR``).
Local scope: ``<project>/.claude``.
Shared registry: ``~/.claude.json`` (override with ``CLAUDE_STACKS_REGISTRY_PATH``).
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

CONFIG_DIR_ENV = "CLAUDE_CONFIG_DIR"
REGISTRY_PATH_ENV = "CLAUDE_STACKS_REGISTRY_PATH"
API_URL_ENV = "CLAUDE_STACKS_API_URL"

DEFAULT_API_URL = "https://backend.commands.com"

LOCAL_DIR_NAME = ".claude"


@dataclass(frozen=True, slots=True)
class StackPaths:
    """Every fixed location the restore engine reads or writes."""

    config_root: Path
    registry_path: Path
    temp_dir: Path

    @classmethod
    def from_env(cls) -> StackPaths:
        home = Path.home()
        config_root = os.environ.get(CONFIG_DIR_ENV) or str(home / LOCAL_DIR_NAME)
        registry_path = os.environ.get(REGISTRY_PATH_ENV) or str(home / ".claude.json")
        return cls(
            config_root=Path(config_root).expanduser(),
            registry_path=Path(registry_path).expanduser(),
            temp_dir=Path(tempfile.gettempdir()),
        )

    @classmethod
    def under(cls, root: Path) -> StackPaths:
        """Paths rooted in a single directory (tests, sandboxes)."""
        return cls(
            config_root=root / LOCAL_DIR_NAME,
            registry_path=root / ".claude.json",
            temp_dir=root / "tmp",
        )

    # ── Global scope ────────────────────────────────────────────

    @property
    def stacks_dir(self) -> Path:
        return self.config_root / "stacks"

    @property
    def global_commands_dir(self) -> Path:
        return self.config_root / "commands"

    @property
    def global_agents_dir(self) -> Path:
        return self.config_root / "agents"

    @property
    def global_settings_path(self) -> Path:
        return self.config_root / "settings.json"

    @property
    def global_claude_md_path(self) -> Path:
        return self.config_root / "CLAUDE.md"

    # ── Local scope ─────────────────────────────────────────────

    @staticmethod
    def local_root(project_path: Path | str) -> Path:
        return Path(project_path) / LOCAL_DIR_NAME

    def local_commands_dir(self, project_path: Path | str) -> Path:
        return self.local_root(project_path) / "commands"

    def local_agents_dir(self, project_path: Path | str) -> Path:
        return self.local_root(project_path) / "agents"

    def local_settings_path(self, project_path: Path | str) -> Path:
        return self.local_root(project_path) / "settings.local.json"

    def local_claude_md_path(self, project_path: Path | str) -> Path:
        return self.local_root(project_path) / "CLAUDE.md"


def api_base_url() -> str:
    """Remote stack registry base URL, without trailing slash."""
    return (os.environ.get(API_URL_ENV) or DEFAULT_API_URL).rstrip("/")
