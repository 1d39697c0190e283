"""Ports: manifest loading and scope classification."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from claude_stacks.models import ClassifiedComponents, StackComponent, StackManifest


class ManifestLoaderPort(Protocol):
    """Port for resolving a manifest reference and parsing it."""

    async def resolve(self, ref: str) -> Path:
        """Resolve a bare filename against the stacks dir; use other refs as given."""
        ...

    async def load(self, path: Path) -> StackManifest:
        """Parse the manifest at *path*."""
        ...


class ComponentClassifierPort(Protocol):
    """Port for splitting components into global and local scope."""

    def classify(self, items: list[StackComponent]) -> ClassifiedComponents: ...
