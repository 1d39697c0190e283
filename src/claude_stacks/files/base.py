"""Port: filesystem access used by the restore engine."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class FileServicePort(Protocol):
    """The engine's sole I/O seam. Every method may suspend."""

    async def ensure_dir(self, path: Path) -> None:
        """Create *path* and its parents if missing."""
        ...

    async def exists(self, path: Path) -> bool: ...

    async def read_text(self, path: Path) -> str:
        """Read *path* as UTF-8. Undecodable content raises ``StackIOError``."""
        ...

    async def write_text(self, path: Path, content: str) -> None:
        """Create or truncate *path* with *content* verbatim."""
        ...

    async def read_json(self, path: Path) -> object:
        """Parse *path* as JSON.

        Raises ``json.JSONDecodeError`` on malformed JSON or invalid UTF-8.
        """
        ...

    async def write_json(self, path: Path, data: object) -> None: ...

    async def write_json_atomic(self, path: Path, data: object) -> None:
        """Serialize to a sibling temp file, then rename over *path*."""
        ...

    async def remove(self, path: Path) -> None: ...
