"""Local-disk implementation of FileServicePort.

Blocking calls run in ``asyncio.to_thread``. Atomic JSON writes go to a
unique sibling temp file and are moved into place with ``os.replace()``;
on any failure the temp file is removed and the target is untouched.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
import tempfile
from pathlib import Path

from claude_stacks.errors import StackIOError


def _dumps(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class LocalFileService:
    """Filesystem access for the restore engine."""

    async def ensure_dir(self, path: Path) -> None:
        try:
            await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StackIOError(f"Failed to create directory {path}: {exc}") from exc

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(Path(path).exists)

    async def read_text(self, path: Path) -> str:
        raw = await self._read_bytes(path)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StackIOError(f"{path} is not valid UTF-8: {exc}") from exc

    async def write_text(self, path: Path, content: str) -> None:
        try:
            await asyncio.to_thread(_write_text, Path(path), content)
        except PermissionError as exc:
            raise StackIOError(f"Permission denied writing to {path}: {exc}") from exc
        except OSError as exc:
            raise StackIOError(f"Failed to write {path}: {exc}") from exc

    async def read_json(self, path: Path) -> object:
        raw = await self._read_bytes(path)
        return json.loads(_decode_utf8(raw))

    async def write_json(self, path: Path, data: object) -> None:
        await self.write_text(path, _dumps(data))

    async def write_json_atomic(self, path: Path, data: object) -> None:
        await asyncio.to_thread(atomic_write_json, Path(path), data)

    async def remove(self, path: Path) -> None:
        try:
            await asyncio.to_thread(Path(path).unlink, missing_ok=True)
        except OSError as exc:
            raise StackIOError(f"Failed to remove {path}: {exc}") from exc

    async def _read_bytes(self, path: Path) -> bytes:
        try:
            return await asyncio.to_thread(Path(path).read_bytes)
        except OSError as exc:
            raise StackIOError(f"Failed to read {path}: {exc}") from exc


def _decode_utf8(raw: bytes) -> str:
    """Decode as UTF-8; invalid bytes surface as ``json.JSONDecodeError``."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        text = raw.decode("utf-8", errors="replace")
        raise json.JSONDecodeError(f"Invalid UTF-8 ({exc.reason})", text, exc.start) from exc


def _write_text(path: Path, content: str) -> None:
    # newline="" keeps the content byte-for-byte on every platform
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def atomic_write_json(path: Path, data: object) -> None:
    """Write JSON atomically: write to unique temp file then rename."""
    content = _dumps(data)

    fd = None
    tmp_path: str | None = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            suffix=".tmp",
            prefix=f".{path.name}_",
        )
        os.write(fd, content.encode("utf-8"))
        os.fsync(fd)
        os.close(fd)
        fd = None
        os.replace(tmp_path, str(path))
        tmp_path = None
    except PermissionError as exc:
        raise StackIOError(f"Permission denied writing to {path}: {exc}") from exc
    except OSError as exc:
        raise StackIOError(f"Failed to write {path}: {exc}") from exc
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
