"""HTTP client for the remote stack registry.

Stacks are addressed as ``org/name``:
``GET {base}/v1/stacks/{org}/{name}`` returns the stack body and
``POST {base}/v1/stacks/{org}/{name}/install`` records an install.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import quote as urlquote

import httpx

from claude_stacks.errors import RegistryFetchError, StacksError
from claude_stacks.models import RemoteStackInfo, StackManifest

logger = logging.getLogger(__name__)

_USER_AGENT = "claude-stacks"


def _now_iso() -> str:
    """Return current UTC time as an ISO 8601 string with Z suffix."""
    return datetime.now(tz=UTC).isoformat().replace("+00:00", "Z")


def _stack_url(base_url: str, stack_id: str) -> str:
    segments = [urlquote(part, safe="") for part in stack_id.strip("/").split("/") if part]
    return f"{base_url}/v1/stacks/{'/'.join(segments)}"


@dataclass
class StackRegistryClient:
    """Async client for fetching published stacks."""

    http: httpx.AsyncClient
    base_url: str

    async def fetch_stack(self, stack_id: str) -> tuple[StackManifest, RemoteStackInfo]:
        """Fetch a stack and convert it to a local manifest.

        Raises:
            RegistryFetchError: If the stack is missing or the request fails.
        """
        try:
            response = await self.http.get(
                _stack_url(self.base_url, stack_id),
                headers={"User-Agent": _USER_AGENT},
            )
        except httpx.HTTPError as exc:
            raise RegistryFetchError(f"Failed to fetch stack '{stack_id}': {exc}") from exc

        if response.status_code == 404:
            raise RegistryFetchError(
                f"Stack '{stack_id}' not found. It may be private or not exist."
            )
        if response.is_error:
            raise RegistryFetchError(
                f"Failed to fetch stack '{stack_id}': HTTP {response.status_code} {response.text}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise RegistryFetchError(f"Stack '{stack_id}' returned invalid JSON: {exc}") from exc
        if not isinstance(body, dict):
            raise RegistryFetchError(f"Stack '{stack_id}' returned an unexpected payload.")

        return self._to_manifest(body, stack_id), RemoteStackInfo(
            stack_id=stack_id,
            name=str(body.get("name", "")),
            author=str(body.get("author", "") or ""),
        )

    async def track_install(self, stack_id: str) -> None:
        """Record an install. Failures are logged and ignored."""
        try:
            response = await self.http.post(
                f"{_stack_url(self.base_url, stack_id)}/install",
                headers={"User-Agent": _USER_AGENT},
            )
            if response.is_error:
                logger.debug("Install tracking returned HTTP %s", response.status_code)
        except httpx.HTTPError:
            logger.debug("Install tracking unavailable for %s", stack_id, exc_info=True)

    def _to_manifest(self, body: dict, stack_id: str) -> StackManifest:
        metadata = body.get("metadata") if isinstance(body.get("metadata"), dict) else {}
        normalized = {
            "name": body.get("name", stack_id),
            "description": body.get("description", ""),
            "version": body.get("version") or "1.0.0",
            "commands": body.get("commands") or [],
            "agents": body.get("agents") or [],
            "mcpServers": body.get("mcpServers") or [],
            "settings": body.get("settings") or {},
            "claudeMd": body.get("claudeMd"),
            "metadata": {
                **metadata,
                "installed_from": f"commands.com/{stack_id}",
                "installed_at": _now_iso(),
            },
        }
        try:
            return StackManifest.from_dict(normalized, source=f"remote:{stack_id}")
        except StacksError as exc:
            raise RegistryFetchError(f"Stack '{stack_id}' is malformed: {exc}") from exc
