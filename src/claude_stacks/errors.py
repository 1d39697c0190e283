"""Exception hierarchy for claude-stacks.

All exceptions inherit from StacksError (single catch point).
Messages are written for LLM consumption -- clear, actionable, no stack traces.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from claude_stacks.models import RestorePhase


class StacksError(Exception):
    """Base exception for all claude-stacks errors."""


class ManifestNotFoundError(StacksError):
    """The stack manifest path does not exist."""


class ManifestParseError(StacksError):
    """The stack manifest is not valid JSON or has the wrong shape."""


class StackIOError(StacksError):
    """A directory, read, write, or rename operation failed."""


class RegistryFetchError(StacksError):
    """Error communicating with the remote stack registry."""


class ComponentWriteError(StacksError):
    """One or more component files in a single category failed to write.

    Every item was attempted; ``errors`` lists each failed item with its cause.
    """

    def __init__(self, category: str, errors: list[tuple[str, Exception]]) -> None:
        self.category = category
        self.errors = errors
        details = "; ".join(f"{name}: {exc}" for name, exc in errors)
        super().__init__(f"Failed to write {len(errors)} {category} file(s): {details}")


class RestoreError(StacksError):
    """A restore phase failed; later phases were not run."""

    def __init__(self, phase: RestorePhase, cause: Exception) -> None:
        self.phase = phase
        self.cause = cause
        super().__init__(f"Restore failed during {phase}: {cause}")
