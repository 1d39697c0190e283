"""Presenters: one-way notification sinks for restore progress."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger("claude_stacks")


class PresenterPort(Protocol):
    """Receives skip/success/warning/failure notices. Never affects control flow."""

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingPresenter:
    """Route presenter messages to the ``claude_stacks`` logger."""

    def info(self, message: str) -> None:
        logger.info(message)

    def success(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)


@dataclass
class CollectingPresenter(LoggingPresenter):
    """Log and also record every message so tools can return them."""

    events: list[dict[str, str]] = field(default_factory=list)

    def _record(self, level: str, message: str) -> None:
        self.events.append({"level": level, "message": message})

    def info(self, message: str) -> None:
        self._record("info", message)
        super().info(message)

    def success(self, message: str) -> None:
        self._record("success", message)
        super().success(message)

    def warning(self, message: str) -> None:
        self._record("warning", message)
        super().warning(message)

    def error(self, message: str) -> None:
        self._record("error", message)
        super().error(message)

    def messages(self, level: str) -> list[str]:
        return [e["message"] for e in self.events if e["level"] == level]
