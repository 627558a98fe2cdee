"""Build log sink used by the notifier and patch steps."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class BuildListener:
    """Collects build log lines and mirrors them to the logging module.

    Steps report through a listener instead of raising, so the host decides
    how the lines reach the user. Subclasses override _emit() to print.
    """

    def __init__(self):
        self.lines: list[str] = []

    def info(self, message: str) -> None:
        self.lines.append(message)
        logger.info(message)
        self._emit(message, error=False)

    def error(self, message: str) -> None:
        self.lines.append(f"ERROR: {message}")
        logger.error(message)
        self._emit(message, error=True)

    def contains(self, text: str) -> bool:
        return any(text in line for line in self.lines)

    def _emit(self, message: str, error: bool) -> None:
        pass
