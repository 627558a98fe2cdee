"""No-op store — keeps server configurations in memory only.

Useful when servers are registered for a single process (tests, one-off
runs) and nothing should be written to disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rbstatus_store.base import BaseStore

if TYPE_CHECKING:
    from rbstatus_core.registry import ServerConfiguration


class NoOpStore(BaseStore):
    """Remembers the last saved list for the lifetime of the object."""

    def __init__(self):
        self._configurations: list[ServerConfiguration] = []

    def load(self) -> list[ServerConfiguration]:
        return list(self._configurations)

    def save(self, configurations: list[ServerConfiguration]) -> None:
        self._configurations = list(configurations)
