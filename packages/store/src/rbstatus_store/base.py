"""Abstract store interface.

Any backend that persists the Review Board server list (JSON file, SQLite)
implements this interface. ServerRegistry depends on BaseStore, not on a
concrete backend, so backends are swappable without touching core code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rbstatus_core.registry import ServerConfiguration


class BaseStore(ABC):
    """Pluggable persistence for server configurations.

    save() always receives the complete list and replaces whatever was
    stored before; there is no incremental edit.
    """

    @abstractmethod
    def load(self) -> list[ServerConfiguration]:
        """Return the stored configurations in their saved order.

        Returns an empty list if nothing has been saved yet.
        """

    @abstractmethod
    def save(self, configurations: list[ServerConfiguration]) -> None:
        """Replace the stored configurations with ``configurations``."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional — subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
