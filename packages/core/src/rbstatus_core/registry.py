"""Review Board server configurations and the registry that looks them up.

The registry is the only state shared between concurrent builds. One lock
guards both the list swap in replace_all() and the traversal in lookup(),
so a reader sees either the old list or the new one, never a mix. The lock
is never held across a network call.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from rbstatus_core.errors import InvalidServerURL
from rbstatus_core.urls import urls_equivalent

if TYPE_CHECKING:
    from rbstatus_store.base import BaseStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerConfiguration:
    """A Review Board server URL and the ID of the credential holding its API token."""

    server_url: str
    credential_id: str


class ServerRegistry:
    """Holds the configured Review Board servers.

    A registry starts unloaded (``loaded`` is False) until load() or
    replace_all() populates it; an empty list is a loaded registry with no
    servers. Persistence is delegated to an optional store.
    """

    def __init__(
        self,
        store: BaseStore | None = None,
        configurations: Iterable[ServerConfiguration] | None = None,
    ):
        self._lock = threading.Lock()
        self._store = store
        self._configurations: list[ServerConfiguration] | None = (
            list(configurations) if configurations is not None else None
        )

    @property
    def loaded(self) -> bool:
        with self._lock:
            return self._configurations is not None

    def load(self) -> list[ServerConfiguration]:
        """Replace the in-memory list with what the store holds."""
        if self._store is None:
            raise RuntimeError("ServerRegistry.load() requires a store")
        configurations = list(self._store.load())
        with self._lock:
            self._configurations = configurations
        logger.debug("Loaded %d Review Board server configuration(s).", len(configurations))
        return list(configurations)

    def replace_all(self, configurations: Iterable[ServerConfiguration]) -> None:
        """Persist a whole new list, then swap it in.

        If the store fails to save, the exception propagates and the
        in-memory list is left unchanged.
        """
        new_list = list(configurations)
        with self._lock:
            if self._store is not None:
                self._store.save(list(new_list))
            self._configurations = new_list

    def get_all(self) -> list[ServerConfiguration]:
        with self._lock:
            return list(self._configurations or [])

    def lookup(self, server_url: str) -> ServerConfiguration | None:
        """Return the first configuration whose URL is URI-equivalent to ``server_url``.

        Entries whose stored URL is malformed never match.
        """
        with self._lock:
            for config in self._configurations or []:
                try:
                    if urls_equivalent(config.server_url, server_url):
                        return config
                except InvalidServerURL as e:
                    logger.warning("Skipping server configuration %r: %s", config.server_url, e)
        return None
