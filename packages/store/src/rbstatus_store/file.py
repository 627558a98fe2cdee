"""FileStore — the server list as a JSON file.

Data format: a JSON array of ``{"server_url": ..., "credential_id": ...}``
objects, in registry order. The file only holds credential IDs, never the
API tokens themselves, so it is safe to commit next to a CI job definition.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from rbstatus_core.registry import ServerConfiguration
from rbstatus_store.base import BaseStore

logger = logging.getLogger(__name__)


class FileStore(BaseStore):
    """Stores server configurations in a JSON file.

    save() writes to a temporary file and renames it over the old one, so a
    crash mid-write leaves the previous list intact.
    """

    def __init__(self, path: str = ".rbstatus-servers.json"):
        self._path = Path(path)

    def load(self) -> list[ServerConfiguration]:
        if not self._path.exists():
            return []
        try:
            records = json.loads(self._path.read_text(encoding="utf-8")) or []
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable server list %s: %s", self._path, e)
            return []
        if not isinstance(records, list):
            logger.warning("Ignoring server list %s: expected a JSON array", self._path)
            return []
        return [self._from_dict(r) for r in records if isinstance(r, dict)]

    def save(self, configurations: list[ServerConfiguration]) -> None:
        payload = json.dumps([self._to_dict(c) for c in configurations], indent=2)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(payload + "\n", encoding="utf-8")
        os.replace(tmp_path, self._path)

    @staticmethod
    def _to_dict(config: ServerConfiguration) -> dict:
        return {
            "server_url": config.server_url,
            "credential_id": config.credential_id,
        }

    @staticmethod
    def _from_dict(d: dict) -> ServerConfiguration:
        return ServerConfiguration(
            server_url=d.get("server_url", ""),
            credential_id=d.get("credential_id", ""),
        )
