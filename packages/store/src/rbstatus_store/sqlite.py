"""SQLiteStore — server configurations in a local SQLite database.

Schema:
  servers  — one row per configuration; ``position`` keeps registry order,
             since lookups return the first URI-equivalent match.
"""

from __future__ import annotations

import logging
import sqlite3

from rbstatus_core.registry import ServerConfiguration
from rbstatus_store.base import BaseStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS servers (
    position        INTEGER PRIMARY KEY,
    server_url      TEXT NOT NULL,
    credential_id   TEXT NOT NULL DEFAULT ''
);
"""


class SQLiteStore(BaseStore):
    """Stores server configurations in a SQLite database file.

    The database file path defaults to `.rbstatus.db` in the current working
    directory. Configure via .rbstatus.yml: `store_path: /path/to/rbstatus.db`.
    """

    def __init__(self, db_path: str = ".rbstatus.db"):
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def load(self) -> list[ServerConfiguration]:
        rows = self._conn.execute("SELECT server_url, credential_id FROM servers ORDER BY position").fetchall()
        return [self._row_to_config(r) for r in rows]

    def save(self, configurations: list[ServerConfiguration]) -> None:
        # One transaction: readers see the old list or the new one.
        with self._conn:
            self._conn.execute("DELETE FROM servers")
            self._conn.executemany(
                "INSERT INTO servers (position, server_url, credential_id) VALUES (?, ?, ?)",
                [(i, c.server_url, c.credential_id) for i, c in enumerate(configurations)],
            )
        logger.debug("Saved %d server configuration(s).", len(configurations))

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_config(row: sqlite3.Row) -> ServerConfiguration:
        return ServerConfiguration(
            server_url=row["server_url"],
            credential_id=row["credential_id"] or "",
        )
