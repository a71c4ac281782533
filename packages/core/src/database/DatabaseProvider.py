"""SQLite database connection provider.

Opens a read-write connection to the attendance database and makes sure the
schema exists. The connection is shared by every repository, and the
repositories serialise their statements on ``DatabaseProvider.lock``.
"""

import sqlite3
import threading
from pathlib import Path

from database.schema import SCHEMA_SQL

# Seconds to wait for a locked database before sqlite3 gives up.
CONNECT_TIMEOUT = 10.0


class DatabaseProvider:
    """Manage a single SQLite connection shared across worker threads."""

    def __init__(self, db_path: str) -> None:
        """Open (creating if needed) the database file and apply the schema.

        Args:
            db_path: Filesystem path to the SQLite database, or ``:memory:``.

        Raises:
            ConnectionError: If SQLite cannot open the file or apply the schema.
        """
        target = db_path
        if db_path != ":memory:":
            path = Path(db_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path.resolve())

        self.lock = threading.Lock()
        try:
            # FastAPI runs sync routes in a threadpool, hence check_same_thread.
            self._connection = sqlite3.connect(
                target, timeout=CONNECT_TIMEOUT, check_same_thread=False
            )
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
            self._connection.executescript(SCHEMA_SQL)
        except sqlite3.Error as e:
            raise ConnectionError(
                f"Failed to open database at '{target}': {e}"
            ) from e

    def get_connection(self) -> sqlite3.Connection:
        """Return the underlying SQLite connection."""
        return self._connection

    def close(self) -> None:
        self._connection.close()
