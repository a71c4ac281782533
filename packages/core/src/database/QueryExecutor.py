"""Parameterised SQL execution shared by the repositories.

Every statement runs under the provider's lock and inside a transaction, and
driver errors are re-raised as ``RepositoryError`` so callers never need to
know they are talking to SQLite.
"""

import sqlite3

from attendance.errors import RepositoryError
from database.DatabaseProvider import DatabaseProvider


class QueryExecutor:
    """Base class for repositories backed by a ``DatabaseProvider``."""

    def __init__(self, provider: DatabaseProvider) -> None:
        self._provider = provider
        self._connection = provider.get_connection()

    def _fetch_all(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute a SELECT and return all rows.

        Raises:
            RepositoryError: If the database returns an error.
        """
        with self._provider.lock:
            try:
                return self._connection.execute(query, params).fetchall()
            except sqlite3.Error as e:
                raise RepositoryError(f"Query execution failed: {e}") from e

    def _fetch_one(self, query: str, params: tuple = ()) -> sqlite3.Row | None:
        rows = self._fetch_all(query, params)
        return rows[0] if rows else None

    def _write(self, statement: str, params: tuple = ()) -> int:
        """Execute an INSERT/UPDATE in its own transaction.

        Returns:
            The rowid of the last inserted row.

        Raises:
            sqlite3.IntegrityError: Left to the caller, which knows which
                constraint it is guarding.
            RepositoryError: For any other database error.
        """
        with self._provider.lock:
            try:
                with self._connection:
                    cursor = self._connection.execute(statement, params)
                    return cursor.lastrowid
            except sqlite3.IntegrityError:
                raise
            except sqlite3.Error as e:
                raise RepositoryError(f"Statement execution failed: {e}") from e
