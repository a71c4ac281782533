"""Scanner liveness tracking."""

import sqlite3
from datetime import datetime

from attendance.errors import RepositoryError
from attendance.models import ScannerStatus
from database.QueryExecutor import QueryExecutor


class ScannerRepository(QueryExecutor):

    def update_activity(self, scanner_mac: str, seen_at: datetime) -> None:
        """Insert the scanner or bump its ``last_seen`` timestamp."""
        try:
            self._write(
                "INSERT INTO scanners (scanner_mac, last_seen) VALUES (?, ?) "
                "ON CONFLICT(scanner_mac) DO UPDATE SET last_seen = excluded.last_seen",
                (scanner_mac, seen_at.isoformat()),
            )
        except sqlite3.IntegrityError as e:
            raise RepositoryError(f"Failed to update scanner: {e}") from e

    def list_recent(self) -> list[ScannerStatus]:
        """Return all scanners, most recently seen first."""
        rows = self._fetch_all(
            "SELECT scanner_mac, last_seen FROM scanners ORDER BY last_seen DESC"
        )
        return [
            ScannerStatus(row["scanner_mac"], datetime.fromisoformat(row["last_seen"]))
            for row in rows
        ]
