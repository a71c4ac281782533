"""Arrival events: the daily check-in log."""

import sqlite3
from datetime import date, datetime, timedelta

from attendance.errors import DuplicateArrivalError, RepositoryError
from attendance.models import ArrivalEvent, Status
from database.QueryExecutor import QueryExecutor

_COLUMNS = "id, employee_id, check_in_time, scanner_mac, status, created_date"


def _to_event(row: sqlite3.Row) -> ArrivalEvent:
    return ArrivalEvent(
        id=row["id"],
        employee_id=row["employee_id"],
        check_in_time=datetime.fromisoformat(row["check_in_time"]),
        scanner_mac=row["scanner_mac"] or "",
        status=Status(row["status"]),
        created_date=date.fromisoformat(row["created_date"]),
    )


class AttendanceRepository(QueryExecutor):
    """SQLite-backed arrival log with one row per employee per day."""

    def has_arrived_today(self, employee_id: int, today: date) -> bool:
        row = self._fetch_one(
            "SELECT 1 FROM attendance WHERE employee_id = ? AND created_date = ? LIMIT 1",
            (employee_id, today.isoformat()),
        )
        return row is not None

    def create(
        self,
        employee_id: int,
        check_in_time: datetime,
        scanner_mac: str,
        status: Status,
    ) -> int:
        """Insert an arrival keyed on the check-in's calendar date.

        The ``UNIQUE(employee_id, created_date)`` constraint makes this an
        atomic create-if-absent.

        Raises:
            DuplicateArrivalError: If the employee already arrived that day.
            RepositoryError: For any other database failure.
        """
        created_date = check_in_time.date().isoformat()
        try:
            return self._write(
                "INSERT INTO attendance "
                "(employee_id, check_in_time, scanner_mac, status, created_date) "
                "VALUES (?, ?, ?, ?, ?)",
                (employee_id, check_in_time.isoformat(), scanner_mac, status.value, created_date),
            )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateArrivalError(
                    f"Employee {employee_id} already checked in on {created_date}"
                ) from e
            raise RepositoryError(f"Failed to create attendance: {e}") from e

    def get_for_day(self, employee_id: int, day: date) -> ArrivalEvent | None:
        row = self._fetch_one(
            f"SELECT {_COLUMNS} FROM attendance WHERE employee_id = ? AND created_date = ?",
            (employee_id, day.isoformat()),
        )
        return _to_event(row) if row else None

    def history(self, employee_id: int, today: date, days: int = 7) -> list[ArrivalEvent]:
        """Return arrivals from ``today - days`` onwards, newest first."""
        start = today - timedelta(days=days)
        rows = self._fetch_all(
            f"SELECT {_COLUMNS} FROM attendance "
            "WHERE employee_id = ? AND created_date >= ? "
            "ORDER BY created_date DESC",
            (employee_id, start.isoformat()),
        )
        return [_to_event(row) for row in rows]
