"""Employee lookups and registration."""

import sqlite3

from attendance.errors import DuplicateEmployeeError, RepositoryError
from attendance.models import Identity
from database.QueryExecutor import QueryExecutor

_COLUMNS = (
    "id, name, mac_address, telegram_chat_id, work_start_time, is_active, "
    "employee_code, department"
)


def normalize_mac(mac_address: str) -> str:
    """Return the canonical (stripped, lower-case) form of a MAC address."""
    return mac_address.strip().lower()


def _to_identity(row: sqlite3.Row) -> Identity:
    return Identity(
        id=row["id"],
        name=row["name"],
        mac_address=row["mac_address"],
        chat_id=row["telegram_chat_id"],
        work_start_time=row["work_start_time"],
        is_active=bool(row["is_active"]),
        employee_code=row["employee_code"] or "",
        department=row["department"] or "",
    )


class EmployeeRepository(QueryExecutor):
    """SQLite-backed store of registered employees."""

    def get_by_mac_address(self, mac_address: str) -> Identity | None:
        """Return the active employee owning ``mac_address``, if any.

        Matching is case-insensitive.
        """
        row = self._fetch_one(
            f"SELECT {_COLUMNS} FROM employees WHERE mac_address = ? AND is_active = 1",
            (normalize_mac(mac_address),),
        )
        return _to_identity(row) if row else None

    def get_by_id(self, employee_id: int) -> Identity | None:
        row = self._fetch_one(
            f"SELECT {_COLUMNS} FROM employees WHERE id = ?", (employee_id,)
        )
        return _to_identity(row) if row else None

    def get_by_chat_id(self, chat_id: int) -> Identity | None:
        row = self._fetch_one(
            f"SELECT {_COLUMNS} FROM employees WHERE telegram_chat_id = ? AND is_active = 1 LIMIT 1",
            (chat_id,),
        )
        return _to_identity(row) if row else None

    def list_active(self) -> list[Identity]:
        rows = self._fetch_all(
            f"SELECT {_COLUMNS} FROM employees WHERE is_active = 1 ORDER BY name"
        )
        return [_to_identity(row) for row in rows]

    def register(
        self,
        mac_address: str,
        name: str,
        chat_id: int | None = None,
        employee_code: str = "",
        department: str = "",
        work_start_time: str = "08:00:00",
    ) -> Identity:
        """Register a new employee.

        Raises:
            DuplicateEmployeeError: If the MAC address is already registered.
            RepositoryError: For any other database failure.
        """
        mac = normalize_mac(mac_address)
        try:
            employee_id = self._write(
                "INSERT INTO employees "
                "(name, mac_address, telegram_chat_id, employee_code, department, work_start_time) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (name, mac, chat_id, employee_code, department, work_start_time),
            )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateEmployeeError(f"MAC address {mac} is already registered") from e
            raise RepositoryError(f"Failed to register employee: {e}") from e

        return Identity(
            id=employee_id,
            name=name,
            mac_address=mac,
            chat_id=chat_id,
            work_start_time=work_start_time,
            employee_code=employee_code,
            department=department,
        )
