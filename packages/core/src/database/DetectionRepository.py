"""Append-only audit trail of resolved sightings."""

import sqlite3

from attendance.errors import RepositoryError
from attendance.models import DetectionRecord
from database.QueryExecutor import QueryExecutor


class DetectionRepository(QueryExecutor):

    def create(self, record: DetectionRecord) -> int:
        try:
            return self._write(
                "INSERT INTO employee_detections "
                "(employee_id, mac_address, scanner_mac, rssi, device_type, "
                "is_itag03, is_target_device, device_name, detected_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.employee_id,
                    record.mac_address.lower(),
                    record.scanner_mac,
                    record.rssi,
                    record.device_type,
                    int(record.is_tag),
                    int(record.is_target_device),
                    record.device_name,
                    record.detected_at.isoformat(),
                ),
            )
        except sqlite3.IntegrityError as e:
            raise RepositoryError(f"Failed to create detection: {e}") from e

    def count_for_employee(self, employee_id: int) -> int:
        row = self._fetch_one(
            "SELECT COUNT(*) FROM employee_detections WHERE employee_id = ?",
            (employee_id,),
        )
        return row[0] if row else 0
