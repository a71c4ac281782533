"""Collaborator protocols the attendance pipeline depends on.

The pipeline never talks to SQLite or Telegram directly; it is handed a
``Collaborators`` bundle built once at start-up.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from attendance.models import DetectionRecord, Identity, Status


class IdentityLookup(Protocol):
    """Resolve a hardware address to an active employee."""

    def get_by_mac_address(self, mac_address: str) -> Identity | None:
        """Return the matching active employee, or None when unknown."""
        ...


class ArrivalLog(Protocol):
    """Read and append first-arrival-of-day events."""

    def has_arrived_today(self, employee_id: int, today: date) -> bool:
        ...

    def create(
        self,
        employee_id: int,
        check_in_time: datetime,
        scanner_mac: str,
        status: Status,
    ) -> int:
        """Persist an arrival and return its identifier.

        Raises:
            DuplicateArrivalError: If one already exists for that day.
        """
        ...


class DetectionLog(Protocol):
    """Append-only audit trail of resolved sightings."""

    def create(self, record: DetectionRecord) -> int:
        ...


class ScannerLog(Protocol):
    """Track when each scanner last reported."""

    def update_activity(self, scanner_mac: str, seen_at: datetime) -> None:
        ...


class Notifier(Protocol):
    """Deliver messages. Implementations log their own failures."""

    def send_personal(self, chat_id: int, message: str) -> None:
        ...

    def send_admin(self, message: str) -> None:
        ...


@dataclass(frozen=True)
class Collaborators:
    """Everything the pipeline calls out to."""

    identities: IdentityLookup
    arrivals: ArrivalLog
    detections: DetectionLog
    notifier: Notifier
    scanners: ScannerLog | None = None
