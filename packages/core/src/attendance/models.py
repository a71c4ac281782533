"""Data models for sightings, employees and attendance records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Status(str, Enum):
    """Timeliness of an arrival. Values are the stored representation."""

    ON_TIME = "ontime"
    LATE = "late"


@dataclass(frozen=True)
class Timeliness:
    """Classification of a single arrival.

    Attributes:
        status: ``Status.ON_TIME`` or ``Status.LATE``.
        late_minutes: Whole minutes past the expected start. Only set for
            late arrivals whose expected start time could be parsed.
    """

    status: Status
    late_minutes: int | None = None

    @property
    def is_late(self) -> bool:
        return self.status is Status.LATE


ON_TIME = Timeliness(Status.ON_TIME)


class Outcome(str, Enum):
    """Terminal state of a successfully processed sighting."""

    IGNORED_UNKNOWN = "ignored_unknown"
    IGNORED_TOO_FAR = "ignored_too_far"
    IGNORED_ALREADY_ARRIVED = "ignored_already_arrived"
    RECORDED = "recorded"


@dataclass(frozen=True)
class Sighting:
    """One raw BLE observation reported by a scanner.

    Attributes:
        scanner_mac: Identifier of the reporting scanner.
        mac_address: Observed hardware address of the device.
        rssi: Signal strength in dBm; larger (closer to zero) is nearer.
        device_type: Opaque label assigned by the scanner firmware.
        is_tag: True when the firmware recognised a known tag pattern.
        device_name: Optional name supplied by the firmware.
    """

    scanner_mac: str
    mac_address: str
    rssi: int
    device_type: str = ""
    is_tag: bool = False
    device_name: str = ""


@dataclass(frozen=True)
class Identity:
    """A registered employee whose device can be tracked."""

    id: int
    name: str
    mac_address: str
    chat_id: int | None
    work_start_time: str
    is_active: bool = True
    employee_code: str = ""
    department: str = ""


@dataclass(frozen=True)
class ArrivalEvent:
    """The first qualifying arrival of an employee on a calendar day."""

    id: int
    employee_id: int
    check_in_time: datetime
    scanner_mac: str
    status: Status
    created_date: date


@dataclass(frozen=True)
class DetectionRecord:
    """Audit entry for a sighting that resolved to a known employee."""

    employee_id: int
    mac_address: str
    scanner_mac: str
    rssi: int
    device_type: str
    is_tag: bool
    is_target_device: bool
    device_name: str
    detected_at: datetime


@dataclass(frozen=True)
class ScannerStatus:
    """Last time a scanner reported anything."""

    scanner_mac: str
    last_seen: datetime


@dataclass
class DetectionResult:
    """What the pipeline did with a sighting.

    Attributes:
        outcome: Terminal state reached.
        employee_id: Resolved employee, if any.
        arrival_id: Identifier of the created arrival (``RECORDED`` only).
        timeliness: Classification of the arrival (``RECORDED`` only).
        notes: Best-effort steps that failed along the way.
    """

    outcome: Outcome
    employee_id: int | None = None
    arrival_id: int | None = None
    timeliness: Timeliness | None = None
    notes: list[str] = field(default_factory=list)
