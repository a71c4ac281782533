"""Pydantic request/response models for the API."""

from pydantic import BaseModel, Field

from attendance.models import ArrivalEvent, Identity, ScannerStatus, Sighting


class DetectionRequest(BaseModel):
    """Body posted by an ESP32 scanner for every BLE device it sees."""

    scanner_mac: str
    mac_address: str = Field(min_length=1)
    rssi: int
    device_type: str = ""
    itag03: bool = False
    target_device: bool = False
    device_name: str = ""

    def to_sighting(self) -> Sighting:
        return Sighting(
            scanner_mac=self.scanner_mac,
            mac_address=self.mac_address,
            rssi=self.rssi,
            device_type=self.device_type,
            is_tag=self.itag03,
            device_name=self.device_name,
        )


class EmployeeCreate(BaseModel):
    """Body for registering an employee."""

    mac_address: str = Field(min_length=1)
    name: str = Field(min_length=1)
    chat_id: int | None = None
    employee_code: str = ""
    department: str = ""
    work_start_time: str = Field(default="08:00:00", pattern=r"^\d{1,2}:\d{2}:\d{2}$")


class EmployeeSchema(BaseModel):
    """A registered employee."""

    id: int
    name: str
    mac_address: str
    chat_id: int | None
    employee_code: str
    department: str
    work_start_time: str
    is_active: bool

    @classmethod
    def from_identity(cls, identity: Identity) -> "EmployeeSchema":
        return cls(
            id=identity.id,
            name=identity.name,
            mac_address=identity.mac_address,
            chat_id=identity.chat_id,
            employee_code=identity.employee_code,
            department=identity.department,
            work_start_time=identity.work_start_time,
            is_active=identity.is_active,
        )


class AttendanceSchema(BaseModel):
    """A single day's arrival."""

    id: int
    employee_id: int
    check_in_time: str
    scanner_mac: str
    status: str
    created_date: str

    @classmethod
    def from_event(cls, event: ArrivalEvent) -> "AttendanceSchema":
        return cls(
            id=event.id,
            employee_id=event.employee_id,
            check_in_time=event.check_in_time.isoformat(),
            scanner_mac=event.scanner_mac,
            status=event.status.value,
            created_date=event.created_date.isoformat(),
        )


class ScannerSchema(BaseModel):
    """Liveness of one scanner."""

    scanner_mac: str
    last_seen: str

    @classmethod
    def from_status(cls, status: ScannerStatus) -> "ScannerSchema":
        return cls(scanner_mac=status.scanner_mac, last_seen=status.last_seen.isoformat())
