"""All SQLite repositories built over one shared connection."""

from dataclasses import dataclass

from database.AttendanceRepository import AttendanceRepository
from database.DatabaseProvider import DatabaseProvider
from database.DetectionRepository import DetectionRepository
from database.EmployeeRepository import EmployeeRepository
from database.ScannerRepository import ScannerRepository


@dataclass(frozen=True)
class Repositories:
    provider: DatabaseProvider
    employees: EmployeeRepository
    attendance: AttendanceRepository
    detections: DetectionRepository
    scanners: ScannerRepository

    @classmethod
    def open(cls, db_path: str) -> "Repositories":
        """Open the database at ``db_path`` and build every repository on it."""
        provider = DatabaseProvider(db_path)
        return cls(
            provider=provider,
            employees=EmployeeRepository(provider),
            attendance=AttendanceRepository(provider),
            detections=DetectionRepository(provider),
            scanners=ScannerRepository(provider),
        )

    def close(self) -> None:
        self.provider.close()
