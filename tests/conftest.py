"""Shared fixtures: in-memory collaborators for the attendance pipeline."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from attendance.AttendanceService import AttendanceService
from attendance.errors import DuplicateArrivalError, RepositoryError
from attendance.interfaces import Collaborators
from attendance.models import DetectionRecord, Identity, Status
from database.Repositories import Repositories

ALICE_MAC = "aa:bb:cc:dd:ee:01"


class FakeIdentities:
    def __init__(self, *identities: Identity) -> None:
        self.by_mac = {i.mac_address.lower(): i for i in identities}
        self.fail = False

    def get_by_mac_address(self, mac_address: str) -> Identity | None:
        if self.fail:
            raise RepositoryError("identity store unavailable")
        identity = self.by_mac.get(mac_address.lower())
        return identity if identity and identity.is_active else None


class FakeArrivals:
    def __init__(self) -> None:
        self.created: list[tuple[int, datetime, str, Status]] = []
        self.fail_check = False
        self.fail_create = False
        self.race_lost = False

    def has_arrived_today(self, employee_id: int, today: date) -> bool:
        if self.fail_check:
            raise RepositoryError("attendance store unavailable")
        return any(e == employee_id and t.date() == today for e, t, _, _ in self.created)

    def create(self, employee_id, check_in_time, scanner_mac, status) -> int:
        if self.fail_create:
            raise RepositoryError("insert failed")
        if self.race_lost:
            raise DuplicateArrivalError("already there")
        self.created.append((employee_id, check_in_time, scanner_mac, status))
        return len(self.created)


class FakeDetections:
    def __init__(self) -> None:
        self.records: list[DetectionRecord] = []
        self.fail = False

    def create(self, record: DetectionRecord) -> int:
        if self.fail:
            raise RepositoryError("audit insert failed")
        self.records.append(record)
        return len(self.records)


class FakeScanners:
    def __init__(self) -> None:
        self.seen: dict[str, datetime] = {}

    def update_activity(self, scanner_mac: str, seen_at: datetime) -> None:
        self.seen[scanner_mac] = seen_at


class FakeNotifier:
    def __init__(self) -> None:
        self.personal: list[tuple[int, str]] = []
        self.admin: list[str] = []
        self.fail = False

    def send_personal(self, chat_id: int, message: str) -> None:
        if self.fail:
            raise ConnectionError("telegram down")
        self.personal.append((chat_id, message))

    def send_admin(self, message: str) -> None:
        if self.fail:
            raise ConnectionError("telegram down")
        self.admin.append(message)


class Clock:
    """Settable stand-in for ``datetime.now``."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def alice() -> Identity:
    return Identity(
        id=1,
        name="Alice",
        mac_address=ALICE_MAC,
        chat_id=1001,
        work_start_time="08:00:00",
    )


@pytest.fixture
def identities(alice: Identity) -> FakeIdentities:
    return FakeIdentities(alice)


@pytest.fixture
def arrivals() -> FakeArrivals:
    return FakeArrivals()


@pytest.fixture
def detections() -> FakeDetections:
    return FakeDetections()


@pytest.fixture
def scanners() -> FakeScanners:
    return FakeScanners()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2026, 2, 2, 8, 3, 0))


@pytest.fixture
def service(identities, arrivals, detections, scanners, notifier, clock) -> AttendanceService:
    collaborators = Collaborators(
        identities=identities,
        arrivals=arrivals,
        detections=detections,
        notifier=notifier,
        scanners=scanners,
    )
    return AttendanceService(collaborators, clock=clock)


@pytest.fixture
def repos(tmp_path: Path):
    repositories = Repositories.open(str(tmp_path / "attendance.db"))
    yield repositories
    repositories.close()
