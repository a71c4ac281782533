"""
Beacon attendance: mock data generation.

Creates a SQLite database with demo employees and replays several days of
scanner sightings through the real attendance pipeline, so the database ends
up with realistic arrivals, detections and scanner activity. Notifications
are logged instead of sent.

Usage:
    uv run scripts/generate_mock_data.py [--output PATH] [--seed N] [--days N]
"""

import argparse
import datetime
import random
import sys
from pathlib import Path

# Make the core packages importable when run from a source checkout.
_CORE_SRC = Path(__file__).resolve().parent.parent / "packages" / "core" / "src"
if str(_CORE_SRC) not in sys.path:
    sys.path.insert(0, str(_CORE_SRC))

from attendance.AttendanceService import AttendanceService  # type: ignore
from attendance.interfaces import Collaborators  # type: ignore
from attendance.models import Outcome, Sighting  # type: ignore
from database.Repositories import Repositories  # type: ignore
from notifications.TelegramNotifier import TelegramNotifier  # type: ignore

EMPLOYEES = [
    {"name": "Alice", "code": "E001", "department": "Pharmacy", "start": "08:00:00"},
    {"name": "Bob", "code": "E002", "department": "Pharmacy", "start": "08:00:00"},
    {"name": "Chai", "code": "E003", "department": "Front Desk", "start": "08:30:00"},
    {"name": "Dao", "code": "E004", "department": "Warehouse", "start": "07:30:00"},
    {"name": "Evan", "code": "E005", "department": "Front Desk", "start": "09:00:00"},
]
SCANNERS = ["esp32-entrance", "esp32-back-door"]
SIGHTINGS_PER_EMPLOYEE_DAY = 6
AMBIENT_SIGHTINGS_PER_DAY = 40


def parse_args():
    parser = argparse.ArgumentParser(
        description="Generate mock beacon attendance data (SQLite).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("data/mock.db"),
        help="Output path for the SQLite database file (default: data/mock.db)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--days", type=int, default=5, help="Number of days to simulate")
    return parser.parse_args()


def _random_mac():
    return ":".join(f"{random.randint(0, 255):02X}" for _ in range(6))


def _rssi():
    """Mostly near the door, sometimes from across the building."""
    if random.random() < 0.3:
        return random.randint(-95, -71)
    return random.randint(-70, -40)


def _arrival_time(day, start):
    """Around the employee's start time, give or take half an hour."""
    hour, minute, _ = (int(p) for p in start.split(":"))
    base = datetime.datetime.combine(day, datetime.time(hour, minute))
    return base + datetime.timedelta(minutes=random.gauss(0, 12))


def main():
    args = parse_args()
    seed = args.seed if args.seed is not None else random.randrange(1_000_000)
    random.seed(seed)

    if args.output.exists():
        args.output.unlink()
    repos = Repositories.open(str(args.output))

    employees = [
        repos.employees.register(
            _random_mac(), e["name"], employee_code=e["code"],
            department=e["department"], work_start_time=e["start"],
        )
        for e in EMPLOYEES
    ]

    clock = {"now": datetime.datetime.now()}
    service = AttendanceService(
        Collaborators(
            identities=repos.employees,
            arrivals=repos.attendance,
            detections=repos.detections,
            notifier=TelegramNotifier(""),
            scanners=repos.scanners,
        ),
        clock=lambda: clock["now"],
    )

    today = datetime.date.today()
    sightings = []
    for offset in range(args.days, 0, -1):
        day = today - datetime.timedelta(days=offset - 1)
        for employee in employees:
            first = _arrival_time(day, employee.work_start_time)
            for i in range(SIGHTINGS_PER_EMPLOYEE_DAY):
                sightings.append((first + datetime.timedelta(minutes=3 * i), employee.mac_address))
        for _ in range(AMBIENT_SIGHTINGS_PER_DAY):
            when = datetime.datetime.combine(day, datetime.time(random.randint(6, 20)))
            sightings.append((when, _random_mac()))

    counts = {outcome: 0 for outcome in Outcome}
    for when, mac in sorted(sightings):
        clock["now"] = when
        result = service.process_detection(
            Sighting(scanner_mac=random.choice(SCANNERS), mac_address=mac, rssi=_rssi())
        )
        counts[result.outcome] += 1

    repos.close()

    print(f"Database: {args.output} (seed {seed})")
    for outcome, count in counts.items():
        print(f"  {outcome.value:<26} {count}")


if __name__ == "__main__":
    main()
