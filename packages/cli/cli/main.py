"""Command-line interface for administering the attendance database.

Mirrors the admin features of the API: register employees, inspect today's
check-in and recent history, list scanners, and feed a sighting through the
pipeline by hand (useful when testing a scanner on the bench).
"""

import argparse
import sys
from datetime import date

from attendance.AttendanceService import AttendanceService
from attendance.config import configure_logging, load_settings
from attendance.errors import DetectionError, DuplicateEmployeeError
from attendance.interfaces import Collaborators
from attendance.messages import describe_status
from attendance.models import Sighting, Timeliness
from database.Repositories import Repositories
from notifications.TelegramNotifier import TelegramNotifier


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="attendance-cli",
        description="Beacon attendance administration",
    )
    parser.add_argument("--db", help="SQLite database path (defaults to DB_PATH)")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    register = sub.add_parser("register", help="Register an employee")
    register.add_argument("mac_address")
    register.add_argument("name")
    register.add_argument("--chat-id", type=int, default=None)
    register.add_argument("--code", default="", help="Employee code")
    register.add_argument("--department", default="")
    register.add_argument("--start", default="08:00:00", help="Work start time (HH:MM:SS)")

    sub.add_parser("employees", help="List active employees")

    myinfo = sub.add_parser("myinfo", help="Show the employee linked to a Telegram chat")
    myinfo.add_argument("--chat-id", type=int, required=True)

    today = sub.add_parser("today", help="Show today's check-in for an employee")
    today.add_argument("employee_id", type=int)

    history = sub.add_parser("history", help="Show recent check-ins for an employee")
    history.add_argument("employee_id", type=int)
    history.add_argument("--days", type=int, default=7)

    sub.add_parser("scanners", help="List scanners by last activity")

    detect = sub.add_parser("detect", help="Process a single sighting")
    detect.add_argument("mac_address")
    detect.add_argument("--rssi", type=int, default=-50)
    detect.add_argument("--scanner", default="cli")
    detect.add_argument("--device-type", default="")

    return parser.parse_args(argv)


def _detect(args: argparse.Namespace, repos: Repositories, settings) -> int:
    notifier = TelegramNotifier(settings.telegram_bot_token, settings.admin_chat_id)
    service = AttendanceService(
        Collaborators(
            identities=repos.employees,
            arrivals=repos.attendance,
            detections=repos.detections,
            notifier=notifier,
            scanners=repos.scanners,
        ),
        rssi_threshold=settings.rssi_threshold,
        grace_period=settings.grace_period,
    )
    sighting = Sighting(
        scanner_mac=args.scanner,
        mac_address=args.mac_address,
        rssi=args.rssi,
        device_type=args.device_type,
    )
    try:
        result = service.process_detection(sighting)
    except DetectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        notifier.close()

    line = f"Outcome: {result.outcome.value}"
    if result.timeliness is not None:
        line += f" ({describe_status(result.timeliness)})"
    print(line)
    return 0


def run(args: argparse.Namespace) -> int:
    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    repos = Repositories.open(args.db or settings.db_path)
    try:
        if args.command == "init-db":
            print(f"Database ready at {args.db or settings.db_path}")

        elif args.command == "register":
            try:
                employee = repos.employees.register(
                    args.mac_address,
                    args.name,
                    chat_id=args.chat_id,
                    employee_code=args.code,
                    department=args.department,
                    work_start_time=args.start,
                )
            except DuplicateEmployeeError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
            print(f"Registered #{employee.id}: {employee.name} ({employee.mac_address})")

        elif args.command == "employees":
            for e in repos.employees.list_active():
                print(f"#{e.id}  {e.name:<20} {e.mac_address}  start {e.work_start_time}")

        elif args.command == "myinfo":
            employee = repos.employees.get_by_chat_id(args.chat_id)
            if employee is None:
                print(f"No employee linked to chat {args.chat_id}", file=sys.stderr)
                return 1
            print(f"#{employee.id}: {employee.name}")
            print(f"Code: {employee.employee_code or '-'}  Department: {employee.department or '-'}")
            print(f"MAC: {employee.mac_address}  Start: {employee.work_start_time}")

        elif args.command == "today":
            event = repos.attendance.get_for_day(args.employee_id, date.today())
            if event is None:
                print("No check-in today")
            else:
                print(f"In: {event.check_in_time:%H:%M}  Status: {event.status.value}")

        elif args.command == "history":
            events = repos.attendance.history(args.employee_id, date.today(), args.days)
            if not events:
                print("No history found")
            for event in events:
                status = describe_status(Timeliness(event.status))
                print(f"{event.created_date:%d/%m}: {status}")

        elif args.command == "scanners":
            scanners = repos.scanners.list_recent()
            if not scanners:
                print("No scanners found")
            for s in scanners:
                print(f"- {s.scanner_mac} ({s.last_seen:%Y-%m-%d %H:%M:%S})")

        elif args.command == "detect":
            return _detect(args, repos, settings)

        return 0
    finally:
        repos.close()


def main(argv: list[str] | None = None) -> None:
    sys.exit(run(parse_args(argv)))


if __name__ == "__main__":
    main()
