"""Notification texts sent when an employee checks in.

Messages use Telegram's legacy Markdown: ``*bold*`` and ``\\`code\\```.
"""

from datetime import datetime

from attendance.models import Identity, Timeliness

TIME_FORMAT = "%H:%M:%S"


def describe_status(timeliness: Timeliness) -> str:
    """Return the human-readable status line for an arrival."""
    if not timeliness.is_late:
        return "On time"
    return describe_lateness(timeliness.late_minutes)


def describe_lateness(minutes: int | None) -> str:
    """Return ``"Late by N minutes"``, or just ``"Late"`` when unknown."""
    if minutes is None:
        return "Late"
    unit = "minute" if minutes == 1 else "minutes"
    return f"Late by {minutes} {unit}"


def compose_check_in_message(
    identity: Identity,
    check_in_time: datetime,
    scanner_mac: str,
    timeliness: Timeliness,
) -> str:
    """Return the personal check-in confirmation for an employee."""
    icon = "⚠️" if timeliness.is_late else "✅"
    return (
        f"{icon} *Good morning, {identity.name}!*\n\n"
        f"🕐 Check-in time: `{check_in_time.strftime(TIME_FORMAT)}`\n"
        f"📍 Location: `Scanner {scanner_mac}`\n"
        f"⏰ Status: *{describe_status(timeliness)}*\n\n"
        "Have a great day at work! 😊"
    )


def compose_late_admin_message(
    identity: Identity,
    check_in_time: datetime,
    timeliness: Timeliness,
) -> str:
    """Return the admin alert for a late arrival."""
    return (
        "⚠️ *Late arrival*\n"
        f"👤 Name: `{identity.name}`\n"
        f"🕐 Time: `{check_in_time.strftime(TIME_FORMAT)}`\n"
        f"⏰ {describe_lateness(timeliness.late_minutes)}"
    )
