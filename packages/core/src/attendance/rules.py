"""Business rules applied to a resolved sighting.

Both rules are pure functions: the proximity gate decides whether a
sighting is close enough to count, and the timeliness classifier decides
whether an arrival is on time.
"""

from datetime import datetime, time, timedelta

from attendance.models import ON_TIME, Status, Timeliness

# Roughly ten metres for the ESP32 scanners in use.
DEFAULT_RSSI_THRESHOLD = -70
DEFAULT_GRACE_PERIOD = timedelta(minutes=5)

WORK_START_FORMAT = "%H:%M:%S"


def passes_proximity_gate(rssi: int, threshold: int = DEFAULT_RSSI_THRESHOLD) -> bool:
    """Return True unless the signal is strictly weaker than ``threshold``."""
    return rssi >= threshold


def parse_work_start(work_start_time: str | None) -> time | None:
    """Parse an ``HH:MM:SS`` start time, returning None when malformed."""
    if not work_start_time:
        return None
    try:
        return datetime.strptime(work_start_time.strip(), WORK_START_FORMAT).time()
    except ValueError:
        return None


def expected_start(check_in_time: datetime, work_start: time) -> datetime:
    """Combine the arrival's calendar date with the expected start time."""
    return datetime.combine(check_in_time.date(), work_start, tzinfo=check_in_time.tzinfo)


def classify_arrival(
    check_in_time: datetime,
    work_start_time: str | None,
    grace_period: timedelta = DEFAULT_GRACE_PERIOD,
) -> Timeliness:
    """Classify an arrival as on time or late.

    An arrival strictly before ``expected start + grace_period`` is on time.
    A start time that cannot be parsed never penalises the employee.

    Args:
        check_in_time: When the employee was detected.
        work_start_time: Expected start as ``HH:MM:SS`` text.
        grace_period: Tolerance after the expected start.

    Returns:
        The ``Timeliness`` of the arrival. Late arrivals carry the number of
        whole minutes (truncated) since the expected start.
    """
    work_start = parse_work_start(work_start_time)
    if work_start is None:
        return ON_TIME

    start = expected_start(check_in_time, work_start)
    if check_in_time < start + grace_period:
        return ON_TIME

    return Timeliness(Status.LATE, late_minutes=late_minutes(check_in_time, work_start_time))


def late_minutes(check_in_time: datetime, work_start_time: str | None) -> int | None:
    """Return whole minutes between the expected start and the arrival.

    Returns None if the start time is malformed.
    """
    work_start = parse_work_start(work_start_time)
    if work_start is None:
        return None
    elapsed = check_in_time - expected_start(check_in_time, work_start)
    # int() truncates toward zero, which matches the displayed figure.
    return int(elapsed.total_seconds() / 60)
