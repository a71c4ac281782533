"""
Tests for the proximity gate and the timeliness classifier.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from attendance.models import Status
from attendance.rules import (
    DEFAULT_RSSI_THRESHOLD,
    classify_arrival,
    late_minutes,
    parse_work_start,
    passes_proximity_gate,
)


def at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2026, 2, 1, hour, minute, second)


@pytest.mark.parametrize(
    "rssi, expected",
    [(-40, True), (-70, True), (-71, False), (-95, False)],
)
def test_proximity_gate_rejects_only_strictly_weaker_signals(rssi: int, expected: bool) -> None:
    assert DEFAULT_RSSI_THRESHOLD == -70
    assert passes_proximity_gate(rssi) is expected


def test_proximity_gate_honours_custom_threshold() -> None:
    assert passes_proximity_gate(-75, threshold=-80)
    assert not passes_proximity_gate(-75, threshold=-60)


@pytest.mark.parametrize(
    "arrival, status",
    [
        (at(8, 0), Status.ON_TIME),
        (at(7, 45), Status.ON_TIME),
        (at(8, 4), Status.ON_TIME),
        (at(8, 4, 59), Status.ON_TIME),
        (at(8, 5), Status.LATE),
        (at(8, 5, 1), Status.LATE),
        (at(8, 6), Status.LATE),
        (at(8, 30), Status.LATE),
    ],
)
def test_classification_boundaries(arrival: datetime, status: Status) -> None:
    assert classify_arrival(arrival, "08:00:00").status is status


def test_late_arrivals_carry_whole_minutes() -> None:
    assert classify_arrival(at(8, 6), "08:00:00").late_minutes == 6
    assert classify_arrival(at(8, 30), "08:00:00").late_minutes == 30
    # 10 minutes 59 seconds is reported as 10
    assert classify_arrival(at(8, 10, 59), "08:00:00").late_minutes == 10


def test_on_time_arrivals_have_no_late_minutes() -> None:
    assert classify_arrival(at(8, 4), "08:00:00").late_minutes is None


@pytest.mark.parametrize("bad", ["invalid", "", None, "25:00:00", "8am", "08:00"])
def test_malformed_start_time_is_always_on_time(bad) -> None:
    result = classify_arrival(at(11, 0), bad)
    assert result.status is Status.ON_TIME
    assert late_minutes(at(11, 0), bad) is None


def test_custom_grace_period() -> None:
    assert classify_arrival(at(8, 9), "08:00:00", timedelta(minutes=10)).status is Status.ON_TIME
    assert classify_arrival(at(8, 1), "08:00:00", timedelta(0)).status is Status.LATE


def test_expected_start_uses_arrival_timezone() -> None:
    tz = timezone(timedelta(hours=7))
    arrival = datetime(2026, 2, 1, 8, 20, tzinfo=tz)
    result = classify_arrival(arrival, "08:00:00")
    assert result.status is Status.LATE
    assert result.late_minutes == 20


def test_parse_work_start_accepts_surrounding_whitespace() -> None:
    assert parse_work_start(" 07:30:00 ") == at(7, 30).time()
