"""Detection-to-attendance pipeline.

Turns a raw scanner sighting into at most one arrival per employee per day:
resolve the device, note scanner activity, audit the sighting, apply the
proximity gate, check for an earlier arrival today, classify timeliness,
record and notify.

Unknown devices stop the pipeline before anything is written, so ambient BLE
traffic never touches the database. The audit write is best effort for
sightings that do not become arrivals; a new arrival is only recorded once
its sighting has been audited.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from attendance.errors import DetectionError, DuplicateArrivalError, RepositoryError
from attendance.interfaces import Collaborators
from attendance.messages import compose_check_in_message, compose_late_admin_message
from attendance.models import (
    DetectionRecord,
    DetectionResult,
    Identity,
    Outcome,
    Sighting,
    Timeliness,
)
from attendance.rules import (
    DEFAULT_GRACE_PERIOD,
    DEFAULT_RSSI_THRESHOLD,
    classify_arrival,
    passes_proximity_gate,
)

logger = logging.getLogger(__name__)


class AttendanceService:
    """Process scanner sightings into attendance records."""

    def __init__(
        self,
        collaborators: Collaborators,
        rssi_threshold: int = DEFAULT_RSSI_THRESHOLD,
        grace_period: timedelta = DEFAULT_GRACE_PERIOD,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the service with its collaborators and rules.

        Args:
            collaborators: Repositories and notifier used by the pipeline.
            rssi_threshold: Weakest signal still counted as "at the door".
            grace_period: Tolerance after an employee's start time.
            clock: Returns the current local time. Calendar days for
                deduplication are taken from this clock.
        """
        self._c = collaborators
        self._rssi_threshold = rssi_threshold
        self._grace_period = grace_period
        self._clock = clock

    def process_detection(
        self,
        sighting: Sighting,
        cancel: threading.Event | None = None,
    ) -> DetectionResult:
        """Run one sighting through the pipeline.

        Args:
            sighting: The decoded scanner payload.
            cancel: Optional cancellation token from the caller. It is
                honoured between stages until the arrival is being written.

        Returns:
            A ``DetectionResult`` naming the terminal state reached.

        Raises:
            DetectionError: If a lookup or create call failed, or the caller
                cancelled before the arrival was recorded.
        """
        now = self._clock()
        notes: list[str] = []

        identity = self._resolve(sighting.mac_address)
        if identity is None:
            logger.debug("Ignoring unknown device %s", sighting.mac_address)
            return DetectionResult(Outcome.IGNORED_UNKNOWN, notes=notes)

        self._touch_scanner(sighting.scanner_mac, now, notes)

        logger.info(
            "Target device detected: employee=%s mac=%s rssi=%d",
            identity.name, sighting.mac_address, sighting.rssi,
        )
        audit_error = self._save_detection(identity, sighting, now, notes)

        if not passes_proximity_gate(sighting.rssi, self._rssi_threshold):
            logger.info(
                "Device %s too far (rssi %d, need %d or higher)",
                sighting.mac_address, sighting.rssi, self._rssi_threshold,
            )
            return DetectionResult(Outcome.IGNORED_TOO_FAR, identity.id, notes=notes)

        self._check_cancelled(cancel)
        if self._has_arrived_today(identity, now):
            logger.debug("Employee %s already checked in today", identity.id)
            return DetectionResult(Outcome.IGNORED_ALREADY_ARRIVED, identity.id, notes=notes)

        if audit_error is not None:
            raise DetectionError(
                "record", f"failed to save detection for employee {identity.id}: {audit_error}"
            ) from audit_error

        timeliness = classify_arrival(now, identity.work_start_time, self._grace_period)

        self._check_cancelled(cancel)
        arrival_id = self._record_arrival(identity, now, sighting.scanner_mac, timeliness)
        if arrival_id is None:
            return DetectionResult(Outcome.IGNORED_ALREADY_ARRIVED, identity.id, notes=notes)

        logger.info(
            "Employee %s checked in at %s (status: %s)",
            identity.name, now.strftime("%H:%M:%S"), timeliness.status.value,
        )
        self._notify(identity, now, sighting.scanner_mac, timeliness, notes)

        return DetectionResult(
            Outcome.RECORDED,
            employee_id=identity.id,
            arrival_id=arrival_id,
            timeliness=timeliness,
            notes=notes,
        )

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _resolve(self, mac_address: str) -> Identity | None:
        try:
            return self._c.identities.get_by_mac_address(mac_address)
        except RepositoryError as e:
            raise DetectionError("resolve", f"failed to look up {mac_address}: {e}") from e

    def _has_arrived_today(self, identity: Identity, now: datetime) -> bool:
        """Return True if an arrival exists for today; fail closed on error."""
        try:
            return self._c.arrivals.has_arrived_today(identity.id, now.date())
        except RepositoryError as e:
            raise DetectionError("dedup", f"failed to check attendance status: {e}") from e

    def _record_arrival(
        self,
        identity: Identity,
        now: datetime,
        scanner_mac: str,
        timeliness: Timeliness,
    ) -> int | None:
        """Create the arrival. Returns None if another sighting won the race."""
        try:
            return self._c.arrivals.create(identity.id, now, scanner_mac, timeliness.status)
        except DuplicateArrivalError:
            logger.info("Arrival for employee %s already recorded concurrently", identity.id)
            return None
        except RepositoryError as e:
            raise DetectionError("record", f"failed to record attendance: {e}") from e

    # ------------------------------------------------------------------
    # Best-effort steps
    # ------------------------------------------------------------------

    def _save_detection(
        self,
        identity: Identity,
        sighting: Sighting,
        now: datetime,
        notes: list[str],
    ) -> RepositoryError | None:
        """Audit a resolved sighting. Returns the write error instead of raising."""
        record = DetectionRecord(
            employee_id=identity.id,
            mac_address=sighting.mac_address.lower(),
            scanner_mac=sighting.scanner_mac,
            rssi=sighting.rssi,
            device_type=sighting.device_type,
            is_tag=sighting.is_tag,
            is_target_device=True,
            device_name=identity.name,
            detected_at=now,
        )
        try:
            self._c.detections.create(record)
        except RepositoryError as e:
            logger.warning("Detection audit write failed for employee %s: %s", identity.id, e)
            notes.append("detection_not_saved")
            return e
        return None

    def _touch_scanner(self, scanner_mac: str, now: datetime, notes: list[str]) -> None:
        if self._c.scanners is None or not scanner_mac:
            return
        try:
            self._c.scanners.update_activity(scanner_mac, now)
        except RepositoryError as e:
            logger.warning("Failed to update scanner %s activity: %s", scanner_mac, e)
            notes.append("scanner_not_updated")

    def _notify(
        self,
        identity: Identity,
        now: datetime,
        scanner_mac: str,
        timeliness: Timeliness,
        notes: list[str],
    ) -> None:
        """Send the check-in message, plus an admin alert when late.

        Delivery is best effort: nothing raised here reaches the caller.
        """
        if identity.chat_id is not None:
            message = compose_check_in_message(identity, now, scanner_mac, timeliness)
            try:
                self._c.notifier.send_personal(identity.chat_id, message)
            except Exception as e:
                logger.warning("Check-in message to employee %s not delivered: %s", identity.id, e)
                notes.append("personal_notification_failed")
        else:
            logger.info("Employee %s has no chat id; skipping personal message", identity.id)

        if timeliness.is_late:
            message = compose_late_admin_message(identity, now, timeliness)
            try:
                self._c.notifier.send_admin(message)
            except Exception as e:
                logger.warning("Late alert for employee %s not delivered: %s", identity.id, e)
                notes.append("admin_notification_failed")

    @staticmethod
    def _check_cancelled(cancel: threading.Event | None) -> None:
        if cancel is not None and cancel.is_set():
            raise DetectionError("cancelled", "detection processing cancelled by caller")
