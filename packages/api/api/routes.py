"""API route definitions."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse

from api.auth import require_api_key
from api.schemas import (
    AttendanceSchema,
    DetectionRequest,
    EmployeeCreate,
    EmployeeSchema,
    ScannerSchema,
)
from attendance.AttendanceService import AttendanceService
from attendance.errors import DetectionError, DuplicateEmployeeError
from database.Repositories import Repositories

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@router.get("/health")
async def health_check():
    """Basic liveness probe -- no auth required."""
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _service_dependency(request: Request) -> AttendanceService:
    """Retrieve the shared AttendanceService instance from app state."""
    return request.app.state.service


def _repositories_dependency(request: Request) -> Repositories:
    return request.app.state.repositories


def _get_employee_or_404(repos: Repositories, employee_id: int):
    employee = repos.employees.get_by_id(employee_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        )
    return employee


# ---------------------------------------------------------------------------
# Scanner ingestion
# ---------------------------------------------------------------------------


@router.post("/api/detect", response_class=PlainTextResponse)
def detect(
    body: DetectionRequest,
    service: AttendanceService = Depends(_service_dependency),
) -> str:
    """Accept a BLE detection from a scanner.

    Always answers ``OK``: scanners fire and forget, so pipeline failures are
    only visible in the server log.
    """
    logger.debug(
        "[Scanner: %s] Detected MAC: %s, RSSI: %d, Type: %s, iTag03: %s",
        body.scanner_mac, body.mac_address, body.rssi, body.device_type, body.itag03,
    )

    try:
        result = service.process_detection(body.to_sighting())
    except DetectionError as e:
        logger.error("Error processing detection from %s: %s", body.scanner_mac, e)
    except Exception:
        logger.exception("Unexpected error processing detection from %s", body.scanner_mac)
    else:
        logger.debug("Detection %s -> %s", body.mac_address, result.outcome.value)

    return "OK"


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


@router.post(
    "/employees",
    response_model=EmployeeSchema,
    status_code=status.HTTP_201_CREATED,
)
def register_employee(
    body: EmployeeCreate,
    api_key: str = Depends(require_api_key),
    repos: Repositories = Depends(_repositories_dependency),
):
    """Register an employee and the device they carry."""
    try:
        employee = repos.employees.register(
            body.mac_address,
            body.name,
            chat_id=body.chat_id,
            employee_code=body.employee_code,
            department=body.department,
            work_start_time=body.work_start_time,
        )
    except DuplicateEmployeeError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    logger.info("Registered employee %s (%s)", employee.name, employee.mac_address)
    return EmployeeSchema.from_identity(employee)


@router.get("/employees", response_model=list[EmployeeSchema])
def list_employees(
    api_key: str = Depends(require_api_key),
    repos: Repositories = Depends(_repositories_dependency),
):
    """List all active employees."""
    return [EmployeeSchema.from_identity(e) for e in repos.employees.list_active()]


@router.get("/employees/by-chat/{chat_id}", response_model=EmployeeSchema)
def get_employee_by_chat(
    chat_id: int,
    api_key: str = Depends(require_api_key),
    repos: Repositories = Depends(_repositories_dependency),
):
    """Find the active employee linked to a Telegram chat."""
    employee = repos.employees.get_by_chat_id(chat_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No employee linked to this chat",
        )
    return EmployeeSchema.from_identity(employee)


@router.get("/employees/{employee_id}", response_model=EmployeeSchema)
def get_employee(
    employee_id: int,
    api_key: str = Depends(require_api_key),
    repos: Repositories = Depends(_repositories_dependency),
):
    """Get a single employee's registration details."""
    return EmployeeSchema.from_identity(_get_employee_or_404(repos, employee_id))


@router.get("/employees/{employee_id}/today", response_model=AttendanceSchema)
def get_today(
    employee_id: int,
    api_key: str = Depends(require_api_key),
    repos: Repositories = Depends(_repositories_dependency),
):
    """Get today's check-in for an employee."""
    _get_employee_or_404(repos, employee_id)
    event = repos.attendance.get_for_day(employee_id, date.today())
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No check-in today",
        )
    return AttendanceSchema.from_event(event)


@router.get("/employees/{employee_id}/history", response_model=list[AttendanceSchema])
def get_history(
    employee_id: int,
    days: int = Query(default=7, ge=1, le=366),
    api_key: str = Depends(require_api_key),
    repos: Repositories = Depends(_repositories_dependency),
):
    """Get an employee's check-ins for the last ``days`` days, newest first."""
    _get_employee_or_404(repos, employee_id)
    events = repos.attendance.history(employee_id, date.today(), days)
    return [AttendanceSchema.from_event(e) for e in events]


# ---------------------------------------------------------------------------
# Scanners
# ---------------------------------------------------------------------------


@router.get("/scanners", response_model=list[ScannerSchema])
def list_scanners(
    api_key: str = Depends(require_api_key),
    repos: Repositories = Depends(_repositories_dependency),
):
    """List scanners, most recently seen first."""
    return [ScannerSchema.from_status(s) for s in repos.scanners.list_recent()]
