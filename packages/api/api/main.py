"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from attendance.AttendanceService import AttendanceService
from attendance.config import configure_logging, load_settings
from attendance.interfaces import Collaborators
from database.Repositories import Repositories
from notifications.TelegramNotifier import TelegramNotifier

from api.routes import router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Set up and tear down application-wide resources."""
    settings = load_settings()

    repos = Repositories.open(settings.db_path)
    notifier = TelegramNotifier(settings.telegram_bot_token, settings.admin_chat_id)

    app.state.repositories = repos
    app.state.service = AttendanceService(
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

    yield

    notifier.close()
    repos.close()


app = FastAPI(
    title="Beacon Attendance API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)


def serve() -> None:
    """Start the uvicorn server using environment configuration."""
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run("api.main:app", host=settings.api_host, port=settings.api_port, reload=False)


if __name__ == "__main__":
    serve()
