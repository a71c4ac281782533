"""Runtime settings read from the environment (and a ``.env`` file)."""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv  # type: ignore

from attendance.rules import DEFAULT_GRACE_PERIOD, DEFAULT_RSSI_THRESHOLD


@dataclass(frozen=True)
class Settings:
    """Configuration shared by the API server and the CLI."""

    db_path: str = "attendance.db"
    telegram_bot_token: str = ""
    admin_chat_id: int | None = None
    rssi_threshold: int = DEFAULT_RSSI_THRESHOLD
    grace_period: timedelta = DEFAULT_GRACE_PERIOD
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    log_level: str = "INFO"


def _int_env(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Environment variable {name} must be an integer, got '{raw}'") from e


def load_settings() -> Settings:
    """Load ``.env`` and build ``Settings`` from the environment.

    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    load_dotenv()

    return Settings(
        db_path=os.environ.get("DB_PATH", "attendance.db"),
        telegram_bot_token=os.environ.get("TELEGRAM_BOT_TOKEN", ""),
        admin_chat_id=_int_env("AUTHORIZED_CHAT_ID", None),
        rssi_threshold=_int_env("RSSI_THRESHOLD", DEFAULT_RSSI_THRESHOLD),
        grace_period=timedelta(
            minutes=_int_env("GRACE_MINUTES", int(DEFAULT_GRACE_PERIOD.total_seconds() // 60))
        ),
        api_host=os.environ.get("API_HOST", "0.0.0.0"),
        api_port=_int_env("API_PORT", 8080),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str) -> None:
    """Set up root logging once per process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
