"""API key authentication for the admin and query routes.

Scanners post detections without credentials; everything that reads or
changes employee data requires a key from ``API_KEYS``.
"""

import os

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

_api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


def _get_valid_keys() -> set[str]:
    """Return the set of accepted API keys from the environment."""
    raw = os.environ.get("API_KEYS", "")
    return {k.strip() for k in raw.split(",") if k.strip()}


async def require_api_key(
    authorization: str | None = Depends(_api_key_header),
) -> str:
    """Validate the ``Authorization: Bearer <key>`` header.

    Raises:
        HTTPException 503 if no keys are configured (admin API disabled),
        401 if the key is missing or invalid.
    """
    valid_keys = _get_valid_keys()
    if not valid_keys:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API is disabled: no API keys configured",
        )

    token = (authorization or "").removeprefix("Bearer ").strip()
    if token not in valid_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return token
