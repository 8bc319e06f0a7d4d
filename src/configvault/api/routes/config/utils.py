"""Config route utilities - response envelopes and request helpers.

Every API response is a single JSON object carrying ``success``. Successful
responses add ``data``/``message``/``filename``; failures add ``error`` with
the exception message (never a traceback).
"""

import json
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from configvault.core.backups import BackupManager
from configvault.core.store import ConfigStore

__all__ = [
    "InvalidBodyError",
    "_fail",
    "_get_backup_manager",
    "_get_store",
    "_ok",
    "_read_json_body",
]


class InvalidBodyError(Exception):
    """Raised when a request body is not valid JSON."""


def _ok(**fields: Any) -> JSONResponse:
    """Build a success envelope."""
    return JSONResponse({"success": True, **fields})


def _fail(message: str, status_code: int) -> JSONResponse:
    """Build a failure envelope."""
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


def _get_store(request: Request) -> ConfigStore:
    """Return the ConfigStore attached to the running server."""
    store: ConfigStore = request.app.state.server.store
    return store


def _get_backup_manager(request: Request) -> BackupManager:
    """Return the BackupManager attached to the running server."""
    backups: BackupManager = request.app.state.server.backups
    return backups


async def _read_json_body(request: Request) -> Any:
    """Parse the request body as JSON.

    Raises:
        InvalidBodyError: If the body is empty or not valid JSON.

    """
    raw = await request.body()
    if not raw.strip():
        raise InvalidBodyError("Request body is empty")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidBodyError(f"Invalid JSON body: {e}") from e
