"""Config backup route handlers.

Provides endpoints for creating, listing, and restoring config backups.
"""

import logging

from anyio import to_thread
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from configvault.core.exceptions import BackupNotFoundError, ConfigVaultError

from . import utils

logger = logging.getLogger(__name__)


async def post_config_backup(request: Request) -> JSONResponse:
    """POST /api/config/backup - Snapshot the current config.

    Returns the generated backup filename.
    """
    backups = utils._get_backup_manager(request)
    try:
        handle = await to_thread.run_sync(backups.snapshot)
        return utils._ok(message="Backup created successfully", filename=handle.filename)
    except ConfigVaultError as e:
        logger.error("Failed to create backup: %s", e)
        return utils._fail(str(e), 500)
    except Exception as e:
        logger.exception("Failed to create backup")
        return utils._fail(str(e), 500)


async def get_backups(request: Request) -> JSONResponse:
    """GET /api/backups - List backups, newest first.

    Each entry has ``filename`` and ``created`` (ISO 8601 modification time).
    """
    backups = utils._get_backup_manager(request)
    try:
        handles = await to_thread.run_sync(backups.list_backups)
        return utils._ok(data=[handle.to_dict() for handle in handles])
    except ConfigVaultError as e:
        logger.error("Failed to list backups: %s", e)
        return utils._fail(str(e), 500)
    except Exception as e:
        logger.exception("Failed to list backups")
        return utils._fail(str(e), 500)


async def post_config_restore(request: Request) -> JSONResponse:
    """POST /api/config/restore/{filename} - Restore config from a backup.

    Returns the restored document. Returns 404 if the backup does not exist
    or the name does not refer to a file inside the backup directory.
    """
    filename = request.path_params["filename"]
    backups = utils._get_backup_manager(request)
    try:
        document = await to_thread.run_sync(lambda: backups.restore(filename))
        return utils._ok(message="Config restored from backup successfully", data=document)
    except BackupNotFoundError as e:
        logger.warning("Restore requested for unknown backup %r", filename)
        return utils._fail(str(e), 404)
    except ConfigVaultError as e:
        logger.error("Failed to restore backup %r: %s", filename, e)
        return utils._fail(str(e), 500)
    except Exception as e:
        logger.exception("Failed to restore backup %r", filename)
        return utils._fail(str(e), 500)


routes = [
    Route("/api/config/backup", post_config_backup, methods=["POST"]),
    Route("/api/backups", get_backups, methods=["GET"]),
    Route("/api/config/restore/{filename}", post_config_restore, methods=["POST"]),
]
