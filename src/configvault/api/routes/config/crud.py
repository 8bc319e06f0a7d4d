"""Config CRUD route handlers.

Provides endpoints for reading and updating the config document as a whole
or one top-level section at a time.
"""

import logging

from anyio import to_thread
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from configvault.core.exceptions import (
    ConfigVaultError,
    InvalidDocumentError,
    SectionNotFoundError,
)

from . import utils

logger = logging.getLogger(__name__)


async def get_config(request: Request) -> JSONResponse:
    """GET /api/config - Return the entire config document."""
    store = utils._get_store(request)
    try:
        document = await to_thread.run_sync(store.read)
        return utils._ok(data=document)
    except ConfigVaultError as e:
        logger.error("Failed to read config: %s", e)
        return utils._fail(str(e), 500)
    except Exception as e:
        logger.exception("Failed to read config")
        return utils._fail(str(e), 500)


async def get_config_section(request: Request) -> JSONResponse:
    """GET /api/config/{section} - Return one top-level section.

    Returns 404 if the section does not exist.
    """
    section = request.path_params["section"]
    store = utils._get_store(request)
    try:
        value = await to_thread.run_sync(lambda: store.read_section(section))
        return utils._ok(data=value)
    except SectionNotFoundError as e:
        return utils._fail(str(e), 404)
    except ConfigVaultError as e:
        logger.error("Failed to read config section '%s': %s", section, e)
        return utils._fail(str(e), 500)
    except Exception as e:
        logger.exception("Failed to read config section '%s'", section)
        return utils._fail(str(e), 500)


async def put_config(request: Request) -> JSONResponse:
    """PUT /api/config - Replace the entire config document.

    Request body: the new document (must be a JSON object).

    Returns 400 if the body is not valid JSON or not an object.
    """
    try:
        document = await utils._read_json_body(request)
    except utils.InvalidBodyError as e:
        logger.warning("Rejected config replacement: %s", e)
        return utils._fail(str(e), 400)

    if not isinstance(document, dict):
        logger.warning("Rejected config replacement: body is not a JSON object")
        return utils._fail("Invalid config data", 400)

    store = utils._get_store(request)
    try:
        await to_thread.run_sync(lambda: store.replace(document))
        return utils._ok(message="Config updated successfully", data=document)
    except InvalidDocumentError as e:
        logger.warning("Rejected config replacement: %s", e)
        return utils._fail(str(e), 400)
    except ConfigVaultError as e:
        logger.error("Failed to replace config: %s", e)
        return utils._fail(str(e), 500)
    except Exception as e:
        logger.exception("Failed to replace config")
        return utils._fail(str(e), 500)


async def patch_config_section(request: Request) -> JSONResponse:
    """PATCH /api/config/{section} - Replace the value of one section.

    Request body: the new section value (any JSON value). The old value is
    replaced wholesale, not merged.

    Returns 404 if the section does not exist, 400 if the body is not JSON or
    the updated document would exceed the size limit.
    """
    section = request.path_params["section"]
    try:
        value = await utils._read_json_body(request)
    except utils.InvalidBodyError as e:
        logger.warning("Rejected patch of section '%s': %s", section, e)
        return utils._fail(str(e), 400)

    store = utils._get_store(request)
    try:
        document = await to_thread.run_sync(lambda: store.patch_section(section, value))
        return utils._ok(
            message=f"Section '{section}' updated successfully",
            data=document[section],
        )
    except SectionNotFoundError as e:
        return utils._fail(str(e), 404)
    except InvalidDocumentError as e:
        logger.warning("Rejected patch of section '%s': %s", section, e)
        return utils._fail(str(e), 400)
    except ConfigVaultError as e:
        logger.error("Failed to update config section '%s': %s", section, e)
        return utils._fail(str(e), 500)
    except Exception as e:
        logger.exception("Failed to update config section '%s'", section)
        return utils._fail(str(e), 500)


routes = [
    Route("/api/config", get_config, methods=["GET"]),
    Route("/api/config", put_config, methods=["PUT"]),
    Route("/api/config/{section}", get_config_section, methods=["GET"]),
    Route("/api/config/{section}", patch_config_section, methods=["PATCH"]),
]
