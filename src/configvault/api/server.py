"""HTTP server for configvault.

This module implements the API server using Starlette/Uvicorn:
- Provides REST API endpoints for config CRUD and backups
- Serves an optional static admin directory at /
- Prepares storage (config file, backup directory) on startup

Public API:
    ConfigServer: Main server class
    start_server: Convenience function to start server
"""

import asyncio
import logging
import socket
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from anyio import to_thread
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import BaseRoute, Mount, Route
from starlette.staticfiles import StaticFiles

from configvault.api.routes import API_ROUTES
from configvault.core.backups import BackupManager
from configvault.core.settings import Settings
from configvault.core.store import ConfigStore

logger = logging.getLogger(__name__)


def is_port_available(port: int, host: str = "127.0.0.1") -> bool:
    """Check if port is available for binding.

    Args:
        port: Port number to check.
        host: Host address to bind to.

    Returns:
        True if port can be bound, False if busy.

    """
    try:
        # Address family follows the host (IPv4 or IPv6)
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host, port, type=socket.SOCK_STREAM
        )[0]
        with socket.socket(family, socktype, proto) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(sockaddr)
            return True
    except OSError:
        return False


def describe_routes(routes: list[BaseRoute]) -> list[str]:
    """Format API routes as "METHOD  /path" lines for startup logging.

    Example:
        >>> describe_routes([Route("/api/x", lambda r: None, methods=["GET"])])
        ['GET     /api/x']

    """
    lines = []
    for route in routes:
        if not isinstance(route, Route):
            continue
        for method in sorted((route.methods or set()) - {"HEAD"}):
            lines.append(f"{method:<7} {route.path}")
    return lines


class ConfigServer:
    """HTTP server exposing a ConfigStore and its BackupManager.

    Attributes:
        settings: Resolved server settings.
        store: Store for the canonical config document.
        backups: Snapshot manager for the store.

    """

    def __init__(
        self,
        settings: Settings,
        store: ConfigStore | None = None,
        backups: BackupManager | None = None,
    ) -> None:
        """Initialize config server.

        Args:
            settings: Host, port and storage locations.
            store: Store override (built from settings.config_path if None).
            backups: Backup manager override (built from settings.backup_dir if None).

        """
        self.settings = settings
        self.store = store or ConfigStore(settings.config_path)
        self.backups = backups or BackupManager(self.store, settings.backup_dir)
        self._app: Starlette | None = None
        self._server: Any = None

    @property
    def host(self) -> str:
        return self.settings.host

    @property
    def port(self) -> int:
        return self.settings.port

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def prepare_storage(self) -> None:
        """Create the backup directory and an empty config file if missing."""
        self.backups.ensure_directory()
        if self.store.initialize():
            logger.warning("Config file %s did not exist, created empty document", self.store.path)

    def create_app(self) -> Starlette:
        """Create and configure Starlette application.

        Returns:
            Configured Starlette app instance.

        """
        middleware = [
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        ]

        routes: list[BaseRoute] = list(API_ROUTES)

        static_dir = self.settings.static_dir
        if static_dir is not None:
            if static_dir.is_dir():
                routes.append(
                    Mount("/", app=StaticFiles(directory=str(static_dir), html=True), name="static")
                )
            else:
                logger.warning("Static directory %s does not exist, not serving it", static_dir)

        app = Starlette(
            routes=routes,
            middleware=middleware,
            lifespan=self._lifespan,
        )

        # Store server reference in app state
        app.state.server = self

        self._app = app
        return app

    @asynccontextmanager
    async def _lifespan(self, app: Starlette) -> AsyncIterator[None]:
        """Prepare storage on startup and log the endpoint table."""
        await to_thread.run_sync(self.prepare_storage)

        logger.info("Config API server running at %s", self.url)
        logger.info("Config file: %s", self.store.path)
        logger.info("Backup directory: %s", self.backups.backup_dir)
        logger.info("API endpoints:")
        for line in describe_routes(list(API_ROUTES)):
            logger.info("   %s", line)

        yield

        logger.info("Config API server shutting down...")

    async def run(self, log_level: str = "info") -> None:
        """Start the server and run until shutdown.

        Args:
            log_level: Uvicorn log level (debug, info, warning, error).

        """
        import uvicorn

        app = self.create_app()

        config = uvicorn.Config(
            app,
            host=self.host,
            port=self.port,
            log_level=log_level,
        )
        self._server = uvicorn.Server(config)
        await self._server.serve()


def start_server(settings: Settings, log_level: str = "info") -> None:
    """Start config API server and block until it exits.

    Args:
        settings: Resolved server settings.
        log_level: Uvicorn log level.

    """
    server = ConfigServer(settings)
    asyncio.run(server.run(log_level=log_level))
