"""HTTP API for configvault (Starlette application and uvicorn runner)."""

from configvault.api.server import ConfigServer, start_server

__all__ = ["ConfigServer", "start_server"]
