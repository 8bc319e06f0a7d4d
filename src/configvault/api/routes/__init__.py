"""HTTP route table for the configvault API."""

from starlette.routing import BaseRoute

from .config import routes as config_routes

API_ROUTES: list[BaseRoute] = list(config_routes)

__all__ = ["API_ROUTES"]
