"""Config route handlers package.

Provides endpoints for:
- CRUD operations on the config document and its sections
- Backup creation, listing and restore
"""

from .backup import routes as backup_routes
from .crud import routes as crud_routes

# Backup routes first so /api/config/backup never resolves as a section
routes = backup_routes + crud_routes

__all__ = ["routes"]
