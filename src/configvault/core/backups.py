"""Point-in-time snapshots of the config document.

BackupManager owns a directory of immutable snapshot files named
``config-backup-<timestamp>.json``. Snapshots are never overwritten and
never pruned; restore copies a snapshot's content back into the store.
"""

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from configvault.core.exceptions import (
    BackupConflictError,
    BackupCorruptError,
    BackupNotFoundError,
    BackupReadError,
    StorageReadError,
    StorageWriteError,
)
from configvault.core.io import atomic_create, dump_json, get_timestamp
from configvault.core.store import ConfigStore

logger = logging.getLogger(__name__)

__all__ = [
    "BACKUP_PREFIX",
    "BACKUP_SUFFIX",
    "BackupHandle",
    "BackupManager",
    "backup_filename",
    "is_backup_filename",
]

BACKUP_PREFIX = "config-backup-"
BACKUP_SUFFIX = ".json"

# Prefix, then a single path component, then the suffix
_BACKUP_NAME_RE = re.compile(
    rf"^{re.escape(BACKUP_PREFIX)}[^/\\]+{re.escape(BACKUP_SUFFIX)}$"
)


def backup_filename(dt: datetime | None = None) -> str:
    """Build the snapshot filename for a capture time.

    Examples:
        >>> backup_filename(datetime(2026, 10, 17, 9, 30, 12, 345000, tzinfo=UTC))
        'config-backup-2026-10-17T09-30-12-345Z.json'

    """
    return f"{BACKUP_PREFIX}{get_timestamp(dt)}{BACKUP_SUFFIX}"


def is_backup_filename(name: str) -> bool:
    """Check whether name follows the snapshot naming convention."""
    return _BACKUP_NAME_RE.match(name) is not None


@dataclass(frozen=True)
class BackupHandle:
    """Metadata for one snapshot file.

    Attributes:
        filename: Snapshot filename (encodes capture time).
        path: Path to the snapshot file.
        created: Modification time of the file, in UTC.

    """

    filename: str
    path: Path
    created: datetime

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {"filename": self.filename, "created": self.created.isoformat()}


class BackupManager:
    """Create, enumerate and restore config snapshots.

    Attributes:
        store: Store whose document is snapshotted and restored.
        backup_dir: Directory holding snapshot files.

    """

    def __init__(
        self,
        store: ConfigStore,
        backup_dir: Path,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize BackupManager.

        Args:
            store: Config store to snapshot from and restore into.
            backup_dir: Directory for snapshot files (created on demand).
            clock: Returns the capture time for new snapshots. Defaults to
                the current UTC time.

        """
        self.store = store
        self.backup_dir = Path(backup_dir)
        self._clock = clock or (lambda: datetime.now(UTC))

    def ensure_directory(self) -> None:
        """Create the backup directory if it does not exist."""
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def snapshot(self) -> BackupHandle:
        """Write the current document to a new snapshot file.

        Returns:
            Handle for the created snapshot.

        Raises:
            StorageReadError: If the store cannot be read.
            BackupConflictError: If a snapshot with the same name exists.
            StorageWriteError: If the backup directory cannot be created or
                the snapshot cannot be written.

        """
        document = self.store.read()
        filename = backup_filename(self._clock())
        path = self.backup_dir / filename

        try:
            self.ensure_directory()
        except OSError as e:
            raise StorageWriteError(
                f"Failed to create backup directory {self.backup_dir}: {e}"
            ) from e

        try:
            atomic_create(path, dump_json(document))
        except FileExistsError as e:
            raise BackupConflictError(filename) from e
        except OSError as e:
            raise StorageWriteError(f"Failed to write backup file: {e}") from e

        logger.info("Created config backup %s", path)
        return self._handle_for(path)

    def list_backups(self) -> list[BackupHandle]:
        """List snapshots, newest first.

        Ordered by modification time descending; ties fall back to filename
        descending. A missing or empty directory yields an empty list.

        Raises:
            StorageReadError: If the directory exists but cannot be listed.

        """
        if not self.backup_dir.is_dir():
            return []

        try:
            entries = list(self.backup_dir.iterdir())
        except OSError as e:
            raise StorageReadError(
                f"Failed to list backup directory {self.backup_dir}: {e}"
            ) from e

        handles: list[BackupHandle] = []
        for entry in entries:
            if not is_backup_filename(entry.name) or not entry.is_file():
                continue
            try:
                handles.append(self._handle_for(entry))
            except FileNotFoundError:
                # Removed between listing and stat
                continue

        handles.sort(key=lambda h: (h.created, h.filename), reverse=True)
        return handles

    def resolve(self, filename: str) -> Path:
        """Resolve a snapshot filename to a path inside the backup directory.

        Raises:
            BackupNotFoundError: If the name breaks the naming convention,
                escapes the backup directory, or does not exist.

        """
        if not is_backup_filename(filename):
            raise BackupNotFoundError(filename)

        root = self.backup_dir.resolve()
        candidate = (root / filename).resolve()
        if candidate.parent != root or not candidate.is_file():
            raise BackupNotFoundError(filename)
        return candidate

    def restore(self, filename: str) -> dict[str, Any]:
        """Replace the store's document with a snapshot's content.

        Args:
            filename: Snapshot filename as returned by snapshot()/list_backups().

        Returns:
            The document now held by the store.

        Raises:
            BackupNotFoundError: If the snapshot does not exist.
            BackupCorruptError: If the snapshot is not valid JSON.
            InvalidDocumentError: If the snapshot is not a JSON object.
            BackupReadError: If the snapshot exists but cannot be read.
            StorageWriteError: If writing the store fails.

        """
        path = self.resolve(filename)

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise BackupNotFoundError(filename) from e
        except UnicodeDecodeError as e:
            raise BackupCorruptError(f"Failed to decode backup '{filename}': {e}", filename) from e
        except OSError as e:
            raise BackupReadError(f"Failed to read backup '{filename}': {e}", filename) from e

        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise BackupCorruptError(
                f"Backup '{filename}' is not valid JSON: {e}", filename
            ) from e

        self.store.replace(document)
        logger.info("Restored config from backup %s", path)
        return self.store.read()

    def _handle_for(self, path: Path) -> BackupHandle:
        mtime = path.stat().st_mtime
        return BackupHandle(
            filename=path.name,
            path=path,
            created=datetime.fromtimestamp(mtime, tz=UTC),
        )
