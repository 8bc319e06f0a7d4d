"""Core persistence layer for configvault.

This module provides:
- ConfigStore: atomic read/replace/patch of the canonical JSON document
- BackupManager: timestamped snapshots, listing and restore
- Custom exception hierarchy with ConfigVaultError as base
"""

from configvault.core.backups import BackupHandle, BackupManager
from configvault.core.exceptions import (
    BackupConflictError,
    BackupCorruptError,
    BackupError,
    BackupNotFoundError,
    BackupReadError,
    ConfigVaultError,
    InvalidDocumentError,
    SectionNotFoundError,
    SettingsError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from configvault.core.store import ConfigStore

__all__ = [
    "BackupConflictError",
    "BackupCorruptError",
    "BackupError",
    "BackupHandle",
    "BackupManager",
    "BackupNotFoundError",
    "BackupReadError",
    "ConfigStore",
    "ConfigVaultError",
    "InvalidDocumentError",
    "SectionNotFoundError",
    "SettingsError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
