"""Custom exception hierarchy for configvault.

All errors raised by the core derive from ConfigVaultError so callers can
catch the whole family in one place. The HTTP layer maps each concrete class
to a status code and echoes str(error) back to the client.
"""


class ConfigVaultError(Exception):
    """Base exception for all configvault errors."""


class SettingsError(ConfigVaultError):
    """Raised when server settings (environment, CLI overrides) are invalid."""


class StorageError(ConfigVaultError):
    """Base class for failures touching the backing config file."""


class StorageReadError(StorageError):
    """Raised when the config file is missing, unreadable, or malformed."""


class StorageWriteError(StorageError):
    """Raised when persisting the config file fails."""


class InvalidDocumentError(ConfigVaultError):
    """Raised when a replacement document is not a JSON object."""


class SectionNotFoundError(ConfigVaultError):
    """Raised when a top-level section is absent from the document.

    Attributes:
        section: Name of the missing section.

    """

    def __init__(self, section: str) -> None:
        self.section = section
        super().__init__(f"Section '{section}' not found")


class BackupError(ConfigVaultError):
    """Base class for backup directory failures.

    Attributes:
        filename: Backup filename the error refers to.

    """

    def __init__(self, message: str, filename: str) -> None:
        self.filename = filename
        super().__init__(message)


class BackupNotFoundError(BackupError):
    """Raised when a restore target does not exist in the backup directory."""

    def __init__(self, filename: str) -> None:
        super().__init__("Backup file not found", filename)


class BackupCorruptError(BackupError):
    """Raised when a backup file cannot be parsed as JSON."""


class BackupConflictError(BackupError):
    """Raised when a snapshot name already exists in the backup directory."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Backup '{filename}' already exists", filename)


class BackupReadError(BackupError):
    """Raised when an existing backup file cannot be read."""
