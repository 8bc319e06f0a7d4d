"""Canonical config document persistence.

ConfigStore owns a single JSON file holding the configuration document.
There is no in-memory cache: every operation re-reads the file, and every
mutation rewrites the whole document atomically (temp file + os.replace).

The only type contract is that the top-level value is a JSON object. Section
values are arbitrary JSON and are never validated.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

from configvault.core.exceptions import (
    InvalidDocumentError,
    SectionNotFoundError,
    StorageReadError,
    StorageWriteError,
)
from configvault.core.io import atomic_write, dump_json
from configvault.core.locking import document_lock

logger = logging.getLogger(__name__)

__all__ = ["MAX_DOCUMENT_SIZE", "ConfigStore"]

MAX_DOCUMENT_SIZE: int = 1_048_576  # 1MB


class ConfigStore:
    """File-backed store for the canonical config document.

    Thread Safety:
        Reads are lock-free. replace() and patch_section() are serialized
        per document path, so concurrent patches cannot drop each other.

    Attributes:
        path: Path to the JSON document.
        max_size: Maximum accepted file size in bytes.

    """

    def __init__(self, path: Path, *, max_size: int = MAX_DOCUMENT_SIZE) -> None:
        self.path = Path(path)
        self.max_size = max_size

    def __repr__(self) -> str:
        return f"ConfigStore(path={str(self.path)!r})"

    def exists(self) -> bool:
        """Check whether the backing file exists."""
        return self.path.is_file()

    def initialize(self, default: dict[str, Any] | None = None) -> bool:
        """Create the backing file if it does not exist yet.

        Args:
            default: Initial document (empty object when None).

        Returns:
            True if a new file was written, False if one already existed.

        Raises:
            InvalidDocumentError: If default is not a JSON object.
            StorageWriteError: If the file cannot be written.

        """
        with document_lock(self.path):
            if self.path.exists():
                return False
            self._write(default if default is not None else {})
        logger.info("Initialized empty config document at %s", self.path)
        return True

    def read(self) -> dict[str, Any]:
        """Load and parse the config document.

        Returns:
            The parsed document.

        Raises:
            StorageReadError: If the file is missing, unreadable, too large,
                not valid JSON, or not a JSON object.

        """
        try:
            with self.path.open("rb") as f:
                # Read one byte past the limit to detect oversize files
                raw = f.read(self.max_size + 1)
        except FileNotFoundError as e:
            raise StorageReadError(f"Failed to read config file: not found: {self.path}") from e
        except IsADirectoryError as e:
            raise StorageReadError(
                f"Failed to read config file: {self.path} is a directory"
            ) from e
        except OSError as e:
            raise StorageReadError(f"Failed to read config file: {e}") from e

        if len(raw) > self.max_size:
            raise StorageReadError(
                f"Failed to read config file: {self.path} exceeds size limit "
                f"of {self.max_size:,} bytes"
            )

        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StorageReadError(f"Failed to read config file: {e}") from e

        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Failed to read config file: {e}") from e

        if not isinstance(document, dict):
            raise StorageReadError(
                f"Failed to read config file: expected a JSON object, "
                f"got {type(document).__name__}"
            )
        return document

    def read_section(self, name: str) -> Any:
        """Return the value of a single top-level section.

        Raises:
            SectionNotFoundError: If name is not a top-level key.
            StorageReadError: If the document cannot be read.

        """
        document = self.read()
        if name not in document:
            raise SectionNotFoundError(name)
        return document[name]

    def replace(self, document: Any) -> None:
        """Replace the whole document.

        Args:
            document: New document; must be a JSON object.

        Raises:
            InvalidDocumentError: If document is not a JSON-serializable dict
                or its serialized form exceeds max_size.
                The stored file is left untouched.
            StorageWriteError: If writing fails.

        """
        with document_lock(self.path):
            self._write(document)
        logger.info("Replaced config document at %s", self.path)

    def patch_section(self, name: str, value: Any) -> dict[str, Any]:
        """Replace the value of an existing top-level section.

        The new value supersedes the old one entirely (no deep merge) and may
        have a different JSON type.

        Args:
            name: Section name; must already exist.
            value: New section value.

        Returns:
            The updated document as persisted.

        Raises:
            SectionNotFoundError: If name is not a top-level key.
            StorageReadError: If the document cannot be read.
            InvalidDocumentError: If value is not JSON-serializable or the
                updated document exceeds max_size.
            StorageWriteError: If writing fails.

        """
        with document_lock(self.path):
            document = self.read()
            if name not in document:
                raise SectionNotFoundError(name)
            document[name] = copy.deepcopy(value)
            self._write(document)
        logger.info("Updated section '%s' in %s", name, self.path)
        return document

    def _write(self, document: Any) -> None:
        """Validate and atomically persist a document. Caller holds the lock."""
        if not isinstance(document, dict):
            raise InvalidDocumentError(
                f"Invalid config data: expected a JSON object, got {_json_type_name(document)}"
            )
        if not all(isinstance(key, str) for key in document):
            raise InvalidDocumentError("Invalid config data: section names must be strings")

        try:
            content = dump_json(document)
        except (TypeError, ValueError) as e:
            raise InvalidDocumentError(f"Invalid config data: {e}") from e

        # read() refuses anything larger, so never persist it
        size = len(content.encode("utf-8"))
        if size > self.max_size:
            raise InvalidDocumentError(
                f"Invalid config data: serialized size {size:,} bytes exceeds limit "
                f"of {self.max_size:,} bytes"
            )

        try:
            atomic_write(self.path, content)
        except OSError as e:
            raise StorageWriteError(f"Failed to write config file: {e}") from e


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__
