"""Shared I/O utilities for atomic file operations and JSON serialization.

This module provides reusable utilities for:
- Atomic file writes (temp file + os.replace pattern)
- Exclusive atomic creation (temp file + os.link, never clobbers)
- Pretty-printed JSON serialization used for documents and backups
- Filesystem-safe, lexically sortable timestamps for backup names
"""

import contextlib
import errno
import json
import logging
import os
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

__all__ = [
    "JSON_INDENT",
    "atomic_create",
    "atomic_write",
    "dump_json",
    "get_timestamp",
]

logger = logging.getLogger(__name__)

JSON_INDENT = 4

# os.link failures meaning "no hard links here", not "target exists"
_NO_HARDLINK_ERRNOS = frozenset({errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP})


def dump_json(data: Any) -> str:
    """Serialize data as pretty-printed JSON with a trailing newline.

    Key order is preserved so successive writes stay diffable.

    Raises:
        TypeError: If data contains values JSON cannot represent.
        ValueError: If data contains circular references or NaN-like floats.

    """
    return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False, allow_nan=False) + "\n"


def get_timestamp(dt: datetime | None = None) -> str:
    """Generate a filesystem-safe timestamp for backup filenames.

    Format: ISO 8601 in UTC with millisecond precision, with ':' and '.'
    replaced by '-' (e.g. 2026-10-17T09-30-12-345Z).

    Args:
        dt: Datetime to format. If None, uses current UTC time. Naive
            datetimes are assumed to already be UTC.

    Returns:
        Timestamp string whose lexical order matches chronological order.

    Examples:
        >>> get_timestamp(datetime(2026, 1, 13, 15, 45, 30, 123456, tzinfo=UTC))
        '2026-01-13T15-45-30-123Z'

    """
    if dt is None:
        dt = datetime.now(UTC)
    elif dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    iso = f"{dt.strftime('%Y-%m-%dT%H:%M:%S')}.{dt.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def _temp_path_for(path: Path) -> Path:
    # PID and thread id keep concurrent writers apart
    return path.parent / f".{path.name}.{os.getpid()}.{threading.get_ident()}.tmp"


def _write_temp(temp_path: Path, content: str) -> None:
    with open(temp_path, "w", encoding="utf-8") as f:
        f.write(content)
        f.flush()
        os.fsync(f.fileno())


def atomic_write(path: Path, content: str) -> None:
    """Write content to path atomically using temp file + os.replace.

    Readers observe either the previous content or the new content, never a
    partially written file.

    Args:
        path: Target file path.
        content: Content to write.

    Raises:
        OSError: If write fails.

    """
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = _temp_path_for(path)
    try:
        _write_temp(temp_path, content)
        os.replace(temp_path, path)
    except OSError:
        with contextlib.suppress(OSError):
            if temp_path.exists():
                temp_path.unlink()
        raise


def _create_exclusive(path: Path, content: str) -> None:
    fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
    except OSError:
        with contextlib.suppress(OSError):
            path.unlink()
        raise


def atomic_create(path: Path, content: str) -> None:
    """Create path with content atomically, failing if it already exists.

    The content is fully written to a temp file first and then hard-linked
    into place, so the target never exists in a partial state and an existing
    file is never overwritten. On filesystems without hard links the target
    is created with O_EXCL and written in place instead.

    Args:
        path: Target file path.
        content: Content to write.

    Raises:
        FileExistsError: If path already exists.
        OSError: If write fails.

    """
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = _temp_path_for(path)
    try:
        _write_temp(temp_path, content)
        try:
            os.link(temp_path, path)
        except OSError as e:
            if e.errno not in _NO_HARDLINK_ERRNOS:
                raise
            logger.debug("Hard links unsupported for %s, using exclusive create", path)
            _create_exclusive(path, content)
    finally:
        with contextlib.suppress(OSError):
            temp_path.unlink()
