"""Write serialization for the canonical config document.

Read-modify-write sequences (section patches, restores) must not interleave,
otherwise the last writer silently drops the other writer's update. Writers
take two locks, in order:

1. A process-wide threading lock keyed by the resolved document path, which
   serializes request handlers running in the server's worker threads.
2. An advisory fcntl.flock on a sibling ``.<name>.lock`` file, which
   serializes separate processes (e.g. the server and the CLI) on POSIX.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

try:
    import fcntl
except ImportError:  # Windows: in-process locking only
    fcntl = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

__all__ = ["document_lock", "lock_path_for"]

_registry_guard = threading.Lock()
_thread_locks: dict[Path, threading.Lock] = {}


def lock_path_for(path: Path) -> Path:
    """Return the advisory lock file path for a document.

    Args:
        path: Path to the config document.

    Returns:
        Hidden lock file next to the document.

    """
    return path.parent / f".{path.name}.lock"


def _thread_lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _registry_guard:
        lock = _thread_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _thread_locks[key] = lock
        return lock


@contextmanager
def document_lock(path: Path) -> Generator[None, None, None]:
    """Hold exclusive write access to a config document.

    Not re-entrant: callers must not nest it for the same document.

    Args:
        path: Path to the config document.

    Raises:
        OSError: If the lock file cannot be created.

    """
    thread_lock = _thread_lock_for(path)
    with thread_lock:
        if fcntl is None:
            yield
            return

        lock_file = lock_path_for(path)
        lock_file.parent.mkdir(parents=True, exist_ok=True)
        with open(lock_file, "a") as fd:
            fcntl.flock(fd.fileno(), fcntl.LOCK_EX)
            logger.debug("Acquired write lock for %s", path)
            try:
                yield
            finally:
                fcntl.flock(fd.fileno(), fcntl.LOCK_UN)
