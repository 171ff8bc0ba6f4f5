"""
Per-artifact advisory locks.

IDE downloads may run in a worker pool, and several VerifierKit processes
can share one verifier home. Each cache key gets its own lock file under
``<verifier home>/lock`` so that only one worker downloads and extracts a
given IDE while others wait and then reuse the result.

Usage:
    lock_manager = LockManager(lock_dir)
    with lock_manager.artifact_lock("ide-IC-2020.2"):
        ...  # re-check the cache, then download and extract
"""

import logging
import re
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from verifierkit.core.directory import get_lock_dir

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[\\/:]")


class LockManager:
    """
    Hands out ``filelock`` locks keyed by cache entry name.

    Attributes:
        lock_dir: Directory holding the ``<key>.lock`` files
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        self.lock_dir = Path(lock_dir) if lock_dir is not None else get_lock_dir()
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    def lock_path(self, key: str) -> Path:
        """Lock file for a cache key; path separators become dashes."""
        return self.lock_dir / f"{_UNSAFE_KEY_CHARS.sub('-', key)}.lock"

    @contextmanager
    def artifact_lock(self, key: str, timeout: float = -1):
        """
        Hold the lock for one cache entry.

        When another worker holds the lock, an INFO message is logged and the
        call blocks until the lock is free or ``timeout`` expires.

        Args:
            key: Cache key, e.g. 'ide-IC-2020.2'
            timeout: Seconds to wait (-1 waits indefinitely)

        Raises:
            LockTimeout: If the lock is still held after ``timeout`` seconds
        """
        lock = FileLock(self.lock_path(key))

        try:
            lock.acquire(timeout=0)
        except LockTimeout:
            logger.info(f"Waiting for another worker to finish '{key}'")
            try:
                lock.acquire(timeout=timeout)
            except LockTimeout:
                logger.error(f"Lock for '{key}' still held after {timeout}s")
                raise

        logger.debug(f"Acquired lock {lock.lock_file}")
        try:
            yield
        finally:
            lock.release()
            logger.debug(f"Released lock {lock.lock_file}")

    def cleanup_stale_locks(self, max_age_hours: int = 24) -> int:
        """
        Delete lock files untouched for ``max_age_hours`` that nobody holds.

        Returns:
            Number of lock files removed
        """
        cutoff = time.time() - max_age_hours * 3600
        removed = 0

        for path in self.lock_dir.glob("*.lock"):
            try:
                if path.stat().st_mtime >= cutoff:
                    continue
                probe = FileLock(path)
                probe.acquire(timeout=0)
                probe.release()
                path.unlink(missing_ok=True)
            except LockTimeout:
                logger.debug(f"Lock {path.name} is held, keeping it")
                continue
            except OSError as e:
                logger.debug(f"Cannot remove lock {path}: {e}")
                continue

            logger.info(f"Removed stale lock file: {path}")
            removed += 1

        return removed


__all__ = [
    "LockManager",
    "LockTimeout",
]
