"""
File locking for the registry config file.

Provides cross-platform advisory locking using fcntl (Unix) or msvcrt
(Windows) on a sidecar ``<file>.lock`` so that two processes sharing a
storage directory never interleave a config write.
"""

import time
from pathlib import Path

from dbregistry.core.utils.logger import get_logger

logger = get_logger()

try:
    import msvcrt

    WINDOWS = True
except ImportError:
    WINDOWS = False
    msvcrt = None
    try:
        import fcntl
    except ImportError:
        fcntl = None
        logger.warning("File locking not available on this platform")


class FileLock:
    """
    Context manager for an exclusive lock on a sidecar lock file.

    Entering the context raises ``TimeoutError`` when the lock cannot be
    acquired in time; use ``acquire()`` directly for a boolean result.
    """

    def __init__(self, file_path: Path, timeout: float = 10, blocking: bool = True):
        """
        Initialize file lock.

        Args:
            file_path: Path to the file being protected
            timeout: Maximum time to wait for lock (seconds)
            blocking: Whether to block waiting for lock
        """
        self.file_path = Path(file_path)
        self.timeout = timeout
        self.blocking = blocking
        self.lock_file = self.file_path.with_suffix(self.file_path.suffix + ".lock")
        self.lock_fd = None
        self.acquired = False

    def __enter__(self):
        if not self.acquire():
            raise TimeoutError(f"Could not acquire lock: {self.lock_file}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def _try_lock(self) -> None:
        if WINDOWS:
            msvcrt.locking(self.lock_fd.fileno(), msvcrt.LK_NBLCK, 1)
        else:
            fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)

    def acquire(self) -> bool:
        """
        Acquire the lock.

        Returns:
            True if the lock is held (or locking is unavailable on this
            platform), False if it could not be acquired.
        """
        if self.acquired:
            return True

        if not WINDOWS and fcntl is None:
            logger.debug("File locking not available (fcntl missing); continuing unlocked")
            self.acquired = True
            return True

        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        self.lock_fd = open(self.lock_file, "w")

        start_time = time.monotonic()
        while True:
            try:
                self._try_lock()
                self.acquired = True
                logger.debug(f"Acquired lock: {self.lock_file}")
                return True
            except OSError:
                if not self.blocking:
                    logger.warning(
                        f"Could not acquire lock (non-blocking): {self.lock_file}"
                    )
                    break
                if time.monotonic() - start_time > self.timeout:
                    logger.error(f"Lock timeout after {self.timeout}s: {self.lock_file}")
                    break
                time.sleep(0.05)

        self.lock_fd.close()
        self.lock_fd = None
        return False

    def release(self) -> None:
        """Release the lock. The lock file itself is left in place."""
        if not self.acquired:
            return

        if self.lock_fd:
            try:
                if WINDOWS:
                    msvcrt.locking(self.lock_fd.fileno(), msvcrt.LK_UNLCK, 1)
                elif fcntl:
                    fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_UN)
            finally:
                self.lock_fd.close()
                self.lock_fd = None

        self.acquired = False
        logger.debug(f"Released lock: {self.lock_file}")
