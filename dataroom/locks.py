"""Per-project locking so generation runs never overlap on one project.

A lock is an exclusive kernel lock (``flock`` on POSIX, ``msvcrt.locking`` on
Windows) taken on ``.sync.lock`` in the project's data directory and held on
an open descriptor for the whole run. The kernel drops it when the owning
process exits, so a crashed run never leaves the project locked. The file
itself is left in place after release; it only records ``<pid>@<host>`` of
the last owner for diagnostics. An in-process registry additionally keeps
threads of the same process (for example the service mode running a sync
while a request regenerates) from sharing a project.
"""

from __future__ import annotations

import os
import platform
import socket
import threading
from pathlib import Path
from types import TracebackType
from typing import Optional, Set, Type

from .logging import get_logger

LOCK_FILENAME = ".sync.lock"

_IS_WINDOWS = platform.system() == "Windows"

_registry_guard = threading.Lock()
_held: Set[Path] = set()

logger = get_logger("locks")


class ProjectLockedError(RuntimeError):
    """Raised when a project is already being generated."""

    def __init__(self, slug: str, owner: str | None = None) -> None:
        detail = f" by {owner}" if owner else ""
        super().__init__(f"Project '{slug}' is locked{detail}; another sync is in progress")
        self.slug = slug
        self.owner = owner


class ProjectLock:
    """Exclusive lock on one project's data directory."""

    def __init__(self, data_dir: Path, slug: str | None = None) -> None:
        self.data_dir = data_dir
        self.slug = slug or data_dir.name
        self.path = (data_dir / LOCK_FILENAME).resolve()
        self.owner = f"{os.getpid()}@{socket.gethostname()}"
        self._fd: Optional[int] = None

    def is_held(self) -> bool:
        """Return ``True`` when another holder currently owns the lock."""
        with _registry_guard:
            if self.path in _held:
                return True
        try:
            fd = os.open(self.path, os.O_RDWR)
        except FileNotFoundError:
            return False
        try:
            if not _try_lock(fd):
                return True
            _unlock(fd)
            return False
        finally:
            os.close(fd)

    def acquire(self) -> bool:
        with _registry_guard:
            if self.path in _held:
                return False
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_CREAT | os.O_RDWR)
            if not _try_lock(fd):
                os.close(fd)
                logger.debug("Lock for %s held by %s", self.slug, self.read_owner())
                return False
            _held.add(self.path)
        self._fd = fd
        self._record_owner(fd)
        logger.debug("Acquired lock for %s", self.slug)
        return True

    def release(self) -> None:
        if self._fd is None:
            return
        with _registry_guard:
            try:
                _unlock(self._fd)
            except OSError:
                pass
            finally:
                os.close(self._fd)
                self._fd = None
                _held.discard(self.path)
        logger.debug("Released lock for %s", self.slug)

    def read_owner(self) -> Optional[str]:
        """Owner recorded by the most recent holder, if any."""
        try:
            content = self.path.read_text(encoding="utf-8").strip("\x00 \r\n")
        except OSError:
            return None
        return content or None

    def __enter__(self) -> "ProjectLock":
        if not self.acquire():
            raise ProjectLockedError(self.slug, self.read_owner())
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()

    def _record_owner(self, fd: int) -> None:
        # Windows byte-range locks cover offset 0, so write after it there.
        start = 1 if _IS_WINDOWS else 0
        os.ftruncate(fd, start)
        os.lseek(fd, start, os.SEEK_SET)
        os.write(fd, (self.owner + "\n").encode("utf-8"))


if _IS_WINDOWS:  # pragma: no cover - exercised on Windows only
    import msvcrt

    def _try_lock(fd: int) -> bool:
        os.lseek(fd, 0, os.SEEK_SET)
        try:
            msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)
        except OSError:
            return False
        return True

    def _unlock(fd: int) -> None:
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _try_lock(fd: int) -> bool:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            return False
        return True

    def _unlock(fd: int) -> None:
        fcntl.flock(fd, fcntl.LOCK_UN)


__all__ = ["LOCK_FILENAME", "ProjectLock", "ProjectLockedError"]
