import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


class PathLockRegistry:
    """One re-entrant lock per canonical directory path."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = str(path)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *paths: Path) -> Iterator[None]:
        # Sorted acquisition keeps two-path holders from deadlocking each other.
        keys = sorted({str(path) for path in paths})
        locks = [self.lock_for(Path(key)) for key in keys]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()


DEFAULT_LOCKS = PathLockRegistry()
