"""Per-folder mutual exclusion for report generation."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Iterator


class FolderLocks:
    """Thread-safe registry of one lock per mineral folder, created on first use."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._locks: dict[Path, Lock] = {}

    def lock_for(self, folder: Path) -> Lock:
        key = Path(folder).resolve()
        with self._lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, folder: Path) -> Iterator[None]:
        lock = self.lock_for(folder)
        with lock:
            yield

    def __len__(self) -> int:
        with self._lock:
            return len(self._locks)


__all__ = ["FolderLocks"]
