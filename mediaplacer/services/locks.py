"""Per-destination claims shared by all import tasks.

Two tasks can compute the same candidate path at the same time and both see
it missing on disk. Only the task holding the claim may create the file; the
other waits for the release and then re-examines the path.
"""
from __future__ import annotations

import threading
from pathlib import Path


class DestinationLockManager:
    """Process-wide registry of claimed destination paths.

    All state sits behind one lock. Critical sections do O(1) work and never
    touch the filesystem.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._claimed: set[Path] = set()
        self._waiters: dict[Path, list[threading.Event]] = {}

    def try_claim(self, path: Path) -> bool:
        """Claim ``path`` if nobody holds it. Returns whether it was claimed."""
        with self._lock:
            if path in self._claimed:
                return False
            self._claimed.add(path)
            return True

    def await_release(self, path: Path) -> threading.Event:
        """Event that is set once the current claimant releases ``path``.

        If ``path`` is not claimed any more the returned event is already set.
        """
        event = threading.Event()
        with self._lock:
            if path not in self._claimed:
                event.set()
            else:
                self._waiters.setdefault(path, []).append(event)
        return event

    def release(self, path: Path) -> None:
        """Drop the claim on ``path`` and wake every waiter."""
        with self._lock:
            self._claimed.discard(path)
            waiters = self._waiters.pop(path, [])
        for event in waiters:
            event.set()
