"""Thread-safe run counters."""
from __future__ import annotations

import threading
import time

from ..core.models import ImportAction, ImportResult, RunSummary, StatKind


ACTION_COUNTERS = {
    ImportAction.COPIED: (StatKind.COPIED,),
    ImportAction.MOVED: (StatKind.MOVED,),
    ImportAction.DUPLICATE_DELETED: (StatKind.DUPLICATED, StatKind.DELETED),
    ImportAction.DUPLICATE_SKIPPED: (StatKind.DUPLICATED,),
}


class RunStatistics:
    """Counters shared by every import task.

    Increments are atomic; the summary is read once the walk has finished.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counts: dict[StatKind, int] = {kind: 0 for kind in StatKind}
        self._started = time.monotonic()

    def count(self, kind: StatKind, amount: int = 1) -> int:
        """Add ``amount`` to ``kind`` and return the new value."""
        if amount < 0:
            raise ValueError("Counters only increase")
        with self._lock:
            self._counts[kind] += amount
            return self._counts[kind]

    def record(self, result: ImportResult) -> None:
        """Count a finished import."""
        with self._lock:
            for kind in ACTION_COUNTERS[result.action]:
                self._counts[kind] += 1

    def get(self, kind: StatKind) -> int:
        with self._lock:
            return self._counts[kind]

    def summary(self) -> RunSummary:
        with self._lock:
            counts = dict(self._counts)
        return RunSummary(
            **{kind.value: value for kind, value in counts.items()},
            elapsed_seconds=time.monotonic() - self._started,
        )
