"""File transfer service."""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path

from ..engines.hash_engine import CHUNK_SIZE


logger = logging.getLogger(__name__)


class FileManager:
    """Copies, moves and deletes files for the importer.

    Copies go through a temporary file in the target directory followed by a
    rename, so a partially written file never appears under its final name.

    In dry-run mode nothing on disk changes. Planned targets are remembered
    instead, so later existence checks and duplicate comparisons see the
    same tree a real run would have produced.
    """

    def __init__(self, dry_run: bool = False):
        """Initialize file manager.

        Args:
            dry_run: If True, record planned transfers instead of performing them.
        """
        self._dry_run = dry_run
        self._planned: dict[Path, Path] = {}
        self._lock = threading.Lock()

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def exists(self, path: Path) -> bool:
        """Whether ``path`` is taken on disk or by a planned dry-run transfer."""
        if self._dry_run:
            with self._lock:
                if path in self._planned:
                    return True
        return path.exists()

    def content_path(self, path: Path) -> Path:
        """File holding the content that is (or would be) at ``path``."""
        if self._dry_run:
            with self._lock:
                return self._planned.get(path, path)
        return path

    def copy(self, source: Path, target: Path) -> None:
        """Atomically copy ``source`` to ``target``, replacing any file there."""
        if self._dry_run:
            self._plan(source, target)
            return
        self._ensure_parent(target)
        self._atomic_copy(source, target)

    def move(self, source: Path, target: Path) -> None:
        """Move ``source`` to ``target``.

        Tries a rename first and falls back to copy + delete when the rename
        fails, for instance across filesystems.
        """
        if self._dry_run:
            self._plan(source, target)
            return
        self._ensure_parent(target)
        try:
            os.replace(source, target)
        except OSError as e:
            logger.debug("Rename %s -> %s failed (%s), copying instead", source, target, e)
            self._atomic_copy(source, target)
            source.unlink()

    def delete(self, path: Path) -> None:
        """Delete a file."""
        if self._dry_run:
            return
        path.unlink()

    def _plan(self, source: Path, target: Path) -> None:
        with self._lock:
            self._planned[target] = source

    @staticmethod
    def _ensure_parent(target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _atomic_copy(source: Path, target: Path) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".part", dir=target.parent,
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as out:
                with source.open("rb") as src:
                    shutil.copyfileobj(src, out, CHUNK_SIZE)
                out.flush()
                os.fsync(out.fileno())
            shutil.copystat(source, tmp_path)
            os.replace(tmp_path, target)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
