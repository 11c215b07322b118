"""Directory walk and bounded concurrent dispatch of import tasks."""
from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional

from ..core.config import ImportConfig
from ..core.errors import ClassificationError, NotADirectory
from ..core.models import RunSummary, StatKind
from ..core.protocols import ProgressReporter, TagReader
from .importer import ImporterDependencies, MediaImporter
from .stats import RunStatistics


logger = logging.getLogger(__name__)


def verify_directory(path: Path) -> Path:
    """Return ``path`` resolved, or raise NotADirectory."""
    path = Path(path).expanduser()
    if not path.is_dir():
        raise NotADirectory(path)
    return path.resolve()


def is_hidden(name: str) -> bool:
    return name.startswith(".")


class TaskScheduler:
    """Walks the source tree and imports every regular file.

    Directories are visited synchronously and in name order. Each file
    becomes a task on a thread pool; a semaphore token is taken before
    submission, so at most ``max_parallelism`` files are in flight across the
    whole tree. A directory returns only after all of its own tasks finished.
    """

    def __init__(
        self,
        config: ImportConfig,
        importer: MediaImporter,
        stats: Optional[RunStatistics] = None,
        progress: Optional[ProgressReporter] = None,
    ):
        """Initialize the scheduler.

        Args:
            config: Run configuration.
            importer: Per-file import task.
            stats: Counters to update; a fresh set is created when omitted.
            progress: Optional reporter advanced once per visited file.
        """
        self._config = config
        self._importer = importer
        self._stats = stats or RunStatistics()
        self._progress = progress
        self._restriction = config.restriction_set()
        self._tokens = threading.BoundedSemaphore(config.max_parallelism)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._dest_root: Optional[Path] = None

    @property
    def stats(self) -> RunStatistics:
        return self._stats

    def run(self, source_dir: Optional[Path] = None, dest_dir: Optional[Path] = None) -> RunSummary:
        """Import ``source_dir`` into ``dest_dir`` and return the counters.

        Both default to the configured directories.

        Raises:
            NotADirectory: A root is missing or is not a directory.
        """
        source = verify_directory(source_dir or self._config.source_dir)
        dest = verify_directory(dest_dir or self._config.dest_dir)
        self._dest_root = dest

        if self._progress:
            self._progress.start_phase("Importing", None)
        try:
            with ThreadPoolExecutor(
                max_workers=self._config.max_parallelism,
                thread_name_prefix="mediaplacer",
            ) as executor:
                self._executor = executor
                self.process_directory(source, dest)
        finally:
            self._executor = None
            if self._progress:
                self._progress.end_phase()

        return self._stats.summary()

    def process_directory(self, directory: Path, dest: Path) -> None:
        """Import the files of ``directory`` and recurse into subdirectories.

        Returns once every task spawned for this directory has completed.
        """
        if self._executor is None:
            raise RuntimeError("process_directory called outside of run()")

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            logger.error("Cannot read directory %s: %s", directory, e)
            self._stats.count(StatKind.ERRORED)
            return

        futures: list[Future] = []
        for entry in entries:
            if is_hidden(entry.name) and not self._config.allow_hidden:
                logger.debug("Skipping hidden entry: %s", entry.path)
                continue

            path = Path(entry.path)
            try:
                if entry.is_dir(follow_symlinks=False):
                    if path == self._dest_root:
                        logger.debug("Skipping destination directory: %s", path)
                        continue
                    self.process_directory(path, dest)
                    continue
                if not entry.is_file(follow_symlinks=False):
                    logger.debug("Ignoring non-regular file: %s", path)
                    continue
            except OSError as e:
                logger.error("Cannot inspect %s: %s", path, e)
                self._stats.count(StatKind.ERRORED)
                continue

            if self._restriction and path.suffix.lower() not in self._restriction:
                logger.info("Skipping file: %s (extension not accepted)", path)
                self._stats.count(StatKind.SKIPPED)
                self._advance()
                continue

            futures.append(self._submit(path, dest))

        wait(futures)

    def _submit(self, path: Path, dest: Path) -> Future:
        self._tokens.acquire()
        try:
            return self._executor.submit(self._run_task, path, dest)
        except BaseException:
            self._tokens.release()
            raise

    def _run_task(self, path: Path, dest: Path) -> None:
        try:
            result = self._importer.import_file(path, dest)
            self._stats.record(result)
        except ClassificationError as e:
            logger.warning("Unknown file: %s (%s)", path, e)
            self._stats.count(StatKind.UNKNOWN)
        except Exception as e:
            logger.error("Failed to import %s: %s", path, e)
            self._stats.count(StatKind.ERRORED)
        finally:
            self._tokens.release()
            self._advance()

    def _advance(self) -> None:
        if self._progress:
            self._progress.advance_phase()


def run_import(
    config: ImportConfig,
    tag_reader: Optional[TagReader] = None,
    progress: Optional[ProgressReporter] = None,
) -> RunSummary:
    """Wire up every collaborator from ``config`` and run one import."""
    deps = ImporterDependencies.from_config(config, tag_reader)
    scheduler = TaskScheduler(config, MediaImporter(config, deps), progress=progress)
    return scheduler.run()
