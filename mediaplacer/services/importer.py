"""Single-file import task: tags -> destination -> collision handling -> transfer."""
from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from ..core.config import ImportConfig
from ..core.errors import DestinationConflict, MetadataUnavailable, UnknownFileType
from ..core.models import ImportAction, ImportResult, TagMap
from ..core.protocols import TagReader
from ..engines.hash_engine import ContentHasher
from ..engines.metadata import create_tag_reader
from .file_ops import FileManager
from .locks import DestinationLockManager
from .resolver import DestinationResolver


logger = logging.getLogger(__name__)

MAX_SUFFIX = 999


def suffixed_candidates(path: Path) -> Iterator[Path]:
    """Yield ``path`` followed by ``stem-000`` ... ``stem-999`` variants.

    >>> [p.name for p in list(suffixed_candidates(Path("a/10h15m_AB.jpg")))[:3]]
    ['10h15m_AB.jpg', '10h15m_AB-000.jpg', '10h15m_AB-001.jpg']
    """
    yield path
    for index in range(MAX_SUFFIX + 1):
        yield path.with_name(f"{path.stem}-{index:03d}{path.suffix}")


class _Outcome(enum.Enum):
    CLAIMED = "claimed"        # Free path, claim held
    REPLACE = "replace"        # Content-different file to overwrite, claim held
    DUPLICATE = "duplicate"    # Same content already there
    IN_PLACE = "in_place"      # Candidate is the source file itself
    TAKEN = "taken"            # Content-different file, try the next suffix


class _CachedDigest:
    """Source hash computed at most once per task."""

    def __init__(self, hasher: ContentHasher, path: Path):
        self._hasher = hasher
        self._path = path
        self._value: Optional[str] = None

    def __call__(self) -> str:
        if self._value is None:
            self._value = self._hasher.hash(self._path)
        return self._value


@dataclass
class ImporterDependencies:
    """Collaborators shared by every import task of a run."""
    tag_reader: TagReader
    hasher: ContentHasher
    resolver: DestinationResolver
    locks: DestinationLockManager
    files: FileManager

    @classmethod
    def from_config(
        cls,
        config: ImportConfig,
        tag_reader: Optional[TagReader] = None,
    ) -> "ImporterDependencies":
        hasher = ContentHasher()
        return cls(
            tag_reader=tag_reader or create_tag_reader(config.metadata_backend),
            hasher=hasher,
            resolver=DestinationResolver(config.accept_untagged, hasher),
            locks=DestinationLockManager(),
            files=FileManager(dry_run=config.dry_run),
        )


class MediaImporter:
    """Imports one source file into the destination tree.

    Safe to call from many threads at once: concurrent tasks that compute
    the same destination are serialized through the lock manager, and each
    ends up either at its own suffixed path or recognized as a duplicate.
    """

    def __init__(self, config: ImportConfig, deps: ImporterDependencies):
        self._config = config
        self._deps = deps

    @property
    def dry_run(self) -> bool:
        return self._deps.files.dry_run

    def import_file(self, source: Path, dest: Path) -> ImportResult:
        """Import ``source`` under the ``dest`` root.

        Returns:
            What happened to the file.

        Raises:
            ClassificationError: The file has no usable destination.
            DestinationConflict: Every suffixed candidate holds different content.
            OSError: Reading, hashing or transferring failed.
        """
        tags = self._read_tags(source)
        digest = _CachedDigest(self._deps.hasher, source)
        base = self._deps.resolver.resolve(tags, source, dest, digest)

        for candidate in suffixed_candidates(base):
            outcome = self._settle(source, candidate, digest)
            if outcome is _Outcome.TAKEN:
                continue
            if outcome in (_Outcome.DUPLICATE, _Outcome.IN_PLACE):
                return self._handle_duplicate(source, candidate, outcome)
            try:
                return self._transfer(source, candidate, replace=outcome is _Outcome.REPLACE)
            finally:
                self._deps.locks.release(candidate)

        raise DestinationConflict(base)

    def _read_tags(self, source: Path) -> TagMap:
        try:
            return self._deps.tag_reader.read(source)
        except MetadataUnavailable as e:
            if self._config.accept_untagged:
                logger.debug("No metadata for %s (%s), filing by extension", source, e)
                return {}
            raise UnknownFileType(f"Unable to read metadata: {e}") from e

    def _settle(self, source: Path, candidate: Path, digest: _CachedDigest) -> _Outcome:
        """Decide what to do with one candidate path.

        Loops until the candidate is free and claimed, or is known to hold
        a file whose content was compared against the source.
        """
        locks = self._deps.locks
        files = self._deps.files
        while True:
            if not files.exists(candidate):
                if not locks.try_claim(candidate):
                    locks.await_release(candidate).wait()
                    continue
                # Another task may have finished writing between check and claim
                try:
                    written = files.exists(candidate)
                except BaseException:
                    locks.release(candidate)
                    raise
                if written:
                    locks.release(candidate)
                    continue
                return _Outcome.CLAIMED

            if self._is_source(source, candidate):
                return _Outcome.IN_PLACE
            if self._same_content(source, candidate, digest):
                return _Outcome.DUPLICATE
            if not self._config.overwrite:
                return _Outcome.TAKEN

            if not locks.try_claim(candidate):
                locks.await_release(candidate).wait()
                continue
            try:
                duplicate = files.exists(candidate) and self._same_content(source, candidate, digest)
            except BaseException:
                locks.release(candidate)
                raise
            if duplicate:
                locks.release(candidate)
                return _Outcome.DUPLICATE
            return _Outcome.REPLACE

    def _is_source(self, source: Path, candidate: Path) -> bool:
        existing = self._deps.files.content_path(candidate)
        try:
            return os.path.samefile(existing, source)
        except OSError:
            return False

    def _same_content(self, source: Path, candidate: Path, digest: _CachedDigest) -> bool:
        existing = self._deps.files.content_path(candidate)
        if existing.stat().st_size != source.stat().st_size:
            return False
        return self._deps.hasher.hash(existing) == digest()

    def _transfer(self, source: Path, target: Path, replace: bool) -> ImportResult:
        if replace:
            logger.info("Overwriting destination: %s", target)
        if self._config.move:
            logger.info("Moving file: %s -> %s", source, target)
            self._deps.files.move(source, target)
            return ImportResult(source, ImportAction.MOVED, target)
        logger.info("Copying file: %s -> %s", source, target)
        self._deps.files.copy(source, target)
        return ImportResult(source, ImportAction.COPIED, target)

    def _handle_duplicate(self, source: Path, target: Path, outcome: _Outcome) -> ImportResult:
        # The source itself must never be removed as its own duplicate
        if self._config.delete_duplicates and outcome is _Outcome.DUPLICATE:
            logger.info(
                "Destination already exists: %s, removing original: %s (same file)",
                target, source,
            )
            self._deps.files.delete(source)
            return ImportResult(source, ImportAction.DUPLICATE_DELETED, target)
        logger.info(
            "Destination already exists: %s, skipping original: %s (same file)",
            target, source,
        )
        return ImportResult(source, ImportAction.DUPLICATE_SKIPPED, target)
