"""Exception hierarchy for the import pipeline."""
from __future__ import annotations

from pathlib import Path


class MediaPlacerError(Exception):
    """Base class for all import errors."""


class NotADirectory(MediaPlacerError):
    """A source or destination root is missing or is not a directory."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"{path}: is not a directory")


class MetadataUnavailable(MediaPlacerError):
    """The tag reader could not produce a tag map for a file."""


class ClassificationError(MediaPlacerError):
    """A file could not be given a destination from its metadata."""


class UnknownFileType(ClassificationError):
    """No usable metadata and untagged files are rejected."""


class MissingCreateTime(ClassificationError):
    """Metadata identifies a device but carries no parseable capture date."""


class DestinationConflict(MediaPlacerError):
    """Every candidate destination is taken by a content-different file."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"No free destination left for {path}")
