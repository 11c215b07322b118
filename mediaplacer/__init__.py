"""Metadata-driven media import and deduplication.

Files from a source tree are placed into a destination tree organized by
device and capture date, or by artist and album for music.
"""

__version__ = "1.0.0"

# Core exports
from .core.config import ImportConfig, MetadataBackend
from .core.errors import (
    MediaPlacerError,
    NotADirectory,
    MetadataUnavailable,
    UnknownFileType,
    MissingCreateTime,
    DestinationConflict,
)
from .core.models import ImportAction, ImportResult, RunSummary, StatKind
from .core.protocols import TagReader, ProgressReporter

# Engine exports
from .engines.hash_engine import ContentHasher
from .engines.metadata import create_tag_reader

# Service exports
from .services.importer import MediaImporter, ImporterDependencies
from .services.resolver import DestinationResolver
from .services.scanner import TaskScheduler, run_import

# Logging exports
from .logging.rich_logger import RichProgressReporter

__all__ = [
    # Core
    "ImportConfig",
    "MetadataBackend",
    "MediaPlacerError",
    "NotADirectory",
    "MetadataUnavailable",
    "UnknownFileType",
    "MissingCreateTime",
    "DestinationConflict",
    "ImportAction",
    "ImportResult",
    "RunSummary",
    "StatKind",
    "TagReader",
    "ProgressReporter",
    # Engines
    "ContentHasher",
    "create_tag_reader",
    # Services
    "MediaImporter",
    "ImporterDependencies",
    "DestinationResolver",
    "TaskScheduler",
    "run_import",
    # Logging
    "RichProgressReporter",
]
