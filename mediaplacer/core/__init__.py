"""Core domain models, configuration and protocols."""
from .errors import (
    MediaPlacerError,
    NotADirectory,
    MetadataUnavailable,
    ClassificationError,
    UnknownFileType,
    MissingCreateTime,
    DestinationConflict,
)
from .models import (
    TagMap,
    StatKind,
    ImportAction,
    ImportResult,
    RunSummary,
    MusicPlacement,
    PhotoPlacement,
    VendorPlacement,
    GenericPlacement,
    Unresolved,
    Placement,
)
from .config import ImportConfig, MetadataBackend
from .protocols import TagReader, ProgressReporter

__all__ = [
    # Errors
    "MediaPlacerError",
    "NotADirectory",
    "MetadataUnavailable",
    "ClassificationError",
    "UnknownFileType",
    "MissingCreateTime",
    "DestinationConflict",
    # Models
    "TagMap",
    "StatKind",
    "ImportAction",
    "ImportResult",
    "RunSummary",
    "MusicPlacement",
    "PhotoPlacement",
    "VendorPlacement",
    "GenericPlacement",
    "Unresolved",
    "Placement",
    # Config
    "ImportConfig",
    "MetadataBackend",
    # Protocols
    "TagReader",
    "ProgressReporter",
]
