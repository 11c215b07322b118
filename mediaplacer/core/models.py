"""Domain models - immutable data classes."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Union


TagMap = Mapping[str, str]


class StatKind(Enum):
    """Counters reported at the end of a run."""
    COPIED = "copied"
    MOVED = "moved"
    DUPLICATED = "duplicated"
    SKIPPED = "skipped"
    DELETED = "deleted"
    UNKNOWN = "unknown"
    ERRORED = "errored"


class ImportAction(Enum):
    """What happened to a single source file."""
    COPIED = "copied"
    MOVED = "moved"
    DUPLICATE_DELETED = "duplicate_deleted"
    DUPLICATE_SKIPPED = "duplicate_skipped"


@dataclass(frozen=True, slots=True)
class MusicPlacement:
    """Audio file identified by a track tag."""
    artist: str
    album: str
    track: str
    title: str
    extension: str


@dataclass(frozen=True, slots=True)
class PhotoPlacement:
    """Photo or video carrying a camera model tag."""
    make: str
    model: str
    media_type: str
    taken: datetime
    extension: str


@dataclass(frozen=True, slots=True)
class VendorPlacement:
    """File identified only by a vendor/handler string (action cams, drones)."""
    manufacturer: str
    device: str
    media_type: str
    taken: datetime
    extension: str


@dataclass(frozen=True, slots=True)
class GenericPlacement:
    """File without recognized tags, filed by extension."""
    basename: str
    extension: str


@dataclass(frozen=True, slots=True)
class Unresolved:
    """File that cannot be placed.

    ``missing_date`` distinguishes a device-tagged file without a usable
    capture date from a file that carries no usable tags at all.
    """
    reason: str
    missing_date: bool = False


Placement = Union[MusicPlacement, PhotoPlacement, VendorPlacement, GenericPlacement, Unresolved]


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Result of importing a single file."""
    source: Path
    action: ImportAction
    target_path: Optional[Path] = None

    @property
    def is_duplicate(self) -> bool:
        return self.action in (ImportAction.DUPLICATE_DELETED, ImportAction.DUPLICATE_SKIPPED)


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Counts for a finished run."""
    copied: int = 0
    moved: int = 0
    duplicated: int = 0
    skipped: int = 0
    deleted: int = 0
    unknown: int = 0
    errored: int = 0
    elapsed_seconds: float = 0.0

    @property
    def processed(self) -> int:
        return (
            self.copied + self.moved + self.duplicated + self.skipped
            + self.unknown + self.errored
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "copied": self.copied,
            "moved": self.moved,
            "duplicated": self.duplicated,
            "skipped": self.skipped,
            "deleted": self.deleted,
            "unknown": self.unknown,
            "errored": self.errored,
        }
