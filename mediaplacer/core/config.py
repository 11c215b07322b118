"""Import configuration with validation."""
from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..engines.hash_engine import AUDIO_EXTENSIONS, IMAGE_EXTENSIONS, VIDEO_EXTENSIONS


EXTENSION_CATEGORIES = {
    "image": IMAGE_EXTENSIONS,
    "video": VIDEO_EXTENSIONS,
    "audio": AUDIO_EXTENSIONS,
}


class MetadataBackend(str, Enum):
    """Where tag maps come from."""
    auto = "auto"            # Embedded decoder, exiftool when it fails
    embedded = "embedded"    # Pillow only
    exiftool = "exiftool"    # External exiftool executable only


def default_parallelism() -> int:
    return os.cpu_count() or 1


class ImportConfig(BaseModel):
    """Configuration for one import run.

    Built once from CLI flags and passed to every component. Immutable for the
    whole run.
    """
    model_config = ConfigDict(frozen=True)

    source_dir: Path = Field(..., description="Media source directory")
    dest_dir: Path = Field(..., description="Media destination directory")
    dry_run: bool = Field(
        default=False,
        description="Report what would be done without touching the filesystem",
    )
    move: bool = Field(
        default=False,
        description="Move files instead of copying them",
    )
    overwrite: bool = Field(
        default=False,
        description="Replace content-different files found at the destination",
    )
    max_parallelism: int = Field(
        default_factory=default_parallelism,
        description="Maximum number of files transferred at the same time",
    )
    restrict: List[str] = Field(
        default_factory=list,
        description="Accepted extensions or categories (image, video, audio); empty accepts all",
    )
    accept_untagged: bool = Field(
        default=False,
        description="File untagged media under Other/ instead of counting it as unknown",
    )
    allow_hidden: bool = Field(
        default=False,
        description="Walk into hidden files and directories",
    )
    delete_duplicates: Optional[bool] = Field(
        default=None,
        validate_default=True,
        description="Delete the source when it duplicates an existing file (default: same as move)",
    )
    metadata_backend: MetadataBackend = Field(
        default=MetadataBackend.auto,
        description="Tag reader to use",
    )

    @field_validator("source_dir", "dest_dir")
    @classmethod
    def expand_path(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("max_parallelism")
    @classmethod
    def check_parallelism(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_parallelism must be at least 1")
        return value

    @field_validator("restrict")
    @classmethod
    def check_restrict(cls, value: List[str]) -> List[str]:
        cleaned = []
        for entry in value:
            entry = entry.strip().lower()
            if not entry:
                continue
            if entry in EXTENSION_CATEGORIES:
                cleaned.append(entry)
                continue
            ext = entry.lstrip(".")
            if not ext or not ext.isalnum():
                raise ValueError(f"Invalid extension or category: {entry!r}")
            cleaned.append(f".{ext}")
        return cleaned

    @field_validator("delete_duplicates")
    @classmethod
    def default_delete_duplicates(cls, value: Optional[bool], info: ValidationInfo) -> bool:
        if value is None:
            return bool(info.data.get("move", False))
        return value

    def restriction_set(self) -> frozenset[str]:
        """Accepted extensions (lower-case, with dot). Empty means no restriction."""
        accepted: set[str] = set()
        for entry in self.restrict:
            if entry in EXTENSION_CATEGORIES:
                accepted.update(EXTENSION_CATEGORIES[entry])
            else:
                accepted.add(entry)
        return frozenset(accepted)
