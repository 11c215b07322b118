"""Shared helpers for the test suite.

Tag maps are supplied by ``FakeTagReader`` so tests control metadata
exactly, without depending on Pillow or exiftool output.
"""
from __future__ import annotations

import hashlib
import threading
from pathlib import Path
from typing import Optional

from PIL import Image

from mediaplacer.core.config import ImportConfig
from mediaplacer.core.errors import MetadataUnavailable


class FakeTagReader:
    """Tag reader returning canned tag maps keyed by file name.

    Files without an entry raise MetadataUnavailable unless a default map
    is given.
    """

    def __init__(self, tags: Optional[dict[str, dict[str, str]]] = None,
                 default: Optional[dict[str, str]] = None):
        self._tags = dict(tags or {})
        self._default = default
        self._lock = threading.Lock()
        self.calls: list[Path] = []

    @property
    def name(self) -> str:
        return "fake"

    def set(self, filename: str, tags: dict[str, str]) -> None:
        self._tags[filename] = tags

    def read(self, path: Path) -> dict[str, str]:
        with self._lock:
            self.calls.append(path)
        if path.name in self._tags:
            return dict(self._tags[path.name])
        if self._default is not None:
            return dict(self._default)
        raise MetadataUnavailable(f"{path}: no tags")


def camera_tags(
    model: str = "X100",
    make: str = "FUJI",
    taken: str = "2020:05:03 10:15:00",
    mime: str = "image/jpeg",
) -> dict[str, str]:
    return {
        "Make": make,
        "Model": model,
        "DateTimeOriginal": taken,
        "MIMEType": mime,
    }


def music_tags(
    track: str = "3",
    title: str = "Song",
    artist: str = "Band",
    album: str = "",
) -> dict[str, str]:
    tags = {"Track": track, "Title": title, "Artist": artist}
    if album:
        tags["Album"] = album
    return tags


def write_file(path: Path, content: bytes = b"content") -> Path:
    """Write ``content`` to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def sha1_of(content: bytes) -> str:
    return hashlib.sha1(content).hexdigest()


def make_tree(tmp_path: Path) -> tuple[Path, Path]:
    """Create empty source and destination roots."""
    source = tmp_path / "source"
    dest = tmp_path / "dest"
    source.mkdir()
    dest.mkdir()
    return source, dest


def make_config(source: Path, dest: Path, **overrides) -> ImportConfig:
    options = dict(source_dir=source, dest_dir=dest, max_parallelism=4)
    options.update(overrides)
    return ImportConfig(**options)


def files_under(root: Path) -> list[Path]:
    """Relative paths of every regular file below ``root``, sorted."""
    return sorted(p.relative_to(root) for p in root.rglob("*") if p.is_file())


def create_exif_jpeg(
    path: Path,
    make: str = "FUJIFILM",
    model: str = "X100",
    taken: str = "2020:05:03 10:15:00",
    color: str = "red",
) -> Path:
    """Write a small JPEG carrying Make/Model and DateTimeOriginal EXIF tags."""
    path.parent.mkdir(parents=True, exist_ok=True)
    exif = Image.Exif()
    exif[0x010F] = make   # Make
    exif[0x0110] = model  # Model
    exif[0x9003] = taken  # DateTimeOriginal
    img = Image.new("RGB", (16, 16), color=color)
    img.save(path, format="JPEG", exif=exif)
    return path
