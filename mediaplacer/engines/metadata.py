"""Tag map readers.

Every reader turns a file into a flat ``{tag name: string value}`` mapping.
The embedded reader names tags after Pillow's EXIF table (``Model``,
``DateTimeOriginal``); exiftool's default output uses descriptive names
(``Camera Model Name``, ``Date/Time Original``). The resolver accepts both.
"""
from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from PIL import ExifTags, Image, UnidentifiedImageError

from ..core.errors import MetadataUnavailable


logger = logging.getLogger(__name__)

# exiftool pads tag names to this width before the ": " separator
EXIFTOOL_KEY_WIDTH = 32

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def _clean_value(value: object) -> Optional[str]:
    """Render an EXIF value as text, dropping binary blobs."""
    if isinstance(value, bytes):
        return None
    if isinstance(value, (tuple, list)):
        return None
    text = str(value).replace("\x00", "").strip()
    return text or None


class EmbeddedTagReader:
    """Reads EXIF tags with Pillow's embedded decoder."""

    @property
    def name(self) -> str:
        return "embedded"

    def read(self, path: Path) -> dict[str, str]:
        """Read EXIF tags from an image file.

        Raises:
            MetadataUnavailable: The file is not an image Pillow can open.
        """
        try:
            with Image.open(path) as img:
                exif = img.getexif()
                tags: dict[str, str] = {}
                self._collect(exif.items(), tags)
                self._collect(exif.get_ifd(ExifTags.IFD.Exif).items(), tags)
                mime = img.get_format_mimetype()
                if mime:
                    tags["MIMEType"] = mime
            # Filesystem mtime, as exiftool reports it
            modified = datetime.fromtimestamp(path.stat().st_mtime)
            tags["FileModifyDate"] = modified.strftime(EXIF_DATETIME_FORMAT)
            return tags
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise MetadataUnavailable(f"{path}: {e}") from e

    @staticmethod
    def _collect(items, tags: dict[str, str]) -> None:
        for tag_id, value in items:
            name = ExifTags.TAGS.get(tag_id)
            if not name:
                continue
            text = _clean_value(value)
            if text is not None:
                tags[name] = text


def parse_exiftool_output(output: str) -> dict[str, str]:
    """Parse exiftool's default fixed-width ``Key : Value`` listing.

    The key occupies the first 32 characters of each line and the value
    follows the colon column. Lines that do not fit the layout fall back to
    splitting at the first colon.
    """
    tags: dict[str, str] = {}
    for line in output.strip("\r\n").splitlines():
        line = line.rstrip("\r")
        if len(line) > EXIFTOOL_KEY_WIDTH and line[EXIFTOOL_KEY_WIDTH] == ":":
            key = line[:EXIFTOOL_KEY_WIDTH].strip()
            value = line[EXIFTOOL_KEY_WIDTH + 1:].strip()
        else:
            key, sep, value = line.partition(":")
            if not sep:
                continue
            key = key.strip()
            value = value.strip()
        if key:
            tags[key] = value
    return tags


class ExifToolTagReader:
    """Reads tags by running the external ``exiftool`` executable.

    Slower than the embedded reader but understands audio and video
    containers (track numbers, handler vendors, media create dates).
    """

    def __init__(self, executable: str = "exiftool"):
        self._executable = executable

    @property
    def name(self) -> str:
        return "exiftool"

    def read(self, path: Path) -> dict[str, str]:
        """Run exiftool on ``path`` and parse its listing.

        Raises:
            MetadataUnavailable: exiftool is missing or failed on the file.
        """
        try:
            result = subprocess.run(
                [self._executable, str(path)],
                capture_output=True,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as e:
            raise MetadataUnavailable(f"{self._executable} not found in PATH") from e
        except OSError as e:
            raise MetadataUnavailable(f"{path}: {e}") from e

        if result.returncode != 0:
            message = result.stderr.strip() or f"exit status {result.returncode}"
            raise MetadataUnavailable(f"{path}: {message}")

        return parse_exiftool_output(result.stdout)


class ChainedTagReader:
    """Tries the primary reader and falls back to the secondary one."""

    def __init__(self, primary, fallback):
        self._primary = primary
        self._fallback = fallback

    @property
    def name(self) -> str:
        return f"{self._primary.name}+{self._fallback.name}"

    def read(self, path: Path) -> dict[str, str]:
        try:
            return self._primary.read(path)
        except MetadataUnavailable as e:
            logger.debug("%s reader failed (%s), trying %s", self._primary.name, e, self._fallback.name)
            return self._fallback.read(path)


def create_tag_reader(backend: str = "auto"):
    """Factory for the configured tag reader.

    Args:
        backend: ``embedded``, ``exiftool`` or ``auto`` (embedded first,
            exiftool when the embedded decoder cannot read the file).
    """
    backend = getattr(backend, "value", backend)
    if backend == "embedded":
        return EmbeddedTagReader()
    if backend == "exiftool":
        return ExifToolTagReader()
    if backend == "auto":
        return ChainedTagReader(EmbeddedTagReader(), ExifToolTagReader())
    raise ValueError(f"Unknown metadata backend: {backend}")
