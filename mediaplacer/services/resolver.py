"""Destination path inference from tag maps.

Classification is a single pure decision (``classify``) producing a
placement variant; ``build_path`` turns any variant into a path. Tag names
differ between readers and vendors, so every attribute is looked up through
an ordered tuple of candidate names.
"""
from __future__ import annotations

import mimetypes
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..core.errors import MissingCreateTime, UnknownFileType
from ..core.models import (
    GenericPlacement,
    MusicPlacement,
    PhotoPlacement,
    Placement,
    TagMap,
    Unresolved,
    VendorPlacement,
)
from ..engines.hash_engine import ContentHasher
from .normalizer import normalize


# Capture time, most specific first
DATE_ORIGINAL_FIELDS = (
    "DateTimeOriginal",
    "Date/Time Original",
    "Date and Time (Original)",
)
DATE_CREATED_FIELDS = (
    "CreateDate",
    "Create Date",
    "MediaCreateDate",
    "Media Create Date",
    "TrackCreateDate",
    "Track Create Date",
    "DateTimeDigitized",
    "DateTime",
    "Date and Time",
)
DATE_MODIFIED_FIELDS = (
    "ModifyDate",
    "Modify Date",
    "FileModifyDate",
    "File Modification Date/Time",
)
TIMESTAMP_FIELDS = DATE_ORIGINAL_FIELDS + DATE_CREATED_FIELDS + DATE_MODIFIED_FIELDS

TRACK_FIELDS = ("Track", "TrackNumber", "Track Number")
ARTIST_FIELDS = ("Artist", "AlbumArtist", "Album Artist", "Band")
ALBUM_FIELDS = ("Album",)
TITLE_FIELDS = ("Title",)

MODEL_FIELDS = ("Model", "CameraModelName", "Camera Model Name", "UniqueCameraModel")
MAKE_FIELDS = ("Make", "Camera Make", "Manufacturer")
VENDOR_FIELDS = (
    "CompressorName",
    "Compressor Name",
    "HandlerVendorID",
    "Handler Vendor ID",
    "VendorID",
    "Vendor ID",
)
MIME_FIELDS = ("MIMEType", "MIME Type")

# Vendor strings with a known friendly (manufacturer, device) pair
VENDOR_REWRITES = (
    (re.compile(r"gopro", re.IGNORECASE), ("GoPro", "Hero")),
    (re.compile(r"^dji", re.IGNORECASE), ("DJI", "Drone")),
    (re.compile(r"^(ambarella|amba)\b", re.IGNORECASE), ("Ambarella", "Action Cam")),
    (re.compile(r"^apple$", re.IGNORECASE), ("Apple", "iPhone")),
)

DATETIME_PATTERN = re.compile(r"(\d{4}):(\d{2}):(\d{2}) (\d{2}):(\d{2}):(\d{2})")

MONTH_NAMES = {
    1: "January", 2: "February", 3: "March", 4: "April",
    5: "May", 6: "June", 7: "July", 8: "August",
    9: "September", 10: "October", 11: "November", 12: "December"
}

WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

OTHER_FOLDER = "Other"


def first_present(tags: TagMap, fields: Sequence[str]) -> str:
    """Value of the first field that is present and not blank."""
    for field in fields:
        value = (tags.get(field) or "").strip()
        if value:
            return value
    return ""


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse ``YYYY:MM:DD HH:MM:SS``; trailing zone or subseconds are ignored.

    Returns None for garbage, impossible dates and the all-zero year that
    cameras write when their clock was never set.
    """
    match = DATETIME_PATTERN.match(value.strip())
    if not match:
        return None
    year, month, day, hour, minute, second = (int(g) for g in match.groups())
    if year == 0:
        return None
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def extract_timestamp(tags: TagMap) -> datetime:
    """Capture time from the first candidate field that parses.

    Raises:
        MissingCreateTime: No candidate field holds a usable timestamp.
    """
    for field in TIMESTAMP_FIELDS:
        value = tags.get(field)
        if not value:
            continue
        taken = parse_timestamp(value)
        if taken is not None:
            return taken
    raise MissingCreateTime("No parseable capture date in metadata")


def rewrite_vendor(vendor: str) -> tuple[str, str]:
    for pattern, pair in VENDOR_REWRITES:
        if pattern.search(vendor):
            return pair
    return vendor, "Unknown"


def media_type(tags: TagMap, source: Path) -> str:
    """Top-level MIME type (image, video, audio...) or "Unknown"."""
    mime = first_present(tags, MIME_FIELDS) or mimetypes.guess_type(source.name)[0] or ""
    top = mime.split("/", 1)[0].strip()
    return top or "Unknown"


def classify(tags: TagMap, source: Path, accept_untagged: bool = False) -> Placement:
    """Decide how a file is filed. First match wins:

    1. track tag -> music
    2. camera model tag -> photo (needs a capture date)
    3. vendor/handler tag -> vendor (needs a capture date)
    4. anything else -> generic, or unresolved when untagged files are rejected
    """
    extension = source.suffix.lower()

    track = first_present(tags, TRACK_FIELDS)
    if track:
        return MusicPlacement(
            artist=first_present(tags, ARTIST_FIELDS),
            album=first_present(tags, ALBUM_FIELDS),
            track=track,
            title=first_present(tags, TITLE_FIELDS),
            extension=extension,
        )

    model = first_present(tags, MODEL_FIELDS)
    vendor = first_present(tags, VENDOR_FIELDS)
    if model or vendor:
        try:
            taken = extract_timestamp(tags)
        except MissingCreateTime:
            return Unresolved(reason="device tags without a capture date", missing_date=True)

        if model:
            return PhotoPlacement(
                make=first_present(tags, MAKE_FIELDS),
                model=model,
                media_type=media_type(tags, source),
                taken=taken,
                extension=extension,
            )

        manufacturer, device = rewrite_vendor(vendor)
        return VendorPlacement(
            manufacturer=manufacturer,
            device=device,
            media_type=media_type(tags, source),
            taken=taken,
            extension=extension,
        )

    if accept_untagged:
        return GenericPlacement(basename=source.stem, extension=extension)
    return Unresolved(reason="no usable metadata")


def _track_token(track: str) -> str:
    # "3" and "3/12" both become "03"
    match = re.match(r"\s*(\d+)", track)
    if match:
        return f"{int(match.group(1)):02d}"
    return normalize(track, default="00")


def _upper(*parts: str, default: str = "Unknown") -> str:
    return normalize(*parts, default=default).upper()


def _dated_path(
    dest: Path,
    maker: str,
    device: str,
    kind: str,
    taken: datetime,
    extension: str,
    digest: Callable[[], str],
) -> Path:
    filename = f"{taken.hour:02d}h{taken.minute:02d}m_{digest()[:8].upper()}{extension}"
    return (
        dest
        / _upper(maker)
        / _upper(device)
        / _upper(kind)
        / f"{taken.year:04d}"
        / f"{taken.month:02d}_{MONTH_NAMES[taken.month]}"
        / f"{taken.day:02d}_{WEEKDAY_NAMES[taken.weekday()]}"
        / filename
    )


def build_path(placement: Placement, dest: Path, digest: Callable[[], str]) -> Path:
    """Turn a placement into a candidate destination path.

    Args:
        placement: Output of ``classify``.
        dest: Destination root.
        digest: Returns the source content hash; only called for dated
            placements, which embed its first eight characters.

    Raises:
        MissingCreateTime: Device-tagged file without a capture date.
        UnknownFileType: No usable metadata.
    """
    match placement:
        case MusicPlacement():
            filename = (
                f"{_track_token(placement.track)}_"
                f"{normalize(placement.title, default='Unknown Title')}{placement.extension}"
            )
            return (
                dest
                / normalize(placement.artist, default="Unknown Artist")
                / normalize(placement.album, default="Unknown Album")
                / filename
            )
        case PhotoPlacement():
            return _dated_path(
                dest, placement.make, placement.model, placement.media_type,
                placement.taken, placement.extension, digest,
            )
        case VendorPlacement():
            return _dated_path(
                dest, placement.manufacturer, placement.device, placement.media_type,
                placement.taken, placement.extension, digest,
            )
        case GenericPlacement():
            folder = _upper(placement.extension.lstrip("."))
            filename = f"{normalize(placement.basename, default='unnamed')}{placement.extension}"
            return dest / OTHER_FOLDER / folder / filename
        case Unresolved(missing_date=True):
            raise MissingCreateTime(placement.reason)
        case Unresolved():
            raise UnknownFileType(placement.reason)
    raise TypeError(f"Unsupported placement: {placement!r}")


class DestinationResolver:
    """Computes candidate destination paths for source files."""

    def __init__(self, accept_untagged: bool = False, hasher: Optional[ContentHasher] = None):
        self._accept_untagged = accept_untagged
        self._hasher = hasher or ContentHasher()

    def resolve(
        self,
        tags: TagMap,
        source: Path,
        dest: Path,
        digest: Optional[Callable[[], str]] = None,
    ) -> Path:
        """Candidate destination for ``source`` under ``dest``.

        Args:
            tags: Tag map of the source file.
            source: Source file path (extension and basename).
            dest: Destination root.
            digest: Optional cached content hash provider; defaults to
                hashing ``source``.

        Raises:
            MissingCreateTime, UnknownFileType
        """
        placement = classify(tags, source, self._accept_untagged)
        if digest is None:
            digest = lambda: self._hasher.hash(source)
        return build_path(placement, dest, digest)
