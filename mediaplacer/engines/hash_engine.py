"""Content hashing and media extension sets.

Digests address content only (duplicate detection), they are not used for
anything security related.
"""
from __future__ import annotations

import hashlib
from pathlib import Path


IMAGE_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".webp", ".heic", ".heif",
    ".tif", ".tiff", ".bmp", ".gif", ".dng", ".cr2", ".nef", ".arw", ".raf",
})

VIDEO_EXTENSIONS = frozenset({
    ".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v",
    ".3gp", ".wmv", ".flv", ".mts", ".m2ts",
})

AUDIO_EXTENSIONS = frozenset({
    ".mp3", ".flac", ".ogg", ".oga", ".m4a", ".aac", ".wav", ".wma", ".opus",
})

CHUNK_SIZE = 8 * 1024


def hash_file(path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Compute the SHA-1 hex digest of a file's contents.

    The file is streamed in fixed-size chunks so memory use does not depend on
    file size. Read errors propagate as ``OSError``.
    """
    digest = hashlib.sha1()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


class ContentHasher:
    """Hash engine used for dedup comparisons and filename tokens."""

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size

    @property
    def name(self) -> str:
        return "sha1"

    def hash(self, path: Path) -> str:
        """Hex digest of ``path``."""
        return hash_file(path, self._chunk_size)
