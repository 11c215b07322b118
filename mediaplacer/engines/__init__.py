"""Engines: content hashing and tag readers."""
from .hash_engine import ContentHasher, hash_file
from .metadata import (
    ChainedTagReader,
    EmbeddedTagReader,
    ExifToolTagReader,
    create_tag_reader,
    parse_exiftool_output,
)

__all__ = [
    "ContentHasher",
    "hash_file",
    "ChainedTagReader",
    "EmbeddedTagReader",
    "ExifToolTagReader",
    "create_tag_reader",
    "parse_exiftool_output",
]
