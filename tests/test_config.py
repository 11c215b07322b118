"""Tests for import configuration."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from mediaplacer.core.config import (
    EXTENSION_CATEGORIES,
    ImportConfig,
    MetadataBackend,
    default_parallelism,
)


def config(**overrides) -> ImportConfig:
    options = dict(source_dir=Path("/src"), dest_dir=Path("/dst"))
    options.update(overrides)
    return ImportConfig(**options)


class TestImportConfig:
    """Tests for ImportConfig validation."""

    def test_defaults(self):
        cfg = config()
        assert cfg.dry_run is False
        assert cfg.move is False
        assert cfg.overwrite is False
        assert cfg.max_parallelism == default_parallelism()
        assert cfg.restrict == []
        assert cfg.accept_untagged is False
        assert cfg.allow_hidden is False
        assert cfg.delete_duplicates is False
        assert cfg.metadata_backend is MetadataBackend.auto

    def test_paths_expanded(self):
        cfg = config(source_dir="~/photos")
        assert cfg.source_dir == (Path.home() / "photos").resolve()
        assert cfg.source_dir.is_absolute()

    def test_delete_duplicates_follows_move(self):
        assert config(move=True).delete_duplicates is True
        assert config(move=False).delete_duplicates is False

    def test_delete_duplicates_explicit(self):
        assert config(move=True, delete_duplicates=False).delete_duplicates is False
        assert config(move=False, delete_duplicates=True).delete_duplicates is True

    @pytest.mark.parametrize("value", [0, -3])
    def test_invalid_parallelism(self, value):
        with pytest.raises(ValidationError):
            config(max_parallelism=value)

    def test_restrict_normalized(self):
        cfg = config(restrict=["JPG", ".png", " Video ", ""])
        assert cfg.restrict == [".jpg", ".png", "video"]

    @pytest.mark.parametrize("value", ["j p g", ".", "*.jpg"])
    def test_invalid_restrict(self, value):
        with pytest.raises(ValidationError):
            config(restrict=[value])

    def test_restriction_set(self):
        cfg = config(restrict=["mp3", "video"])
        assert cfg.restriction_set() == frozenset({".mp3"}) | EXTENSION_CATEGORIES["video"]

    def test_empty_restriction_set(self):
        assert config().restriction_set() == frozenset()

    def test_metadata_backend_from_string(self):
        assert config(metadata_backend="exiftool").metadata_backend is MetadataBackend.exiftool

    def test_invalid_metadata_backend(self):
        with pytest.raises(ValidationError):
            config(metadata_backend="magic")

    def test_frozen(self):
        cfg = config()
        with pytest.raises(ValidationError):
            cfg.move = True
