"""Tests for file transfer."""
import errno
import os
from unittest.mock import patch

import pytest

from mediaplacer.services import file_ops
from mediaplacer.services.file_ops import FileManager

from fixtures import files_under, write_file


class TestCopy:
    """Tests for atomic copies."""

    def test_copy_creates_parents(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg", b"pixels")
        target = tmp_path / "dest" / "x" / "y" / "a.jpg"

        FileManager().copy(source, target)

        assert target.read_bytes() == b"pixels"
        assert source.exists()

    def test_copy_leaves_no_temp_files(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg")
        target = tmp_path / "dest" / "a.jpg"

        FileManager().copy(source, target)

        assert [p.name for p in target.parent.iterdir()] == ["a.jpg"]

    def test_copy_replaces_existing(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg", b"new")
        target = write_file(tmp_path / "dest" / "a.jpg", b"old")

        FileManager().copy(source, target)

        assert target.read_bytes() == b"new"

    def test_copy_keeps_mtime(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg")
        os.utime(source, (1_500_000_000, 1_500_000_000))
        target = tmp_path / "dest" / "a.jpg"

        FileManager().copy(source, target)

        assert target.stat().st_mtime == pytest.approx(1_500_000_000)

    def test_failed_copy_removes_temp(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg")
        target = tmp_path / "dest" / "a.jpg"

        with patch.object(file_ops.shutil, "copyfileobj", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                FileManager().copy(source, target)

        assert not target.exists()
        assert list(target.parent.iterdir()) == []


class TestMove:
    """Tests for moves."""

    def test_move(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg", b"pixels")
        target = tmp_path / "dest" / "sub" / "a.jpg"

        FileManager().move(source, target)

        assert not source.exists()
        assert target.read_bytes() == b"pixels"

    def test_move_falls_back_to_copy(self, tmp_path, monkeypatch):
        source = write_file(tmp_path / "src" / "a.jpg", b"pixels")
        target = tmp_path / "dest" / "a.jpg"
        real_replace = os.replace
        calls = []

        def cross_device_once(src, dst):
            calls.append(src)
            if len(calls) == 1:
                raise OSError(errno.EXDEV, "Invalid cross-device link")
            return real_replace(src, dst)

        monkeypatch.setattr(file_ops.os, "replace", cross_device_once)

        FileManager().move(source, target)

        assert len(calls) == 2
        assert not source.exists()
        assert target.read_bytes() == b"pixels"


class TestDelete:
    """Tests for deletion."""

    def test_delete(self, tmp_path):
        path = write_file(tmp_path / "a.jpg")
        FileManager().delete(path)
        assert not path.exists()

    def test_delete_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileManager().delete(tmp_path / "missing.jpg")


class TestDryRun:
    """Tests for the dry-run overlay."""

    def test_nothing_changes_on_disk(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg")
        other = write_file(tmp_path / "src" / "b.jpg")
        dest = tmp_path / "dest"
        files = FileManager(dry_run=True)

        files.copy(source, dest / "x" / "a.jpg")
        files.move(other, dest / "x" / "b.jpg")
        files.delete(source)

        assert source.exists()
        assert other.exists()
        assert not dest.exists()

    def test_planned_targets_exist(self, tmp_path):
        source = write_file(tmp_path / "src" / "a.jpg")
        target = tmp_path / "dest" / "a.jpg"
        files = FileManager(dry_run=True)
        assert not files.exists(target)

        files.copy(source, target)

        assert files.exists(target)
        assert files.content_path(target) == source

    def test_content_path_of_real_file(self, tmp_path):
        path = write_file(tmp_path / "a.jpg")
        assert FileManager(dry_run=True).content_path(path) == path
        assert FileManager().content_path(path) == path

    def test_exists_reflects_disk(self, tmp_path):
        path = write_file(tmp_path / "a.jpg")
        files = FileManager()
        assert files.exists(path)
        assert not files.exists(tmp_path / "b.jpg")
        assert files_under(tmp_path) == [path.relative_to(tmp_path)]
