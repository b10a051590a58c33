"""Tests for filesystem measurement."""

import os
from pathlib import Path

from conftest import write_file

from flutter_cleaner.scanner import expand_path, get_directory_size, get_path_stats, path_size


class TestExpandPath:
    def test_expands_tilde(self):
        result = expand_path("~/test")
        assert str(result).startswith(str(Path.home()))

    def test_handles_absolute_path(self):
        result = expand_path("/absolute/path")
        assert str(result) == "/absolute/path"


class TestGetDirectorySize:
    def test_empty_directory(self, tmp_path):
        size, files, dirs = get_directory_size(tmp_path)
        assert size == 0
        assert files == 0
        assert dirs == 0

    def test_nested_directory(self, tmp_path):
        write_file(tmp_path / "a.txt", 10)
        write_file(tmp_path / "sub" / "deeper" / "b.txt", 5)
        size, files, dirs = get_directory_size(tmp_path)
        assert size == 15
        assert files == 2
        assert dirs == 2

    def test_does_not_follow_symlinks(self, tmp_path):
        target = tmp_path / "target"
        write_file(target / "big.bin", 1000)
        measured = tmp_path / "measured"
        measured.mkdir()
        os.symlink(target, measured / "link")
        size, _, _ = get_directory_size(measured)
        assert size == 0

    def test_respects_max_depth(self, tmp_path):
        write_file(tmp_path / "a" / "b" / "c" / "deep.txt", 7)
        size, _, _ = get_directory_size(tmp_path, max_depth=1)
        assert size == 0

    def test_missing_directory(self, tmp_path):
        assert get_directory_size(tmp_path / "missing") == (0, 0, 0)


class TestPathSize:
    def test_file(self, tmp_path):
        assert path_size(write_file(tmp_path / "f", 42)) == 42

    def test_directory(self, tmp_path):
        write_file(tmp_path / "d" / "f", 42)
        assert path_size(tmp_path / "d") == 42

    def test_missing(self, tmp_path):
        assert path_size(tmp_path / "missing") == 0


class TestGetPathStats:
    def test_skips_missing_paths(self, tmp_path):
        f = write_file(tmp_path / "f", 3)
        write_file(tmp_path / "d" / "g", 4)
        stats = get_path_stats([tmp_path / "missing", f, tmp_path / "d"])
        assert [s.path for s in stats] == [f, tmp_path / "d"]
        assert [s.size_bytes for s in stats] == [3, 4]
        assert [s.is_dir for s in stats] == [False, True]

    def test_includes_dangling_symlink(self, tmp_path):
        link = tmp_path / "dangling"
        os.symlink(tmp_path / "nowhere", link)
        stats = get_path_stats([link])
        assert len(stats) == 1
        assert stats[0].is_dir is False
