"""Tests for the PathSet builder."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from systoolkit.errors import NotADirectory
from systoolkit.models import FileEntry, SelectionCriteria
from systoolkit.scan.pathset import build_pathset, make_predicate, scan_tree, select


def _make_tree(root: Path) -> None:
    (root / "docs").mkdir()
    (root / "docs" / "deep").mkdir()
    (root / "empty").mkdir()
    (root / "readme.txt").write_text("readme")
    (root / "main.py").write_text("print('hi')")
    (root / "docs" / "guide.txt").write_text("guide")
    (root / "docs" / "my notes.txt").write_text("notes")
    (root / "docs" / "deep" / "data.csv").write_text("a,b")
    (root / "docs" / "deep" / "archive.txt.gz").write_bytes(b"\x1f\x8b")


def _independent_walk(root: Path, extension: str | None) -> set[str]:
    found = set()
    for dirpath, _, filenames in os.walk(root):
        for name in filenames:
            if extension is None or name.endswith(extension):
                found.add(os.path.join(dirpath, name))
    return found


class TestBuildPathset:
    """Test build_pathset function."""

    @pytest.mark.parametrize("extension", [None, ".txt", ".csv", ".gz", "txt", ".none"])
    def test_matches_independent_walk(self, tmp_path: Path, extension: str | None) -> None:
        """Should return exactly the regular files an os.walk finds."""
        _make_tree(tmp_path)

        entries = build_pathset(tmp_path, extension)

        assert {str(entry.path) for entry in entries} == _independent_walk(tmp_path, extension)
        if extension:
            assert all(entry.path.name.endswith(extension) for entry in entries)

    def test_sorted_by_path_string(self, tmp_path: Path) -> None:
        """Should sort results deterministically."""
        _make_tree(tmp_path)

        paths = [str(entry.path) for entry in build_pathset(tmp_path)]

        assert paths == sorted(paths)

    def test_sizes(self, tmp_path: Path) -> None:
        """Should record file sizes in bytes."""
        (tmp_path / "five.bin").write_bytes(b"12345")
        (tmp_path / "zero.bin").write_bytes(b"")

        sizes = {entry.path.name: entry.size for entry in build_pathset(tmp_path)}

        assert sizes == {"five.bin": 5, "zero.bin": 0}

    def test_extension_is_literal_suffix(self, tmp_path: Path) -> None:
        """Should not treat the extension as a glob."""
        (tmp_path / "a.txt").write_text("x")
        (tmp_path / "star*.txt").write_text("x")

        names = {entry.path.name for entry in build_pathset(tmp_path, "*.txt")}

        assert names == {"star*.txt"}

    def test_extension_matches_name_not_directory(self, tmp_path: Path) -> None:
        """Should test the file name only."""
        (tmp_path / "logs.txt").mkdir()
        (tmp_path / "logs.txt" / "entry").write_text("x")

        assert build_pathset(tmp_path, ".txt") == []

    def test_empty_directory(self, tmp_path: Path) -> None:
        """Should return an empty list for an empty tree."""
        assert build_pathset(tmp_path) == []

    def test_missing_root(self, tmp_path: Path) -> None:
        """Should raise NotADirectory for a missing root."""
        with pytest.raises(NotADirectory):
            build_pathset(tmp_path / "missing")

    def test_file_root(self, tmp_path: Path) -> None:
        """Should raise NotADirectory when root is a file."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(NotADirectory):
            build_pathset(target)

    def test_symlinks_are_skipped(self, tmp_path: Path) -> None:
        """Should yield neither symlinked files nor files below symlinked dirs."""
        real = tmp_path / "real"
        real.mkdir()
        (real / "file.txt").write_text("x")
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "own.txt").write_text("x")
        try:
            (tree / "link.txt").symlink_to(real / "file.txt")
            (tree / "linkdir").symlink_to(real, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        names = [entry.path.name for entry in build_pathset(tree)]

        assert names == ["own.txt"]

    def test_vanished_file_is_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Should warn and continue when a file disappears mid-walk."""
        (tmp_path / "gone.txt").write_text("x")
        (tmp_path / "kept.txt").write_text("x")
        real_lstat = os.lstat

        def fake_lstat(path, *args, **kwargs):
            if str(path).endswith("gone.txt"):
                raise FileNotFoundError(2, "No such file or directory", str(path))
            return real_lstat(path, *args, **kwargs)

        monkeypatch.setattr("systoolkit.scan.pathset.os.lstat", fake_lstat)

        names = [entry.path.name for entry in build_pathset(tmp_path)]

        assert names == ["kept.txt"]
        assert "gone.txt" in caplog.text

    def test_unreadable_directory_is_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Should report walk errors as warnings."""
        (tmp_path / "kept.txt").write_text("x")
        real_walk = os.walk

        def fake_walk(top, onerror=None, followlinks=False):
            onerror(PermissionError(13, "Permission denied", str(Path(top) / "locked")))
            yield from real_walk(top, onerror=onerror, followlinks=followlinks)

        monkeypatch.setattr("systoolkit.scan.pathset.os.walk", fake_walk)

        names = [entry.path.name for entry in build_pathset(tmp_path)]

        assert names == ["kept.txt"]
        assert "Permission denied" in caplog.text


class TestScanAndSelect:
    """Test the single-walk scan_tree + select combination."""

    def test_select_equals_build(self, tmp_path: Path) -> None:
        """Selecting from a full scan should equal a filtered build."""
        _make_tree(tmp_path)

        everything = scan_tree(tmp_path)
        selected = select(everything, SelectionCriteria(root=tmp_path, extension=".txt"))

        assert selected == build_pathset(tmp_path, ".txt")
        assert len(everything) == 6

    def test_select_without_extension_keeps_all(self, tmp_path: Path) -> None:
        """No extension selects everything."""
        _make_tree(tmp_path)
        everything = scan_tree(tmp_path)

        assert select(everything, SelectionCriteria(root=tmp_path)) == everything

    def test_make_predicate(self) -> None:
        """Should build a suffix test on the name."""
        predicate = make_predicate(".log")

        assert predicate(FileEntry(Path("/var/app.log"), 1))
        assert not predicate(FileEntry(Path("/var.log/app"), 1))
        assert make_predicate(None)(FileEntry(Path("anything"), 0))
