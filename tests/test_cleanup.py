"""Tests for the cleaner."""

from __future__ import annotations

from pathlib import Path

import pytest

from systoolkit.actions.cleanup import clean, find_junk
from systoolkit.errors import NotADirectory
from systoolkit.models import DEFAULT_CLEANUP_RULES, CleanupRules

JUNK = ["build.tmp", "server.log", "draft.txt~", "sub/old.bak", "sub/deeper/trace.log"]
KEEP = ["main.py", "logbook.txt", "sub/notes.md", "sub/deeper/tmp", "backup.tar.gz"]


def _populate(root: Path) -> None:
    for name in JUNK + KEEP:
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(name)


def _remaining(root: Path) -> set[str]:
    return {path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()}


class TestFindJunk:
    """Test find_junk function."""

    def test_matches_union_of_rules(self, tmp_path: Path) -> None:
        """Should select exactly the files matching any suffix."""
        _populate(tmp_path)

        found = {entry.path.relative_to(tmp_path).as_posix() for entry in find_junk(tmp_path)}

        assert found == set(JUNK)

    def test_custom_rules(self, tmp_path: Path) -> None:
        """Should honour an extended rule set."""
        _populate(tmp_path)
        (tmp_path / "edit.swp").write_text("x")

        found = {entry.path.name for entry in find_junk(tmp_path, DEFAULT_CLEANUP_RULES.extend(".swp"))}

        assert "edit.swp" in found


class TestClean:
    """Test clean function."""

    def test_dry_run_removes_nothing(self, tmp_path: Path) -> None:
        """Should list the junk but leave the tree untouched."""
        _populate(tmp_path)
        before = _remaining(tmp_path)

        report = clean(tmp_path, dry_run=True)

        assert report.dry_run is True
        assert {e.path.relative_to(tmp_path).as_posix() for e in report.matched} == set(JUNK)
        assert report.deleted == []
        assert _remaining(tmp_path) == before

    def test_dry_run_never_reaches_unlink(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Deletion is structurally unreachable in dry-run mode."""
        _populate(tmp_path)

        def forbidden(self, *args, **kwargs):
            raise AssertionError(f"unlink called on {self}")

        monkeypatch.setattr(Path, "unlink", forbidden)

        report = clean(tmp_path, DEFAULT_CLEANUP_RULES, dry_run=True)

        assert len(report.matched) == len(JUNK)

    def test_live_removes_exactly_matches(self, tmp_path: Path) -> None:
        """Should delete junk and keep everything else."""
        _populate(tmp_path)

        report = clean(tmp_path)

        assert _remaining(tmp_path) == set(KEEP)
        assert len(report.deleted) == len(JUNK)
        assert report.failed == []
        assert report.freed_bytes == sum(len(name) for name in JUNK)

    def test_undeletable_file_does_not_abort(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Should warn about failures and keep deleting the rest."""
        _populate(tmp_path)
        real_unlink = Path.unlink
        locked = tmp_path / "server.log"

        def guarded_unlink(self, *args, **kwargs):
            if self == locked:
                raise PermissionError(13, "Permission denied", str(self))
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", guarded_unlink)

        report = clean(tmp_path)

        assert [entry.path for entry in report.failed] == [locked]
        assert len(report.deleted) == len(JUNK) - 1
        assert _remaining(tmp_path) == set(KEEP) | {"server.log"}
        assert "Could not delete" in caplog.text

    def test_vanished_file_is_soft_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A file removed concurrently is reported, not fatal."""
        _populate(tmp_path)
        real_unlink = Path.unlink

        def racing_unlink(self, *args, **kwargs):
            if self.name == "build.tmp":
                real_unlink(self)
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", racing_unlink)

        report = clean(tmp_path)

        assert [entry.path.name for entry in report.failed] == ["build.tmp"]
        assert _remaining(tmp_path) == set(KEEP)

    def test_empty_rules_delete_nothing(self, tmp_path: Path) -> None:
        """No rules, no deletions."""
        _populate(tmp_path)

        report = clean(tmp_path, CleanupRules(()))

        assert report.matched == []
        assert len(_remaining(tmp_path)) == len(JUNK) + len(KEEP)

    def test_missing_root(self, tmp_path: Path) -> None:
        """Should raise NotADirectory for a missing root."""
        with pytest.raises(NotADirectory):
            clean(tmp_path / "missing", dry_run=True)
