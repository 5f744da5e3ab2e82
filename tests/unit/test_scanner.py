"""
Tests for HEIC discovery.
"""

import os
from pathlib import Path

import pytest

from core.scanner import is_candidate, scan_for_candidates


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


class TestIsCandidate:
    """Test extension matching."""

    @pytest.mark.parametrize("name", ["a.heic", "a.HEIC", "a.HeIc", "dir.x/a.heic"])
    def test_matches_heic(self, name):
        assert is_candidate(name)

    @pytest.mark.parametrize("name", ["a.heif", "a.jpg", "heic", "a.heic.bak", ".heic", "a"])
    def test_rejects_others(self, name):
        assert not is_candidate(name)


class TestScanForCandidates:
    """Test scan_for_candidates()."""

    def test_recursive_case_insensitive(self, tmp_path):
        _touch(tmp_path / "a" / "x.heic")
        _touch(tmp_path / "a" / "b" / "y.HEIC")
        _touch(tmp_path / "a" / "z.png")

        found = scan_for_candidates(tmp_path)

        assert [c.path for c in found] == [tmp_path / "a" / "x.heic", tmp_path / "a" / "b" / "y.HEIC"]

    def test_files_before_subdirectories_sorted(self, tmp_path):
        _touch(tmp_path / "b" / "img.heic")
        _touch(tmp_path / "a" / "img.heic")
        _touch(tmp_path / "z.heic")
        _touch(tmp_path / "m.heic")

        found = [c.path.relative_to(tmp_path).as_posix() for c in scan_for_candidates(tmp_path)]

        assert found == ["m.heic", "z.heic", "a/img.heic", "b/img.heic"]

    def test_returns_absolute_paths(self, tmp_path, monkeypatch):
        _touch(tmp_path / "x.heic")
        monkeypatch.chdir(tmp_path)

        found = scan_for_candidates(".")

        assert found[0].path.is_absolute()

    def test_empty_directory(self, tmp_path):
        assert scan_for_candidates(tmp_path) == []

    def test_missing_root_yields_nothing(self, tmp_path):
        assert scan_for_candidates(tmp_path / "missing") == []

    def test_root_is_a_file(self, tmp_path):
        target = _touch(tmp_path / "x.heic")
        assert scan_for_candidates(target) == []

    def test_directory_named_like_candidate_is_ignored(self, tmp_path):
        (tmp_path / "album.heic").mkdir()
        _touch(tmp_path / "album.heic" / "x.heic")

        found = [c.path.name for c in scan_for_candidates(tmp_path)]

        assert found == ["x.heic"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_broken_symlink_is_skipped(self, tmp_path):
        _touch(tmp_path / "good.heic")
        os.symlink(tmp_path / "gone.heic", tmp_path / "broken.heic")

        found = [c.path.name for c in scan_for_candidates(tmp_path)]

        assert found == ["good.heic"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_follows_directory_symlinks(self, tmp_path):
        outside = tmp_path / "outside"
        _touch(outside / "far.heic")
        root = tmp_path / "root"
        root.mkdir()
        os.symlink(outside, root / "link", target_is_directory=True)

        found = [c.path for c in scan_for_candidates(root)]

        assert found == [root / "link" / "far.heic"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlink_cycle_terminates(self, tmp_path):
        _touch(tmp_path / "a" / "x.heic")
        os.symlink(tmp_path, tmp_path / "a" / "loop", target_is_directory=True)

        found = [c.path for c in scan_for_candidates(tmp_path)]

        assert found == [tmp_path / "a" / "x.heic"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_second_link_to_same_directory_is_walked(self, tmp_path):
        _touch(tmp_path / "shared" / "x.heic")
        os.symlink(tmp_path / "shared", tmp_path / "alias", target_is_directory=True)

        found = [c.path for c in scan_for_candidates(tmp_path)]

        assert found == [tmp_path / "alias" / "x.heic", tmp_path / "shared" / "x.heic"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_cycle_below_an_alias_terminates(self, tmp_path):
        _touch(tmp_path / "shared" / "x.heic")
        os.symlink(tmp_path / "shared", tmp_path / "alias", target_is_directory=True)
        os.symlink(tmp_path / "shared", tmp_path / "shared" / "self", target_is_directory=True)

        found = [c.path for c in scan_for_candidates(tmp_path)]

        assert found == [tmp_path / "alias" / "x.heic", tmp_path / "shared" / "x.heic"]

    @pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root can read everything")
    def test_unreadable_directory_is_skipped(self, tmp_path):
        _touch(tmp_path / "ok.heic")
        locked = tmp_path / "locked"
        _touch(locked / "hidden.heic")
        locked.chmod(0)
        try:
            found = [c.path.name for c in scan_for_candidates(tmp_path)]
        finally:
            locked.chmod(0o755)

        assert found == ["ok.heic"]
