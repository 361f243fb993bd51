"""Tests for the audit driver."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from permaudit.allowlist.models import AllowList, BaseDirectoryOwner, EntryType
from permaudit.allowlist.parser import build_allowlists
from permaudit.audit.driver import resolve_base_owner, run_audit
from permaudit.audit.errors import BaseDirectoryError
from permaudit.audit.walker import TreeWalker


def _names(base: Path, entries: list) -> list[str]:
    """Relative paths of reported entries."""
    return [str(Path(e.path).relative_to(base)) for e in entries]


class TestResolveBaseOwner:
    """Tests for resolve_base_owner."""

    def test_returns_directory_owner(self, tmp_path: Path) -> None:
        """uid and gid come from the directory metadata."""
        meta = tmp_path.stat()
        owner = resolve_base_owner(tmp_path)
        assert owner == BaseDirectoryOwner(uid=meta.st_uid, gid=meta.st_gid)

    def test_missing(self, tmp_path: Path) -> None:
        """A missing path is a BaseDirectoryError."""
        with pytest.raises(BaseDirectoryError, match="doesn't exist"):
            resolve_base_owner(tmp_path / "nope")

    def test_not_a_directory(self, tmp_path: Path) -> None:
        """A regular file is rejected."""
        file_path = tmp_path / "file"
        file_path.write_text("x")
        with pytest.raises(BaseDirectoryError, match="not a directory"):
            resolve_base_owner(file_path)

    def test_symlinked_base_followed(self, tmp_path: Path) -> None:
        """A symlink pointing at a directory is accepted."""
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real)
        assert resolve_base_owner(link) == resolve_base_owner(real)

    def test_file_rejected_from_single_stat(self, tmp_path: Path) -> None:
        """The directory check uses the metadata already read."""
        file_path = tmp_path / "file"
        file_path.write_text("x")
        original = Path.stat

        with (
            patch.object(Path, "stat", autospec=True, side_effect=original) as mocked,
            pytest.raises(BaseDirectoryError, match="not a directory"),
        ):
            resolve_base_owner(file_path)

        assert mocked.call_count == 1

    def test_same_error_as_walker(self, tmp_path: Path) -> None:
        """Owner lookup and walk report an inaccessible base identically."""

        def deny(self: Path, *args: object, **kwargs: object) -> os.stat_result:
            raise PermissionError(13, "Permission denied")

        with patch.object(Path, "stat", deny):
            with pytest.raises(BaseDirectoryError) as from_owner:
                resolve_base_owner(tmp_path)
            with pytest.raises(BaseDirectoryError) as from_walk:
                list(TreeWalker(tmp_path).walk())

        assert str(from_owner.value) == str(from_walk.value)
        assert "Cannot access base directory" in str(from_owner.value)


class TestRunAuditFallback:
    """Tests for audits without filters."""

    def test_owned_tree_is_clean(self, sample_tree: Path) -> None:
        """Everything we created is owned like the base directory."""
        owner = resolve_base_owner(sample_tree)
        assert run_audit(sample_tree, AllowList(), owner) == []

    def test_foreign_owner_reported(self, sample_tree: Path) -> None:
        """With a different base owner, every entry is reported, base included."""
        stranger = BaseDirectoryOwner(uid=os.getuid() + 1, gid=os.getgid())
        mismatches = run_audit(sample_tree, AllowList(), stranger, ignore_symlinks=True)
        assert _names(sample_tree, mismatches) == [".", "a.txt", "b.sh", "sub", "sub/c.key"]


class TestRunAuditFiltered:
    """Tests for audits with explicit filters."""

    def test_permission_mismatches_in_order(self, sample_tree: Path) -> None:
        """Entries deviating from the masks are reported in walk order."""
        owner = resolve_base_owner(sample_tree)
        allowlist = build_allowlists("rw-r--r--", "rwxr-xr-x")

        mismatches = run_audit(sample_tree, allowlist, owner, ignore_symlinks=True)

        assert _names(sample_tree, mismatches) == ["b.sh", "sub", "sub/c.key"]
        assert mismatches[1].entry_type == EntryType.DIRECTORY
        assert mismatches[1].permissions.render() == "rwx------"

    def test_base_directory_checked(self, sample_tree: Path) -> None:
        """The base directory is subject to the directory filters."""
        owner = resolve_base_owner(sample_tree)
        allowlist = build_allowlists("*********", "rwx------")

        mismatches = run_audit(sample_tree, allowlist, owner)

        assert _names(sample_tree, mismatches) == ["."]

    def test_directories_excluded_by_file_only_filters(self, sample_tree: Path) -> None:
        """Only file filters: every directory is reported."""
        owner = resolve_base_owner(sample_tree)
        mismatches = run_audit(sample_tree, build_allowlists("*********", None), owner)
        assert _names(sample_tree, mismatches) == [".", "sub"]

    def test_files_excluded_by_directory_only_filters(self, sample_tree: Path) -> None:
        """Only directory filters: every file and symlink is reported."""
        owner = resolve_base_owner(sample_tree)
        mismatches = run_audit(sample_tree, build_allowlists(None, "*********"), owner)
        assert _names(sample_tree, mismatches) == ["a.txt", "b.sh", "link", "sub/c.key"]
        assert mismatches[2].entry_type == EntryType.SYMLINK

    def test_owner_filters(self, sample_tree: Path) -> None:
        """uid/gid-only filters accept the owning user."""
        owner = resolve_base_owner(sample_tree)
        allowlist = build_allowlists(f"u{owner.uid}g{owner.gid}", f"u{owner.uid}")
        assert run_audit(sample_tree, allowlist, owner) == []

    def test_missing_base_directory(self, tmp_path: Path) -> None:
        """The walk refuses a missing base directory."""
        owner = BaseDirectoryOwner(uid=0, gid=0)
        with pytest.raises(BaseDirectoryError):
            run_audit(tmp_path / "missing", AllowList(), owner)
