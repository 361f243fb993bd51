"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable
from pathlib import Path

import pytest
from permaudit.allowlist.models import EntryType, ObservedEntry, PermissionMask


def make_entry(
    path: str = "src/lib.rs",
    entry_type: EntryType = EntryType.FILE,
    mode: int = 0o644,
    uid: int = 1000,
    gid: int = 1000,
) -> ObservedEntry:
    """Create a test ObservedEntry from an octal mode."""
    return ObservedEntry(
        path=path,
        entry_type=entry_type,
        permissions=PermissionMask.from_mode(mode),
        uid=uid,
        gid=gid,
    )


@pytest.fixture
def entry_factory() -> Callable[..., ObservedEntry]:
    """Factory for ObservedEntry instances with sensible defaults."""
    return make_entry


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Build a small tree with explicit permissions.

    Layout::

        tree/            0o755
        tree/a.txt       0o644
        tree/b.sh        0o755
        tree/sub/        0o700
        tree/sub/c.key   0o600
        tree/link        -> a.txt
    """
    base = tmp_path / "tree"
    base.mkdir()
    (base / "a.txt").write_text("a")
    (base / "b.sh").write_text("#!/bin/sh\n")
    sub = base / "sub"
    sub.mkdir()
    (sub / "c.key").write_text("secret")
    (base / "link").symlink_to("a.txt")

    os.chmod(base, 0o755)
    os.chmod(base / "a.txt", 0o644)
    os.chmod(base / "b.sh", 0o755)
    os.chmod(sub, 0o700)
    os.chmod(sub / "c.key", 0o600)
    return base
