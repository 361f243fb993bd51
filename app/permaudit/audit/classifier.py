"""Mapping of raw stat metadata to observed entries."""

import os
import stat
from pathlib import Path

from permaudit.allowlist.models import EntryType, ObservedEntry, PermissionMask


def entry_type_from_mode(mode: int) -> EntryType:
    """Determine the entry type from an ``st_mode`` value.

    Anything that is neither a directory nor a symlink (regular files,
    fifos, sockets, device nodes) is treated as a file.
    """
    if stat.S_ISDIR(mode):
        return EntryType.DIRECTORY
    if stat.S_ISLNK(mode):
        return EntryType.SYMLINK
    return EntryType.FILE


def display_path(path: Path | str) -> str:
    """Render a filesystem path as printable text.

    Bytes that are not valid UTF-8 (kept as lone surrogates by Python)
    are replaced with U+FFFD so the result can always be written out.
    """
    return os.fsencode(path).decode("utf-8", "replace")


def classify(path: Path | str, metadata: os.stat_result) -> ObservedEntry:
    """Build an ObservedEntry from a path and its stat metadata.

    For symlinks, ``metadata`` is expected to come from ``lstat`` so the
    link's own owner and mode are used.

    Args:
        path: Path of the entry.
        metadata: Result of ``stat``/``lstat`` for the entry.

    Returns:
        Normalized ObservedEntry with concrete permission bits and a
        printable path.
    """
    return ObservedEntry(
        path=display_path(path),
        entry_type=entry_type_from_mode(metadata.st_mode),
        permissions=PermissionMask.from_mode(metadata.st_mode),
        uid=metadata.st_uid,
        gid=metadata.st_gid,
    )
