"""Deterministic directory tree walker.

Walks a base directory in pre-order, visiting children sorted by name,
and yields each node together with its own stat metadata. Symlinks are
reported but never followed. Errors on individual entries are logged
and skipped; errors on the base directory itself are fatal.
"""

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from permaudit.audit.classifier import display_path
from permaudit.audit.errors import BaseDirectoryError

logger = logging.getLogger(__name__)


def stat_base_directory(base_dir: Path) -> os.stat_result:
    """Read the metadata of the base directory, following a symlinked base.

    Args:
        base_dir: Directory to audit.

    Returns:
        Stat metadata of the directory.

    Raises:
        BaseDirectoryError: If the path does not exist, cannot be stat-ed,
            or is not a directory.
    """
    shown = display_path(base_dir)
    try:
        meta = base_dir.stat()
    except FileNotFoundError as e:
        msg = f"Base directory {shown} doesn't exist"
        raise BaseDirectoryError(msg) from e
    except OSError as e:
        msg = f"Cannot access base directory {shown}: {e.strerror or e}"
        raise BaseDirectoryError(msg) from e

    if not stat.S_ISDIR(meta.st_mode):
        msg = f"Base directory {shown} is not a directory"
        raise BaseDirectoryError(msg)

    return meta


class TreeWalker:
    """Walks a directory tree and yields ``(path, metadata)`` pairs.

    The base directory is ``stat``-ed (a symlinked base is followed once),
    every other entry is ``lstat``-ed. Only real directories are descended
    into.

    Args:
        base_dir: Root of the tree to walk.
        ignore_symlinks: If True, symlinks are not yielded at all.
    """

    def __init__(self, base_dir: Path, *, ignore_symlinks: bool = False) -> None:
        self._base_dir = base_dir
        self._ignore_symlinks = ignore_symlinks

    def walk(self) -> Iterator[tuple[Path, os.stat_result]]:
        """Yield every reachable entry under the base directory, base first.

        Yields:
            Tuples of (path, stat metadata) in pre-order.

        Raises:
            BaseDirectoryError: If the base directory cannot be read.
        """
        base_meta = stat_base_directory(self._base_dir)
        yield self._base_dir, base_meta

        try:
            children = self._list_children(self._base_dir)
        except OSError as e:
            shown = display_path(self._base_dir)
            msg = f"Cannot list base directory {shown}: {e.strerror or e}"
            raise BaseDirectoryError(msg) from e

        # Stack of pending entries, kept in reverse so pop() yields sorted order
        stack: list[Path] = list(reversed(children))
        while stack:
            path = stack.pop()
            try:
                meta = path.lstat()
            except OSError as e:
                logger.warning(
                    "Cannot read metadata of %s: %s", display_path(path), e.strerror or e
                )
                continue

            if stat.S_ISLNK(meta.st_mode) and self._ignore_symlinks:
                logger.debug("Skipping symlink: %s", display_path(path))
                continue

            yield path, meta

            if not stat.S_ISDIR(meta.st_mode):
                continue

            try:
                grandchildren = self._list_children(path)
            except OSError as e:
                logger.warning(
                    "Cannot list directory %s: %s", display_path(path), e.strerror or e
                )
                continue
            stack.extend(reversed(grandchildren))

    @staticmethod
    def _list_children(directory: Path) -> list[Path]:
        """List the direct children of a directory, sorted by name."""
        return sorted(directory.iterdir(), key=lambda p: p.name)
