"""Audit driver tying the walker, classifier and matcher together."""

import logging
from pathlib import Path

from permaudit.allowlist.matcher import ComplianceMatcher
from permaudit.allowlist.models import AllowList, BaseDirectoryOwner, ObservedEntry
from permaudit.audit.classifier import classify
from permaudit.audit.walker import TreeWalker, stat_base_directory

logger = logging.getLogger(__name__)


def resolve_base_owner(base_dir: Path) -> BaseDirectoryOwner:
    """Capture the owner of the base directory.

    Args:
        base_dir: Directory to audit. A symlink to a directory is followed.

    Returns:
        BaseDirectoryOwner with the directory's uid and gid.

    Raises:
        BaseDirectoryError: If the path does not exist, is not a directory,
            or cannot be stat-ed.
    """
    meta = stat_base_directory(base_dir)
    return BaseDirectoryOwner(uid=meta.st_uid, gid=meta.st_gid)


def run_audit(
    base_dir: Path,
    allowlist: AllowList,
    base_owner: BaseDirectoryOwner,
    *,
    ignore_symlinks: bool = False,
) -> list[ObservedEntry]:
    """Walk the base directory and collect non-compliant entries.

    The base directory itself is checked like any other entry.

    Args:
        base_dir: Root of the tree to audit.
        allowlist: Parsed file and directory filters.
        base_owner: Owner of the base directory (used in fallback mode).
        ignore_symlinks: If True, symlinks are skipped.

    Returns:
        Non-compliant entries in traversal order.

    Raises:
        BaseDirectoryError: If the base directory cannot be read.
    """
    matcher = ComplianceMatcher(allowlist, base_owner)
    walker = TreeWalker(base_dir, ignore_symlinks=ignore_symlinks)

    mismatches: list[ObservedEntry] = []
    checked = 0
    for path, metadata in walker.walk():
        entry = classify(path, metadata)
        checked += 1
        if not matcher.is_compliant(entry):
            mismatches.append(entry)

    logger.debug("Checked %d entries, %d non-compliant", checked, len(mismatches))
    return mismatches

