"""Compliance matching of observed entries against an allowlist."""

import logging

from permaudit.allowlist.models import (
    AllowList,
    BaseDirectoryOwner,
    FilterSpec,
    MatchMode,
    ObservedEntry,
)

logger = logging.getLogger(__name__)


def spec_matches(spec: FilterSpec, entry: ObservedEntry) -> bool:
    """Check a single spec against an entry. Absent spec fields always match."""
    if spec.uid is not None and spec.uid != entry.uid:
        return False
    if spec.gid is not None and spec.gid != entry.gid:
        return False
    if spec.permissions is not None and not spec.permissions.matches(entry.permissions):
        return False
    return True


class ComplianceMatcher:
    """Decides whether observed entries comply with an allowlist.

    The matching mode is derived from the allowlist once, at
    construction. In fallback mode only the owner is compared against
    the base directory owner. In filtered mode an entry complies iff at
    least one spec for its type matches; an empty list for the type
    means no entry of that type complies.

    Args:
        allowlist: Parsed file and directory filters.
        base_owner: Owner of the base directory.
    """

    def __init__(self, allowlist: AllowList, base_owner: BaseDirectoryOwner) -> None:
        self._allowlist = allowlist
        self._base_owner = base_owner
        self._mode = allowlist.mode
        logger.debug("Matching in %s mode", self._mode.value)

    @property
    def mode(self) -> MatchMode:
        """Matching mode in effect for this run."""
        return self._mode

    def is_compliant(self, entry: ObservedEntry) -> bool:
        """Check whether an entry is allowed.

        Args:
            entry: Observed filesystem entry.

        Returns:
            True if the entry is compliant, False if it must be reported.
        """
        if self._mode == MatchMode.FALLBACK:
            return entry.uid == self._base_owner.uid and entry.gid == self._base_owner.gid

        return any(spec_matches(spec, entry) for spec in self._allowlist.for_type(entry.entry_type))


def is_compliant(
    entry: ObservedEntry,
    allowlist: AllowList,
    base_owner: BaseDirectoryOwner,
) -> bool:
    """Check a single entry without keeping a matcher around."""
    return ComplianceMatcher(allowlist, base_owner).is_compliant(entry)
