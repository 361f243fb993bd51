"""Allowlist domain models for owner and permission auditing.

This module defines the core data structures shared by the filter
parser, the compliance matcher and the audit driver: permission bits
and masks, parsed filter specs, the allowlist itself and the entries
observed while walking a directory tree.
"""

from dataclasses import dataclass, field
from enum import Enum

# POSIX letter expected at each of the 9 mask positions
PERMISSION_LETTERS: str = "rwxrwxrwx"


class PermissionBit(str, Enum):
    """State of a single permission position.

    Attributes:
        SET: Bit must be set (or is set, for observed entries).
        UNSET: Bit must be cleared (or is cleared).
        WILDCARD: Bit is ignored during matching. Only valid in filters.
    """

    SET = "set"
    UNSET = "unset"
    WILDCARD = "wildcard"


class EntryType(str, Enum):
    """Type of an observed filesystem entry.

    Attributes:
        FILE: Regular file or any other non-directory, non-link node.
        DIRECTORY: Directory.
        SYMLINK: Symbolic link (never followed).
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"

    @property
    def type_char(self) -> str:
        """Leading character used in ``ls -l`` style listings."""
        if self == EntryType.DIRECTORY:
            return "d"
        if self == EntryType.SYMLINK:
            return "l"
        return "-"


class MatchMode(str, Enum):
    """Run-wide matching mode, derived once from the allowlist.

    Attributes:
        FALLBACK: No filters at all; owner is compared to the base directory.
        FILTERED: At least one filter; each type is checked against its own list.
    """

    FALLBACK = "fallback"
    FILTERED = "filtered"


@dataclass(frozen=True, slots=True)
class PermissionMask:
    """Nine permission positions in ``rwxrwxrwx`` order.

    Attributes:
        bits: Tuple of exactly 9 PermissionBit values (user, group, other).
    """

    bits: tuple[PermissionBit, ...]

    def __post_init__(self) -> None:
        """Validate the number of positions."""
        if len(self.bits) != len(PERMISSION_LETTERS):
            msg = f"Permission mask needs {len(PERMISSION_LETTERS)} bits, got {len(self.bits)}"
            raise ValueError(msg)

    @classmethod
    def from_mode(cls, mode: int) -> "PermissionMask":
        """Build a concrete mask from the low 9 bits of an ``st_mode`` value."""
        return cls(
            tuple(
                PermissionBit.SET if mode & (1 << (8 - index)) else PermissionBit.UNSET
                for index in range(len(PERMISSION_LETTERS))
            )
        )

    @property
    def is_concrete(self) -> bool:
        """Check that no position is a wildcard."""
        return PermissionBit.WILDCARD not in self.bits

    def matches(self, concrete: "PermissionMask") -> bool:
        """Check whether a concrete mask satisfies this (possibly wildcarded) mask.

        Args:
            concrete: Observed permission mask without wildcards.

        Returns:
            True if every position is a wildcard or equal to the observed bit.
        """
        return all(
            expected == PermissionBit.WILDCARD or expected == actual
            for expected, actual in zip(self.bits, concrete.bits, strict=True)
        )

    def render(self) -> str:
        """Render the mask as 9 characters (``r``/``w``/``x``, ``-`` or ``*``)."""
        chars: list[str] = []
        for letter, bit in zip(PERMISSION_LETTERS, self.bits, strict=True):
            if bit == PermissionBit.SET:
                chars.append(letter)
            elif bit == PermissionBit.WILDCARD:
                chars.append("*")
            else:
                chars.append("-")
        return "".join(chars)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """One parsed allowlist entry.

    Absent fields are unconstrained. A spec with every field absent
    matches every entry of its target type.

    Attributes:
        permissions: Required permission mask, or None to ignore permissions.
        uid: Required owner uid, or None for any owner.
        gid: Required group gid, or None for any group.
    """

    permissions: PermissionMask | None = field(default=None)
    uid: int | None = field(default=None)
    gid: int | None = field(default=None)

    def __str__(self) -> str:
        """Render in filter syntax, e.g. ``rw-r--r--u1001g1001``."""
        parts: list[str] = []
        if self.permissions is not None:
            parts.append(self.permissions.render())
        if self.uid is not None:
            parts.append(f"u{self.uid}")
        if self.gid is not None:
            parts.append(f"g{self.gid}")
        return "".join(parts)


@dataclass(frozen=True, slots=True)
class AllowList:
    """Accepted owner/permission configurations for files and directories.

    Built once per run and never mutated. Symlinks are checked against
    the file list.

    Attributes:
        files: Specs applying to files and symlinks.
        directories: Specs applying to directories.
    """

    files: tuple[FilterSpec, ...] = ()
    directories: tuple[FilterSpec, ...] = ()

    @property
    def mode(self) -> MatchMode:
        """Matching mode for the whole run."""
        if not self.files and not self.directories:
            return MatchMode.FALLBACK
        return MatchMode.FILTERED

    def for_type(self, entry_type: EntryType) -> tuple[FilterSpec, ...]:
        """Return the filter list applying to an entry type."""
        if entry_type == EntryType.DIRECTORY:
            return self.directories
        return self.files


@dataclass(frozen=True, slots=True)
class BaseDirectoryOwner:
    """Owner of the audited base directory, used in fallback mode."""

    uid: int
    gid: int


@dataclass(frozen=True, slots=True)
class ObservedEntry:
    """A filesystem entry as seen during traversal.

    Attributes:
        path: Path of the entry as reached from the base directory.
        entry_type: File, directory or symlink.
        permissions: Concrete permission mask (no wildcards).
        uid: Owner uid.
        gid: Owner gid.
    """

    path: str
    entry_type: EntryType
    permissions: PermissionMask
    uid: int
    gid: int

    def __post_init__(self) -> None:
        """Validate observed entry data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if not self.permissions.is_concrete:
            msg = f"Observed permissions cannot contain wildcards: {self.permissions}"
            raise ValueError(msg)

    def render(self) -> str:
        """Format as a report line: ``-rw-r--r--  1000  1000 path``."""
        return (
            f"{self.entry_type.type_char}{self.permissions.render()} "
            f"{self.uid: >5} {self.gid: >5} {self.path}"
        )
