"""Allowlist filter engine.

This module provides the filter grammar parser, the allowlist
representation and the compliance matcher used to audit owner and
permission settings.
"""

from permaudit.allowlist.matcher import ComplianceMatcher, is_compliant, spec_matches
from permaudit.allowlist.models import (
    AllowList,
    BaseDirectoryOwner,
    EntryType,
    FilterSpec,
    MatchMode,
    ObservedEntry,
    PermissionBit,
    PermissionMask,
)
from permaudit.allowlist.parser import (
    EmptyFilterError,
    EmptySegmentError,
    FilterParseError,
    InvalidGidError,
    InvalidPermissionCharError,
    InvalidPermissionLetterError,
    InvalidUidError,
    TrailingInputError,
    TruncatedPermissionError,
    build_allowlist,
    build_allowlists,
    parse_filter,
)

__all__ = [
    "AllowList",
    "BaseDirectoryOwner",
    "ComplianceMatcher",
    "EmptyFilterError",
    "EmptySegmentError",
    "EntryType",
    "FilterParseError",
    "FilterSpec",
    "InvalidGidError",
    "InvalidPermissionCharError",
    "InvalidPermissionLetterError",
    "InvalidUidError",
    "MatchMode",
    "ObservedEntry",
    "PermissionBit",
    "PermissionMask",
    "TrailingInputError",
    "TruncatedPermissionError",
    "build_allowlist",
    "build_allowlists",
    "is_compliant",
    "parse_filter",
    "spec_matches",
]
