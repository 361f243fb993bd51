"""Directory tree auditing.

This module provides the tree walker, the entry classifier and the
audit driver that reports entries not covered by the allowlist.
"""

from permaudit.audit.classifier import classify, display_path, entry_type_from_mode
from permaudit.audit.driver import resolve_base_owner, run_audit
from permaudit.audit.errors import AuditError, BaseDirectoryError
from permaudit.audit.walker import TreeWalker, stat_base_directory

__all__ = [
    "AuditError",
    "BaseDirectoryError",
    "TreeWalker",
    "classify",
    "display_path",
    "entry_type_from_mode",
    "resolve_base_owner",
    "run_audit",
    "stat_base_directory",
]
