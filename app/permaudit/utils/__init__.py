"""Utility modules for permaudit.

This module exports commonly used utility functions.
"""

from permaudit.utils.formatting import (
    configure_logging,
    console,
    err_console,
    print_error,
    print_plain,
)

__all__ = [
    "configure_logging",
    "console",
    "err_console",
    "print_error",
    "print_plain",
]
