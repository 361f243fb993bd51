"""CLI package for permaudit.

This package contains the Typer application.
"""

from permaudit.cli.main import app

__all__ = ["app"]
