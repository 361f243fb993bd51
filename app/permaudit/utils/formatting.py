"""Rich console formatting utilities.

Provides consistent formatting for CLI output and log records using Rich.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

# Semantic styles shared by all console output
THEME = Theme(
    {
        "header": "bold #69B9A1",
        "error": "bold #f53263",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise so piped output stays free of escape codes.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def configure_logging(verbose: bool = False) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: If True, emit DEBUG records; otherwise WARNING and above.
    """
    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def print_plain(line: str) -> None:
    """Print a line verbatim, without markup, highlighting or wrapping."""
    console.print(line, markup=False, highlight=False, soft_wrap=True)


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}", highlight=False, soft_wrap=True)