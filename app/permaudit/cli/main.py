"""Main CLI application entry point.

Defines the Typer application: a single command that audits a base
directory against the file and directory allowlists.

Exit codes:
    0: Every entry is compliant.
    1: At least one non-compliant entry was reported.
    2: Invalid filter, invalid settings file, or inaccessible base directory.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from permaudit import __version__
from permaudit.allowlist.models import AllowList
from permaudit.allowlist.parser import FilterParseError, build_allowlist
from permaudit.audit.driver import resolve_base_owner, run_audit
from permaudit.audit.errors import BaseDirectoryError
from permaudit.cli.display import print_entries, print_header, print_json
from permaudit.core.config import ConfigError, load_settings
from permaudit.utils.formatting import configure_logging, print_error

logger = logging.getLogger(__name__)

EXIT_MISMATCHES = 1
EXIT_CONFIG_ERROR = 2

app = typer.Typer(
    name="permaudit",
    help="Find mistakes in filesystem owner and permission settings.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


class OutputFormat(str, Enum):
    """Output format options for the report."""

    TEXT = "text"
    JSON = "json"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"permaudit version {__version__}")
        raise typer.Exit()


@app.command()
def audit(
    base_dir: Annotated[
        Path,
        typer.Argument(help="Base directory to work upon."),
    ],
    directory_filter: Annotated[
        str | None,
        typer.Option(
            "--directory-filter",
            "-d",
            help="Comma-separated list of allowed directory configurations, e.g. 'rwx------u1000'.",
        ),
    ] = None,
    file_filter: Annotated[
        str | None,
        typer.Option(
            "--file-filter",
            "-f",
            help="Comma-separated list of allowed file configurations, e.g. 'rw-r--r--,rw-------'.",
        ),
    ] = None,
    silent: Annotated[
        bool,
        typer.Option("--silent", "-s", help="Remove active config from output."),
    ] = False,
    ignore_symlinks: Annotated[
        bool,
        typer.Option("--ignore-symlinks", "-i", help="Ignore symlinks."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TEXT,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file (default: ~/.config/permaudit/config.toml).",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Report entries under BASE_DIR whose owner or permissions are not allowed.

    Without any filter, entries are compared against the uid and gid of
    the base directory. Once a filter is given for either type, every
    file (and symlink) must match a file filter and every directory a
    directory filter.
    """
    configure_logging(verbose)

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    allowlist = _build_allowlist(
        file_filter if file_filter is not None else settings.file_filter,
        directory_filter if directory_filter is not None else settings.directory_filter,
    )
    ignore_symlinks = ignore_symlinks or settings.ignore_symlinks
    silent = silent or settings.silent

    try:
        base_owner = resolve_base_owner(base_dir)
        mismatches = run_audit(base_dir, allowlist, base_owner, ignore_symlinks=ignore_symlinks)
    except BaseDirectoryError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    if output_format == OutputFormat.JSON:
        print_json(mismatches)
    else:
        if not silent:
            print_header(base_dir, allowlist, base_owner)
        print_entries(mismatches)

    if mismatches:
        raise typer.Exit(code=EXIT_MISMATCHES)


# === Private helper functions ===


def _build_allowlist(file_filter: str | None, directory_filter: str | None) -> AllowList:
    """Parse both filter lists, exiting with a configuration error on failure."""
    try:
        files = build_allowlist(file_filter)
    except FilterParseError as e:
        print_error(f"Invalid file filter: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    try:
        directories = build_allowlist(directory_filter)
    except FilterParseError as e:
        print_error(f"Invalid directory filter: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    logger.debug("Parsed %d file and %d directory filters", len(files), len(directories))
    return AllowList(files=tuple(files), directories=tuple(directories))


if __name__ == "__main__":
    app()
