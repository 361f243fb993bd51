"""Report rendering for the audit command.

Prints the optional header describing the active allowlist and the
list of non-compliant entries, either as ``ls -l`` style lines or JSON.
"""

import json
from pathlib import Path

from rich.markup import escape

from permaudit.allowlist.models import AllowList, BaseDirectoryOwner, MatchMode, ObservedEntry
from permaudit.audit.classifier import display_path
from permaudit.utils.formatting import console, print_plain


def print_header(base_dir: Path, allowlist: AllowList, base_owner: BaseDirectoryOwner) -> None:
    """Print the base directory and the active filters.

    In fallback mode the base directory owner is shown as the only
    allowed configuration.

    Args:
        base_dir: Audited directory.
        allowlist: Active filters.
        base_owner: Owner of the base directory.
    """
    console.print(f"[header]Base directory:[/] {escape(display_path(base_dir))}", soft_wrap=True)

    if allowlist.mode == MatchMode.FALLBACK:
        console.print("Using uid and gid of base directory")
        console.print(f"[header]Allowed:[/] u{base_owner.uid} g{base_owner.gid}")
    else:
        for spec in allowlist.directories:
            console.print(f"[header]Allowed  (dir):[/] {escape(str(spec))}")
        for spec in allowlist.files:
            console.print(f"[header]Allowed (file):[/] {escape(str(spec))}")

    console.print()


def print_entries(entries: list[ObservedEntry]) -> None:
    """Print one ``<type><perms> <uid> <gid> <path>`` line per entry."""
    for entry in entries:
        print_plain(entry.render())


def entries_to_dicts(entries: list[ObservedEntry]) -> list[dict[str, object]]:
    """Convert entries to JSON-serializable dictionaries."""
    return [
        {
            "path": e.path,
            "type": e.entry_type.value,
            "permissions": e.permissions.render(),
            "uid": e.uid,
            "gid": e.gid,
        }
        for e in entries
    ]


def print_json(entries: list[ObservedEntry]) -> None:
    """Print entries as a JSON array."""
    print_plain(json.dumps(entries_to_dicts(entries), indent=2))
