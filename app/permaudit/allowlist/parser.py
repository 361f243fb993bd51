"""Filter expression parser.

Parses textual filter expressions of the form ``[perm9][u<uid>][g<gid>]``
(e.g. ``rw-r--r--u1001``, ``g100``, ``rwx***---``) into FilterSpec values,
and comma-joined lists of them into an AllowList.
"""

import re

from permaudit.allowlist.models import (
    PERMISSION_LETTERS,
    AllowList,
    FilterSpec,
    PermissionBit,
    PermissionMask,
)

_PERMISSION_ALPHABET: frozenset[str] = frozenset("rwx-*")
_DIGITS = re.compile(r"[0-9]+")
_MAX_ID: int = 2**32 - 1


class FilterParseError(ValueError):
    """Base exception for invalid filter expressions.

    Attributes:
        filter_text: The filter expression that failed to parse.
    """

    def __init__(self, message: str, filter_text: str = "") -> None:
        super().__init__(message)
        self.filter_text = filter_text


class EmptyFilterError(FilterParseError):
    """Raised when a filter expression is empty."""

    def __init__(self, filter_text: str = "") -> None:
        super().__init__("Filter expression is empty", filter_text)


class EmptySegmentError(FilterParseError):
    """Raised when a comma-separated filter list contains an empty piece."""

    def __init__(self, index: int, filter_text: str = "") -> None:
        super().__init__(f"Empty filter at position {index} in list '{filter_text}'", filter_text)
        self.index = index


class TruncatedPermissionError(FilterParseError):
    """Raised when the permission segment has fewer than 9 characters."""

    def __init__(self, segment: str, filter_text: str) -> None:
        super().__init__(
            f"Permission segment '{segment}' is too short "
            f"({len(segment)} of {len(PERMISSION_LETTERS)} characters) in '{filter_text}'",
            filter_text,
        )
        self.segment = segment


class InvalidPermissionCharError(FilterParseError):
    """Raised when a permission position holds a character outside ``rwx-*``."""

    def __init__(self, pos: int, char: str, filter_text: str) -> None:
        super().__init__(
            f"Invalid character '{char}' at position {pos} in permission segment of '{filter_text}'",
            filter_text,
        )
        self.pos = pos
        self.char = char


class InvalidPermissionLetterError(FilterParseError):
    """Raised when ``r``/``w``/``x`` appears at a position reserved for another letter."""

    def __init__(self, pos: int, char: str, filter_text: str) -> None:
        super().__init__(
            f"Letter '{char}' not allowed at position {pos} (expected "
            f"'{PERMISSION_LETTERS[pos]}', '-' or '*') in '{filter_text}'",
            filter_text,
        )
        self.pos = pos
        self.char = char


class InvalidUidError(FilterParseError):
    """Raised when a ``u`` segment has no digits or an out-of-range value."""

    def __init__(self, segment: str, filter_text: str) -> None:
        super().__init__(f"Invalid user segment '{segment}' in '{filter_text}'", filter_text)
        self.segment = segment


class InvalidGidError(FilterParseError):
    """Raised when a ``g`` segment has no digits or an out-of-range value."""

    def __init__(self, segment: str, filter_text: str) -> None:
        super().__init__(f"Invalid group segment '{segment}' in '{filter_text}'", filter_text)
        self.segment = segment


class TrailingInputError(FilterParseError):
    """Raised when characters remain after the last recognised segment."""

    def __init__(self, remainder: str, filter_text: str) -> None:
        super().__init__(f"Unrecognized input '{remainder}' in '{filter_text}'", filter_text)
        self.remainder = remainder


def parse_filter(text: str) -> FilterSpec:
    """Parse a single filter expression.

    Segments are consumed left to right in fixed order: an optional
    9-character permission block, an optional ``u<digits>`` block and an
    optional ``g<digits>`` block. The permission block is attempted
    whenever the expression starts with a permission character.

    Args:
        text: Filter expression, e.g. ``rw-r--r--u1001``.

    Returns:
        Parsed FilterSpec.

    Raises:
        FilterParseError: Subclass naming the segment and position that failed.
    """
    if not text:
        raise EmptyFilterError(text)

    permissions: PermissionMask | None = None
    pos = 0
    if text[0] in _PERMISSION_ALPHABET:
        permissions = _parse_permissions(text)
        pos = len(PERMISSION_LETTERS)

    uid, pos = _parse_id(text, pos, "u")
    gid, pos = _parse_id(text, pos, "g")

    if pos < len(text):
        raise TrailingInputError(text[pos:], text)

    return FilterSpec(permissions=permissions, uid=uid, gid=gid)


def _parse_permissions(text: str) -> PermissionMask:
    """Parse the leading 9-character permission block of a filter."""
    bits: list[PermissionBit] = []
    for pos, expected in enumerate(PERMISSION_LETTERS):
        if pos >= len(text):
            raise TruncatedPermissionError(text, text)

        char = text[pos]
        if char not in _PERMISSION_ALPHABET:
            # A short block directly followed by u/g is reported as truncated
            if pos > 0 and char in "ug":
                raise TruncatedPermissionError(text[:pos], text)
            raise InvalidPermissionCharError(pos, char, text)

        if char == "*":
            bits.append(PermissionBit.WILDCARD)
        elif char == "-":
            bits.append(PermissionBit.UNSET)
        elif char == expected:
            bits.append(PermissionBit.SET)
        else:
            raise InvalidPermissionLetterError(pos, char, text)

    return PermissionMask(tuple(bits))


def _parse_id(text: str, pos: int, prefix: str) -> tuple[int | None, int]:
    """Parse an optional ``<prefix><digits>`` block starting at ``pos``.

    Returns:
        Tuple of (parsed id or None, position after the block).
    """
    if pos >= len(text) or text[pos] != prefix:
        return None, pos

    error_cls = InvalidUidError if prefix == "u" else InvalidGidError
    match = _DIGITS.match(text, pos + 1)
    if match is None:
        raise error_cls(text[pos:], text)

    value = int(match.group())
    if value > _MAX_ID:
        raise error_cls(text[pos : match.end()], text)

    return value, match.end()


def build_allowlist(raw: str | None) -> list[FilterSpec]:
    """Parse a comma-joined list of filter expressions.

    Pieces are stripped of surrounding whitespace and parsed in order;
    the first invalid piece from the left is the one reported.

    Args:
        raw: Raw filter list (e.g. ``"rw-r--r--,rwx------u0"``), or None.

    Returns:
        Parsed specs in input order. Empty when ``raw`` is None.

    Raises:
        EmptyFilterError: If ``raw`` is given but blank.
        EmptySegmentError: If a piece between commas is empty.
        FilterParseError: If any piece fails to parse.
    """
    if raw is None:
        return []
    if not raw.strip():
        raise EmptyFilterError(raw)

    specs: list[FilterSpec] = []
    for index, piece in enumerate(raw.split(",")):
        piece = piece.strip()
        if not piece:
            raise EmptySegmentError(index, raw)
        specs.append(parse_filter(piece))
    return specs


def build_allowlists(file_filter: str | None, directory_filter: str | None) -> AllowList:
    """Build the run's AllowList from the raw file and directory filter lists."""
    return AllowList(
        files=tuple(build_allowlist(file_filter)),
        directories=tuple(build_allowlist(directory_filter)),
    )
