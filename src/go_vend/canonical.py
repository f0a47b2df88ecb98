# SPDX-License-Identifier: MIT
"""Canonical import comment removal.

A Go package can pin the import path it must be imported under with a
comment on its package clause::

    package yaml // import "gopkg.in/yaml.v2"

Once a package has been vendored to a new location the pin is wrong, so it is
stripped from every file of the copy. Only the comment is removed; the
package clause itself is untouched.
"""

from __future__ import annotations

import os
from itertools import groupby
from pathlib import Path

from .errors import GoScanError
from .scanner import Token, TokenKind, scan

_CANONICAL_LINE = (
    TokenKind.PACKAGE,
    TokenKind.IDENT,
    TokenKind.SEMICOLON,
    TokenKind.COMMENT,
)


def _byte_offset(text: str, offset: int) -> int:
    return len(text[:offset].encode("utf-8"))


def find_canonical_import_comment(src: bytes) -> tuple[bool, int, int]:
    """Locate a canonical import comment.

    A line matches when it consists of exactly a ``package`` keyword, the
    package name, a statement terminator and a comment. The range to remove
    starts right after the package name (after the ``;`` when it is written
    out, so the clause stays terminated) and ends at the end of the comment.

    Args:
        src: Go source bytes

    Returns:
        Tuple of (found, start, end) where start and end are byte offsets

    Raises:
        GoScanError: If the source cannot be tokenized
    """
    try:
        text = src.decode("utf-8")
    except UnicodeDecodeError as e:
        raise GoScanError(f"invalid UTF-8 encoding: {e}") from e
    tokens = [t for t in scan(text) if t.kind is not TokenKind.EOF]

    for _, line_tokens in groupby(tokens, key=lambda t: t.line):
        line: list[Token] = list(line_tokens)
        if tuple(t.kind for t in line) != _CANONICAL_LINE:
            continue
        _, ident, semicolon, comment = line
        start = semicolon.end if semicolon.literal == ";" else ident.end
        return True, _byte_offset(text, start), _byte_offset(text, comment.end)
    return False, 0, 0


def strip_canonical_import_file(path: str | Path) -> bool:
    """Remove the canonical import comment from a file in place.

    Returns:
        True if the file was rewritten
    """
    path = Path(path)
    data = path.read_bytes()
    found, start, end = find_canonical_import_comment(data)
    if not found:
        return False
    path.write_bytes(data[:start] + data[end:])
    return True


def strip_canonical_import_dir(directory: str | Path) -> list[Path]:
    """Remove canonical import comments from every Go file under ``directory``.

    Returns:
        The files that were rewritten
    """
    stripped: list[Path] = []
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for name in sorted(files):
            path = Path(root) / name
            if not name.endswith(".go") or not path.is_file() or path.is_symlink():
                continue
            if strip_canonical_import_file(path):
                stripped.append(path)
    return stripped
