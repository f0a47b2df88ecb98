# SPDX-License-Identifier: MIT
"""Import path rewriting for Go source files.

This module changes the import paths of Go files in place. Only the path
literals of matching import specs are edited; the rest of the file is kept
byte for byte, except that a parenthesized import group containing an edited
spec is laid out again the way gofmt prints it.

Example:
    Original (rewriting ``a/b`` to ``lib/b``):
        import (
            "fmt"
          "a/b" // helpers
        )

    Rewritten (one tab of indentation, comments aligned):
        import (
            "fmt"
            "lib/b" // helpers
        )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from .output import echo_bold, echo_info
from .parser import ImportGroup, ImportSpec, SourceFile, parse_file
from .planner import RewriteMap
from .scanner import Token, TokenKind, go_quote

if TYPE_CHECKING:
    from .config import BuildContext


@dataclass
class RewriteResult:
    """Result of rewriting imports in a file.

    Attributes:
        path: Rewritten file
        imports_rewritten: Number of import specs that were changed
        applied: Old import path to new import path, for each applied rewrite
        modified: Whether the file was written
    """

    path: Path
    imports_rewritten: int = 0
    applied: dict[str, str] = field(default_factory=dict)
    modified: bool = False


def _spec_text(spec: ImportSpec, rewrites: RewriteMap) -> str:
    literal = go_quote(rewrites[spec.path]) if spec.path in rewrites else spec.literal
    return f"{spec.name} {literal}" if spec.name else literal


def _end_line(token: Token) -> int:
    return token.line + token.literal.count("\n")


def _layout_group(source: SourceFile, group: ImportGroup, rewrites: RewriteMap) -> str:
    """Print the body of an import group, parentheses excluded."""
    trailing = {spec.comment.offset for spec in group.specs if spec.comment is not None}
    items: list[tuple[int, Union[ImportSpec, Token]]] = [
        (spec.spec_start, spec) for spec in group.specs
    ]
    for token in source.tokens:
        if token.offset <= group.lparen.offset:
            continue
        if token.offset >= group.rparen.offset:
            break
        if token.kind is TokenKind.COMMENT and token.offset not in trailing:
            items.append((token.offset, token))
    items.sort(key=lambda item: item[0])

    # rows of (text, trailing comment); None marks a blank line
    rows: list[Optional[tuple[str, Optional[str]]]] = []
    prev_line = group.lparen.line
    for _, item in items:
        if isinstance(item, ImportSpec):
            start_line = item.line
            end_line = _end_line(item.comment) if item.comment is not None else item.line
            row = (_spec_text(item, rewrites), item.comment.literal if item.comment else None)
        else:
            start_line = item.line
            end_line = _end_line(item)
            row = (item.literal, None)
        if rows and start_line > prev_line + 1:
            rows.append(None)
        rows.append(row)
        prev_line = end_line

    lines: list[str] = []
    i = 0
    while i < len(rows):
        row = rows[i]
        if row is None or row[1] is None:
            lines.append("" if row is None else "\t" + row[0])
            i += 1
            continue
        # consecutive commented lines share one comment column
        block_end = i
        while block_end < len(rows) and rows[block_end] is not None and rows[block_end][1]:
            block_end += 1
        block = rows[i:block_end]
        width = max(len(text) for text, _ in block)
        for text, comment in block:
            lines.append(f"\t{text}{' ' * (width - len(text) + 1)}{comment}")
        i = block_end
    return "\n" + "\n".join(lines) + "\n"


def apply_rewrites(source: SourceFile, rewrites: RewriteMap) -> tuple[str, dict[str, str]]:
    """Apply rewrites to a parsed file.

    Returns:
        Tuple of (new source text, applied rewrites)
    """
    applied = {spec.path: rewrites[spec.path] for spec in source.imports if spec.path in rewrites}
    if not applied:
        return source.text, {}

    edits: list[tuple[int, int, str]] = []
    for group in source.import_groups:
        if any(spec.path in rewrites for spec in group.specs):
            edits.append(
                (group.lparen.end, group.rparen.offset, _layout_group(source, group, rewrites))
            )
    for spec in source.imports:
        if spec.group is None and spec.path in rewrites:
            edits.append((spec.start, spec.end, go_quote(rewrites[spec.path])))

    text = source.text
    for start, end, replacement in sorted(edits, reverse=True):
        text = text[:start] + replacement + text[end:]
    return text, applied


def _count_rewritten(source: SourceFile, rewrites: RewriteMap) -> int:
    return sum(1 for spec in source.imports if spec.path in rewrites)


def rewrite_source(
    src: Union[str, bytes], rewrites: RewriteMap, filename: str = ""
) -> tuple[str, dict[str, str]]:
    """Rewrite the import paths of Go source text.

    Args:
        src: Go source
        rewrites: Old import path to new import path
        filename: Name used in error messages

    Returns:
        Tuple of (new source text, applied rewrites); the text is unchanged
        when nothing applied

    Raises:
        GoScanError: If the source cannot be tokenized
        GoParseError: If the package clause or imports are malformed
    """
    return apply_rewrites(parse_file(src, filename), rewrites)


def _write(
    source: SourceFile, rewrites: RewriteMap, ctx: Optional["BuildContext"]
) -> RewriteResult:
    path = Path(source.filename)
    result = RewriteResult(path=path)
    text, applied = apply_rewrites(source, rewrites)
    if not applied:
        return result

    path.write_bytes(text.encode("utf-8"))
    result.imports_rewritten = _count_rewritten(source, rewrites)
    result.applied = applied
    result.modified = True

    if ctx is not None and ctx.verbose:
        echo_bold(str(path))
        for old, new in applied.items():
            echo_info(f"  {old} => {new}")
    return result


def rewrite_file(
    path: str | Path, rewrites: RewriteMap, ctx: Optional["BuildContext"] = None
) -> RewriteResult:
    """Rewrite the import paths of a single Go file in place.

    The file is only written when at least one import changed.

    Raises:
        GoScanError: If the file cannot be tokenized
        GoParseError: If the package clause or imports are malformed
        OSError: If reading or writing fails
    """
    path = Path(path)
    source = parse_file(path.read_bytes(), str(path))
    return _write(source, rewrites, ctx)


def rewrite_dir(
    directory: str | Path, rewrites: RewriteMap, ctx: Optional["BuildContext"] = None
) -> list[RewriteResult]:
    """Rewrite the import paths of every Go file in ``directory``.

    Every file is parsed before the first one is written, so a syntax error
    anywhere leaves the whole directory untouched. Files are written one at a
    time; a write failure leaves earlier files rewritten.

    Args:
        directory: Directory holding the Go files (not searched recursively)
        rewrites: Old import path to new import path
        ctx: Build context; when verbose each rewritten file is reported

    Returns:
        One RewriteResult per Go file, in name order

    Raises:
        GoScanError: If a file cannot be tokenized
        GoParseError: If a package clause or import is malformed
        OSError: If reading or writing fails
    """
    directory = Path(directory)
    paths = sorted(
        p for p in directory.iterdir() if p.suffix == ".go" and p.is_file() and not p.is_symlink()
    )
    sources = [parse_file(p.read_bytes(), str(p)) for p in paths]
    if not rewrites:
        return [RewriteResult(path=Path(s.filename)) for s in sources]
    return [_write(source, rewrites, ctx) for source in sources]
