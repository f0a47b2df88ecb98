# SPDX-License-Identifier: MIT
"""Go source file header parsing.

This module parses the parts of a Go file that vend cares about: the package
clause, the doc comment above it, build constraints, and the import
declarations with the exact source span of every import path literal. The
remainder of the file is checked structurally (bracket balance, no imports
after other declarations) but not interpreted.

Example:
    >>> f = parse_file('package foo\\n\\nimport "a/b"\\n')
    >>> f.package_name, [spec.path for spec in f.imports]
    ('foo', ['a/b'])
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from .errors import GoParseError, GoScanError
from .scanner import Token, TokenKind, go_unquote, scan

_BUILD_LINE_RE = re.compile(r"^//(?:go:build\s|\s*\+build\s)(?P<expr>.*)$")
_TAG_RE = re.compile(r"[A-Za-z0-9_.]+")

_CLOSERS = {
    TokenKind.RPAREN: TokenKind.LPAREN,
    TokenKind.RBRACK: TokenKind.LBRACK,
    TokenKind.RBRACE: TokenKind.LBRACE,
}


@dataclass
class ImportSpec:
    """A single import spec.

    Attributes:
        name: Explicit package name (identifier, ``.`` or ``_``) or None
        path: Import path value
        literal: Source text of the path literal, quotes included
        start: Offset of the path literal
        end: Offset one past the path literal
        line: Line of the path literal
        spec_start: Offset where the spec begins (its name, if any)
        comment: Comment token trailing the spec on the same line
        group: Index into ``SourceFile.import_groups`` or None
    """

    name: Optional[str]
    path: str
    literal: str
    start: int
    end: int
    line: int
    spec_start: int
    comment: Optional[Token] = None
    group: Optional[int] = None


@dataclass
class ImportGroup:
    """A parenthesized import declaration."""

    lparen: Token
    rparen: Token
    specs: list[ImportSpec] = field(default_factory=list)


@dataclass
class SourceFile:
    """Parsed header of a Go source file."""

    filename: str
    text: str
    package_name: str
    package_token: Token
    doc: str = ""
    build_tags: list[str] = field(default_factory=list)
    go_build: str = ""
    plus_build: list[str] = field(default_factory=list)
    imports: list[ImportSpec] = field(default_factory=list)
    import_groups: list[ImportGroup] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list)

    @property
    def import_paths(self) -> list[str]:
        """Import paths in source order."""
        return [spec.path for spec in self.imports]


def _comment_text(literal: str) -> list[str]:
    """Strip comment markers, returning the comment's lines."""
    if literal.startswith("//"):
        body = literal[2:]
        if body.startswith(" "):
            body = body[1:]
        return [body]
    lines = literal[2:-2].splitlines()
    return [line.strip() for line in lines]


def _comment_end_line(token: Token) -> int:
    return token.line + token.literal.count("\n")


def synopsis(doc: str) -> str:
    """Return the first sentence of a doc comment, whitespace collapsed."""
    paragraph = doc.strip().split("\n\n", 1)[0]
    text = " ".join(paragraph.split())
    for i, ch in enumerate(text):
        if ch != "." or i + 1 < len(text) and not text[i + 1].isspace():
            continue
        # "J. Doe" style initials do not end a sentence
        if i >= 1 and text[i - 1].isupper() and (i == 1 or not text[i - 2].isalpha()):
            continue
        return text[: i + 1]
    return text


class _Parser:
    def __init__(self, text: str, filename: str) -> None:
        self.text = text
        self.filename = filename
        self.tokens = scan(text, filename)
        self.pos = 0

    def error(self, message: str, token: Token) -> GoParseError:
        return GoParseError(message, self.filename, token.line, token.column)

    def peek_index(self) -> int:
        """Return the index of the next non-comment token."""
        i = self.pos
        while self.tokens[i].kind is TokenKind.COMMENT:
            i += 1
        return i

    def peek(self) -> Token:
        return self.tokens[self.peek_index()]

    def next(self) -> Token:
        i = self.peek_index()
        self.pos = i + 1
        return self.tokens[i]

    def expect(self, kind: TokenKind, what: str) -> Token:
        token = self.next()
        if token.kind is not kind:
            found = token.literal if token.literal not in ("", "\n") else token.kind.value
            raise self.error(f"expected {what}, found {found!r}", token)
        return token

    def expect_semicolon(self, allow: tuple[TokenKind, ...] = ()) -> None:
        token = self.peek()
        if token.kind is TokenKind.SEMICOLON:
            self.next()
        elif token.kind not in allow and token.kind is not TokenKind.EOF:
            raise self.error(f"expected ';', found {token.literal!r}", token)

    def trailing_comment(self, after: Token) -> Optional[Token]:
        """Return the comment following the just consumed ``after`` token on its line."""
        i = self.pos
        while i < len(self.tokens):
            token = self.tokens[i]
            if token.kind is TokenKind.COMMENT:
                return token if token.line == after.line else None
            if token.kind is TokenKind.SEMICOLON and (
                token.literal == "\n" or token.line == after.line
            ):
                i += 1
                continue
            return None
        return None

    def header_comments(self) -> tuple[str, list[str], str, list[str]]:
        comments: list[Token] = []
        for token in self.tokens:
            if token.kind is not TokenKind.COMMENT:
                break
            comments.append(token)
        package_line = self.peek().line

        tags: list[str] = []
        go_build = ""
        plus_build: list[str] = []
        for comment in comments:
            match = _BUILD_LINE_RE.match(comment.literal)
            if match:
                expr = match.group("expr").strip()
                if comment.literal.startswith("//go:build"):
                    go_build = go_build or expr
                else:
                    plus_build.append(expr)
                for tag in _TAG_RE.findall(expr):
                    if tag not in tags:
                        tags.append(tag)

        group: list[Token] = []
        for comment in reversed(comments):
            next_line = group[0].line if group else package_line
            if _comment_end_line(comment) < next_line - 1:
                break
            group.insert(0, comment)
        lines: list[str] = []
        for comment in group:
            if _BUILD_LINE_RE.match(comment.literal) or comment.literal.startswith("//go:"):
                continue
            lines.extend(_comment_text(comment.literal))
        return "\n".join(lines).strip(), tags, go_build, plus_build

    def parse_spec(self) -> ImportSpec:
        first = self.next()
        name: Optional[str] = None
        literal_token = first
        if first.kind in (TokenKind.IDENT, TokenKind.PERIOD):
            name = first.literal
            literal_token = self.next()
        if literal_token.kind is not TokenKind.STRING:
            raise self.error("missing import path", literal_token)
        try:
            path = go_unquote(literal_token.literal)
        except ValueError as e:
            raise self.error(str(e), literal_token) from e
        if not path:
            raise self.error("invalid import path: empty string", literal_token)
        return ImportSpec(
            name=name,
            path=path,
            literal=literal_token.literal,
            start=literal_token.offset,
            end=literal_token.end,
            line=literal_token.line,
            spec_start=first.offset,
            comment=self.trailing_comment(literal_token),
        )

    def parse(self) -> SourceFile:
        doc, tags, go_build, plus_build = self.header_comments()
        package_token = self.expect(TokenKind.PACKAGE, "'package'")
        name = self.expect(TokenKind.IDENT, "package name")
        self.expect_semicolon()

        source = SourceFile(
            filename=self.filename,
            text=self.text,
            package_name=name.literal,
            package_token=package_token,
            doc=doc,
            build_tags=tags,
            go_build=go_build,
            plus_build=plus_build,
            tokens=self.tokens,
        )

        while self.peek().kind is TokenKind.IMPORT:
            self.next()
            if self.peek().kind is TokenKind.LPAREN:
                lparen = self.next()
                specs: list[ImportSpec] = []
                while self.peek().kind not in (TokenKind.RPAREN, TokenKind.EOF):
                    spec = self.parse_spec()
                    spec.group = len(source.import_groups)
                    specs.append(spec)
                    self.expect_semicolon(allow=(TokenKind.RPAREN,))
                rparen = self.expect(TokenKind.RPAREN, "')'")
                self.expect_semicolon()
                source.import_groups.append(ImportGroup(lparen, rparen, specs))
                source.imports.extend(specs)
            else:
                source.imports.append(self.parse_spec())
                self.expect_semicolon()

        self.check_body()
        return source

    def check_body(self) -> None:
        stack: list[Token] = []
        for token in self.tokens[self.pos :]:
            if token.kind is TokenKind.IMPORT:
                raise self.error("imports must appear before other declarations", token)
            if token.kind in (TokenKind.LPAREN, TokenKind.LBRACK, TokenKind.LBRACE):
                stack.append(token)
            elif token.kind in _CLOSERS:
                if not stack or stack[-1].kind is not _CLOSERS[token.kind]:
                    raise self.error(f"unexpected {token.literal!r}", token)
                stack.pop()
        if stack:
            raise self.error(f"unclosed {stack[-1].literal!r}", stack[-1])


def parse_file(src: str | bytes, filename: str = "") -> SourceFile:
    """Parse the header of a Go source file.

    Args:
        src: Go source as text or UTF-8 bytes
        filename: Name used in error messages

    Returns:
        SourceFile describing the package clause and imports

    Raises:
        GoScanError: If the source cannot be tokenized
        GoParseError: If the package clause or imports are malformed
    """
    if isinstance(src, bytes):
        try:
            src = src.decode("utf-8")
        except UnicodeDecodeError as e:
            raise GoScanError(f"invalid UTF-8 encoding: {e}", filename) from e
    return _Parser(src, filename).parse()
