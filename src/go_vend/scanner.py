# SPDX-License-Identifier: MIT
"""Lexical scanner for Go source text.

The scanner turns Go source into a flat list of tokens, keeping comments and
applying Go's automatic semicolon insertion, so that callers can reason about
the layout of a file (which tokens share a line, where a literal starts and
ends) without a full parser.

Example:
    >>> [t.kind.name for t in scan("package foo // import \\"x\\"\\n")]
    ['PACKAGE', 'IDENT', 'SEMICOLON', 'COMMENT', 'EOF']
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from enum import Enum

from .errors import GoScanError


class TokenKind(Enum):
    """Token classes produced by :func:`scan`."""

    PACKAGE = "package"
    IMPORT = "import"
    KEYWORD = "keyword"
    IDENT = "ident"
    INT = "int"
    FLOAT = "float"
    IMAG = "imag"
    CHAR = "char"
    STRING = "string"
    COMMENT = "comment"
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACK = "["
    RBRACK = "]"
    PERIOD = "."
    OPERATOR = "operator"
    EOF = "EOF"


KEYWORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)

# Keywords after which a newline terminates the statement.
_SEMI_KEYWORDS = frozenset({"break", "continue", "fallthrough", "return"})

_OPERATORS = (
    "<<=",
    ">>=",
    "&^=",
    "...",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "<<",
    ">>",
    "&^",
    "&&",
    "||",
    "<-",
    "++",
    "--",
    "==",
    "!=",
    "<=",
    ">=",
    ":=",
    "+",
    "-",
    "*",
    "/",
    "%",
    "&",
    "|",
    "^",
    "<",
    ">",
    "=",
    "!",
    "(",
    ")",
    "[",
    "]",
    "{",
    "}",
    ",",
    ";",
    ".",
    ":",
    "~",
)

_PUNCTUATION = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACK,
    "]": TokenKind.RBRACK,
    ".": TokenKind.PERIOD,
    ";": TokenKind.SEMICOLON,
}

_NUMBER_RE = re.compile(
    r"""
    (?P<hex>0[xX][0-9a-fA-F_]*(?:\.[0-9a-fA-F_]*)?(?:[pP][+-]?[0-9_]+)?)
    | (?P<bin>0[bB][01_]+)
    | (?P<oct>0[oO][0-7_]+)
    | (?P<dec>(?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)(?:[eE][+-]?[0-9_]+)?)
    """,
    re.VERBOSE,
)

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_ESCAPE_RE = re.compile(
    r"\\(?:(?P<simple>[abfnrtv\\'\"])|(?P<oct>[0-7]{3})|x(?P<hex>[0-9a-fA-F]{2})"
    r"|u(?P<u4>[0-9a-fA-F]{4})|U(?P<u8>[0-9a-fA-F]{8}))"
)


@dataclass(frozen=True)
class Token:
    """A scanned token.

    Attributes:
        kind: Token class
        literal: Source text of the token (``"\\n"`` for an implicit semicolon)
        offset: Character offset of the token start
        line: 1-based line of the token start
        column: 1-based column of the token start
    """

    kind: TokenKind
    literal: str
    offset: int
    line: int
    column: int

    @property
    def end(self) -> int:
        """Offset one past the token; implicit semicolons are zero-width."""
        if self.kind is TokenKind.SEMICOLON and self.literal == "\n":
            return self.offset
        return self.offset + len(self.literal)


class _Scanner:
    def __init__(self, src: str, filename: str) -> None:
        self.src = src
        self.filename = filename
        self.pos = 1 if src.startswith("\ufeff") else 0
        self.insert_semi = False
        self.line_starts = [0] + [m.end() for m in re.finditer("\n", src)]
        self.tokens: list[Token] = []

    def location(self, offset: int) -> tuple[int, int]:
        index = bisect.bisect_right(self.line_starts, offset) - 1
        return index + 1, offset - self.line_starts[index] + 1

    def error(self, message: str, offset: int) -> GoScanError:
        line, column = self.location(offset)
        return GoScanError(message, self.filename, line, column)

    def emit(self, kind: TokenKind, literal: str, offset: int) -> None:
        line, column = self.location(offset)
        self.tokens.append(Token(kind, literal, offset, line, column))

    def comment_ends_line(self, start: int) -> bool:
        """Report whether the comment at ``start`` runs to the end of its line.

        A general comment counts if it spans lines or is followed only by
        blanks and further comments before the newline.
        """
        src = self.src
        pos = start
        while True:
            if src.startswith("//", pos):
                return True
            if not src.startswith("/*", pos):
                return False
            close = src.find("*/", pos + 2)
            if close < 0:
                return True
            if "\n" in src[pos:close]:
                return True
            pos = close + 2
            while pos < len(src) and src[pos] in " \t\r":
                pos += 1
            if pos >= len(src) or src[pos] == "\n":
                return True

    def scan_comment(self, start: int) -> int:
        src = self.src
        if src.startswith("//", start):
            end = src.find("\n", start)
            if end < 0:
                end = len(src)
            literal = src[start:end]
            if literal.endswith("\r"):
                literal = literal[:-1]
            self.emit(TokenKind.COMMENT, literal, start)
            return end
        close = src.find("*/", start + 2)
        if close < 0:
            raise self.error("comment not terminated", start)
        self.emit(TokenKind.COMMENT, src[start : close + 2], start)
        return close + 2

    def scan_quoted(self, start: int, quote: str) -> int:
        src = self.src
        pos = start + 1
        what = "string literal" if quote == '"' else "rune literal"
        while True:
            if pos >= len(src) or src[pos] == "\n":
                raise self.error(f"{what} not terminated", start)
            ch = src[pos]
            if ch == "\\":
                pos += 2
                continue
            pos += 1
            if ch == quote:
                return pos

    def scan_raw(self, start: int) -> int:
        close = self.src.find("`", start + 1)
        if close < 0:
            raise self.error("raw string literal not terminated", start)
        return close + 1

    def run(self) -> list[Token]:
        src = self.src
        size = len(src)
        while True:
            while self.pos < size:
                ch = src[self.pos]
                if ch in " \t\r" or (ch == "\n" and not self.insert_semi):
                    self.pos += 1
                else:
                    break

            if self.pos >= size:
                if self.insert_semi:
                    self.emit(TokenKind.SEMICOLON, "\n", size)
                self.emit(TokenKind.EOF, "", size)
                return self.tokens

            start = self.pos
            ch = src[start]

            if ch == "\n":
                self.emit(TokenKind.SEMICOLON, "\n", start)
                self.insert_semi = False
                self.pos += 1
                continue

            if src.startswith("//", start) or src.startswith("/*", start):
                if self.insert_semi and self.comment_ends_line(start):
                    self.emit(TokenKind.SEMICOLON, "\n", start)
                    self.insert_semi = False
                    continue
                self.pos = self.scan_comment(start)
                continue

            if ch.isalpha() or ch == "_":
                end = start + 1
                while end < size and (src[end].isalnum() or src[end] == "_"):
                    end += 1
                word = src[start:end]
                if word == "package":
                    kind = TokenKind.PACKAGE
                elif word == "import":
                    kind = TokenKind.IMPORT
                elif word in KEYWORDS:
                    kind = TokenKind.KEYWORD
                else:
                    kind = TokenKind.IDENT
                self.emit(kind, word, start)
                self.insert_semi = kind is TokenKind.IDENT or word in _SEMI_KEYWORDS
                self.pos = end
                continue

            if ch.isdigit() or (ch == "." and start + 1 < size and src[start + 1].isdigit()):
                match = _NUMBER_RE.match(src, start)
                end = match.end() if match else start + 1
                kind = TokenKind.INT
                if match and match.group("hex"):
                    if "." in match.group("hex") or "p" in match.group("hex").lower():
                        kind = TokenKind.FLOAT
                elif match and match.group("dec"):
                    text = match.group("dec")
                    if "." in text or "e" in text or "E" in text:
                        kind = TokenKind.FLOAT
                if end < size and src[end] == "i":
                    end += 1
                    kind = TokenKind.IMAG
                self.emit(kind, src[start:end], start)
                self.insert_semi = True
                self.pos = end
                continue

            if ch == '"' or ch == "'":
                end = self.scan_quoted(start, ch)
                kind = TokenKind.STRING if ch == '"' else TokenKind.CHAR
                self.emit(kind, src[start:end], start)
                self.insert_semi = True
                self.pos = end
                continue

            if ch == "`":
                end = self.scan_raw(start)
                self.emit(TokenKind.STRING, src[start:end], start)
                self.insert_semi = True
                self.pos = end
                continue

            for op in _OPERATORS:
                if src.startswith(op, start):
                    break
            else:
                raise self.error(f"illegal character {ch!r}", start)
            self.emit(_PUNCTUATION.get(op, TokenKind.OPERATOR), op, start)
            self.insert_semi = op in (")", "]", "}", "++", "--")
            self.pos = start + len(op)


def scan(src: str | bytes, filename: str = "") -> list[Token]:
    """Tokenize Go source.

    Args:
        src: Go source as text or UTF-8 bytes
        filename: Name used in error messages

    Returns:
        Tokens in source order, comments included, ending with ``EOF``

    Raises:
        GoScanError: On illegal characters or unterminated literals/comments
    """
    if isinstance(src, bytes):
        try:
            src = src.decode("utf-8")
        except UnicodeDecodeError as e:
            raise GoScanError(f"invalid UTF-8 encoding: {e}", filename) from e
    return _Scanner(src, filename).run()


def go_unquote(literal: str) -> str:
    """Return the value of a Go string literal (interpreted or raw).

    Raises:
        ValueError: If ``literal`` is not a quoted string literal
    """
    if len(literal) >= 2 and literal[0] == literal[-1] == "`":
        return literal[1:-1].replace("\r", "")
    if len(literal) < 2 or literal[0] != '"' or literal[-1] != '"':
        raise ValueError(f"not a string literal: {literal!r}")

    def replace(match: re.Match[str]) -> str:
        if match.group("simple"):
            return _ESCAPES[match.group("simple")]
        if match.group("oct"):
            return chr(int(match.group("oct"), 8))
        if match.group("hex"):
            return chr(int(match.group("hex"), 16))
        return chr(int(match.group("u4") or match.group("u8"), 16))

    return _ESCAPE_RE.sub(replace, literal[1:-1])


def go_quote(value: str) -> str:
    """Return ``value`` as a double-quoted Go string literal."""
    reverse = {v: k for k, v in _ESCAPES.items() if k != "'"}
    out = ['"']
    for ch in value:
        if ch in reverse:
            out.append("\\" + reverse[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x100:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    out.append('"')
    return "".join(out)
