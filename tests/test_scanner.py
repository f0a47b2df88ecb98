# SPDX-License-Identifier: MIT
"""Tests for the Go scanner."""

import pytest

from go_vend.errors import ErrorKind, GoScanError
from go_vend.scanner import TokenKind, go_quote, go_unquote, scan


def kinds(src):
    return [t.kind for t in scan(src)]


class TestSemicolonInsertion:
    """Tests for automatic semicolon insertion."""

    def test_newline_after_identifier(self):
        """A newline after an identifier ends the statement."""
        assert kinds("package foo\n") == [
            TokenKind.PACKAGE,
            TokenKind.IDENT,
            TokenKind.SEMICOLON,
            TokenKind.EOF,
        ]

    def test_eof_after_identifier(self):
        """End of input after an identifier ends the statement."""
        tokens = scan("package foo")
        assert tokens[2].kind is TokenKind.SEMICOLON
        assert tokens[2].offset == len("package foo")

    def test_no_semicolon_after_keyword(self):
        """A newline after ``import`` does not end the statement."""
        assert kinds("import\n") == [TokenKind.IMPORT, TokenKind.EOF]

    def test_semicolon_before_line_comment(self):
        """The implicit semicolon is placed before a trailing comment."""
        tokens = scan('package foo // import "x"\n')
        assert [t.kind for t in tokens] == [
            TokenKind.PACKAGE,
            TokenKind.IDENT,
            TokenKind.SEMICOLON,
            TokenKind.COMMENT,
            TokenKind.EOF,
        ]
        semicolon, comment = tokens[2], tokens[3]
        assert semicolon.literal == "\n"
        assert semicolon.offset == comment.offset
        assert semicolon.end == semicolon.offset

    def test_semicolon_before_general_comment_at_line_end(self):
        """A /* */ comment ending the line also gets the semicolon first."""
        assert kinds("x /* c */\n")[:3] == [
            TokenKind.IDENT,
            TokenKind.SEMICOLON,
            TokenKind.COMMENT,
        ]

    def test_inline_general_comment(self):
        """A /* */ comment followed by more code does not end the statement."""
        assert kinds("x /* c */ + y\n")[:3] == [
            TokenKind.IDENT,
            TokenKind.COMMENT,
            TokenKind.OPERATOR,
        ]

    def test_explicit_semicolon(self):
        """An explicit semicolon is a one character token."""
        tokens = scan("package foo; // c\n")
        assert tokens[2].literal == ";"
        assert tokens[2].end == tokens[2].offset + 1
        assert tokens[3].kind is TokenKind.COMMENT

    def test_closing_paren_ends_statement(self):
        """A newline after ``)`` ends the statement."""
        assert kinds("f()\n")[-2] is TokenKind.SEMICOLON


class TestLiterals:
    """Tests for literal scanning."""

    def test_string_with_escaped_quote(self):
        """Escaped quotes do not end a string."""
        tokens = scan(r'"a\"b"')
        assert tokens[0].kind is TokenKind.STRING
        assert tokens[0].literal == r'"a\"b"'

    def test_raw_string_spans_lines(self):
        """Raw strings may contain newlines."""
        tokens = scan("`a\nb`\n")
        assert tokens[0].kind is TokenKind.STRING
        assert tokens[0].literal == "`a\nb`"
        assert tokens[1].line == 2

    def test_numbers(self):
        """Numeric literals are classified."""
        assert kinds("1 0x1F 1.5 2i 'c'")[:5] == [
            TokenKind.INT,
            TokenKind.INT,
            TokenKind.FLOAT,
            TokenKind.IMAG,
            TokenKind.CHAR,
        ]

    def test_positions(self):
        """Tokens carry 1-based line and column."""
        tokens = scan("package foo\n\nimport \"fmt\"\n")
        imp = tokens[3]
        assert imp.kind is TokenKind.IMPORT
        assert (imp.line, imp.column) == (3, 1)
        assert (tokens[4].line, tokens[4].column) == (3, 8)

    def test_byte_order_mark_skipped(self):
        """A leading byte order mark is not a token."""
        assert scan("\ufeffpackage foo")[0].kind is TokenKind.PACKAGE


class TestScanErrors:
    """Tests for scanner failures."""

    def test_unterminated_string(self):
        with pytest.raises(GoScanError, match="string literal not terminated"):
            scan('x := "abc\n')

    def test_unterminated_comment(self):
        with pytest.raises(GoScanError, match="comment not terminated"):
            scan("/* never closed")

    def test_illegal_character(self):
        with pytest.raises(GoScanError) as exc_info:
            scan("package foo\n@", "x.go")
        assert exc_info.value.kind is ErrorKind.SCAN
        assert str(exc_info.value).startswith("x.go:2:1:")

    def test_invalid_utf8(self):
        with pytest.raises(GoScanError, match="UTF-8"):
            scan(b"package \xff")


class TestQuoting:
    """Tests for Go string literal helpers."""

    def test_unquote_interpreted(self):
        assert go_unquote(r'"a\tb\x41é"') == "a\tbAé"

    def test_unquote_raw(self):
        assert go_unquote("`a\\nb`") == "a\\nb"

    def test_unquote_rejects_non_literal(self):
        with pytest.raises(ValueError):
            go_unquote("abc")

    def test_quote_import_path(self):
        assert go_quote("github.com/x/y") == '"github.com/x/y"'

    def test_quote_escapes(self):
        assert go_quote('a"b\\') == r'"a\"b\\"'
