# SPDX-License-Identifier: MIT
"""Build constraint evaluation.

Files are selected for a target platform the way the go tool does it: by the
``_GOOS``/``_GOARCH`` suffixes of the file name and by the ``//go:build`` (or
legacy ``// +build``) lines above the package clause. Only used when a
:class:`~go_vend.config.BuildContext` has ``use_all_files`` switched off.

Example:
    >>> ctx = BuildContext(goos="linux", goarch="amd64")
    >>> match_expr(ctx, "linux && (amd64 || arm64)")
    True
    >>> match_file_name(ctx, "poll_windows.go")
    False
"""

from __future__ import annotations

import re
from typing import Callable

from .config import BuildContext

KNOWN_OS = frozenset(
    "aix android darwin dragonfly freebsd hurd illumos ios js linux nacl netbsd "
    "openbsd plan9 solaris wasip1 windows zos".split()
)

KNOWN_ARCH = frozenset(
    "386 amd64 amd64p32 arm armbe arm64 arm64be loong64 mips mipsle mips64 "
    "mips64le mips64p32 mips64p32le ppc ppc64 ppc64le riscv riscv64 s390 s390x "
    "sparc sparc64 wasm".split()
)

UNIX_OS = frozenset(
    "aix android darwin dragonfly freebsd hurd illumos ios linux netbsd openbsd "
    "solaris".split()
)

_RELEASE_TAG_RE = re.compile(r"^go1\.\d+$")
_EXPR_TOKEN_RE = re.compile(r"\s*(\|\||&&|!|\(|\)|[A-Za-z0-9_.]+)")


def _match_os(ctx: BuildContext, name: str) -> bool:
    if ctx.goos == name:
        return True
    # GOOS values implying another
    return (ctx.goos, name) in {
        ("android", "linux"),
        ("illumos", "solaris"),
        ("ios", "darwin"),
    }


def match_tag(ctx: BuildContext, tag: str) -> bool:
    """Report whether a single build tag is satisfied by ``ctx``."""
    if tag in ("gc", ctx.goarch) or _match_os(ctx, tag):
        return True
    if tag == "unix":
        return ctx.goos in UNIX_OS
    return bool(_RELEASE_TAG_RE.match(tag))


def match_file_name(ctx: BuildContext, filename: str) -> bool:
    """Apply the ``*_GOOS``, ``*_GOARCH`` and ``*_GOOS_GOARCH`` file name rule."""
    name = filename[: -len(".go")] if filename.endswith(".go") else filename
    if name.endswith("_test"):
        name = name[: -len("_test")]
    if "_" not in name:
        return True
    parts = name[name.index("_") :].split("_")
    last = parts[-1]
    if len(parts) >= 3 and parts[-2] in KNOWN_OS and last in KNOWN_ARCH:
        return _match_os(ctx, parts[-2]) and ctx.goarch == last
    if last in KNOWN_OS:
        return _match_os(ctx, last)
    if last in KNOWN_ARCH:
        return ctx.goarch == last
    return True


class _ExprParser:
    """Recursive descent over ``||``, ``&&``, ``!`` and parentheses."""

    def __init__(self, expr: str, tag: Callable[[str], bool]) -> None:
        self.tokens: list[str] = []
        pos = 0
        expr = expr.strip()
        while pos < len(expr):
            match = _EXPR_TOKEN_RE.match(expr, pos)
            if match is None:
                raise ValueError(f"invalid build expression: {expr!r}")
            self.tokens.append(match.group(1))
            pos = match.end()
        self.pos = 0
        self.tag = tag

    def peek(self) -> str:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else ""

    def take(self) -> str:
        token = self.peek()
        if not token:
            raise ValueError("unexpected end of build expression")
        self.pos += 1
        return token

    def parse(self) -> bool:
        result = self.or_expr()
        if self.peek():
            raise ValueError(f"unexpected {self.peek()!r} in build expression")
        return result

    def or_expr(self) -> bool:
        result = self.and_expr()
        while self.peek() == "||":
            self.take()
            # both sides are parsed even when the left one already decided
            right = self.and_expr()
            result = result or right
        return result

    def and_expr(self) -> bool:
        result = self.not_expr()
        while self.peek() == "&&":
            self.take()
            right = self.not_expr()
            result = result and right
        return result

    def not_expr(self) -> bool:
        token = self.take()
        if token == "!":
            return not self.not_expr()
        if token == "(":
            result = self.or_expr()
            if self.take() != ")":
                raise ValueError("missing ')' in build expression")
            return result
        if token in ("||", "&&", ")"):
            raise ValueError(f"unexpected {token!r} in build expression")
        return self.tag(token)


def match_expr(ctx: BuildContext, expr: str) -> bool:
    """Evaluate a ``//go:build`` expression.

    Raises:
        ValueError: If the expression is malformed
    """
    return _ExprParser(expr, lambda tag: match_tag(ctx, tag)).parse()


def match_plus_build(ctx: BuildContext, line: str) -> bool:
    """Evaluate the options of one ``// +build`` line.

    Space separated options are alternatives; comma separated terms within
    an option must all hold; a ``!`` prefix negates a term.
    """
    for option in line.split():
        if all(
            not match_tag(ctx, term[1:]) if term.startswith("!") else match_tag(ctx, term)
            for term in option.split(",")
        ):
            return True
    return False


def match_constraints(ctx: BuildContext, go_build: str, plus_build: list[str]) -> bool:
    """Evaluate the build constraint lines of a file.

    A ``//go:build`` line takes precedence; otherwise every ``// +build``
    line must be satisfied.
    """
    if go_build:
        return match_expr(ctx, go_build)
    return all(match_plus_build(ctx, line) for line in plus_build)
