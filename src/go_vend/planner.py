# SPDX-License-Identifier: MIT
"""Import path rewrite planning.

Given the import path a package is moving away from and the one it is moving
to, the planner decides which import paths referenced by a package need to
change and what they change to. Children of the old path (packages located
in its subdirectories) follow their parent.

Example:
    >>> plan_rewrites("a/b", "lib/b", ["a/b", "a/b/c", "a/bc", "fmt"])
    {'a/b': 'lib/b', 'a/b/c': 'lib/b/c'}
"""

from __future__ import annotations

import posixpath
from typing import Iterable

from .errors import ImportPathError

RewriteMap = dict[str, str]


def _segments(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def is_child_package(parent: str, child: str) -> bool:
    """Check whether ``child`` is located in a subdirectory of ``parent``.

    The comparison works on whole path segments, so ``foo/bar`` is a child of
    ``foo`` while ``foobar`` is not. A path is not its own child.
    """
    parent_parts = _segments(parent)
    child_parts = _segments(child)
    if not parent_parts or len(child_parts) <= len(parent_parts):
        return False
    return child_parts[: len(parent_parts)] == parent_parts


def change_path_parent(old: str, new: str, child: str) -> str:
    """Move ``child`` from under ``old`` to under ``new``.

    Args:
        old: Import path being replaced
        new: Replacement import path
        child: ``old`` itself or one of its children

    Returns:
        The child's import path relative to ``new``

    Raises:
        ImportPathError: If ``child`` is neither ``old`` nor below it
    """
    old_parts = _segments(old)
    child_parts = _segments(child)
    if not old_parts or not _segments(new) or child_parts[: len(old_parts)] != old_parts:
        raise ImportPathError(f"{child} is not located under {old}", child)
    tail = child_parts[len(old_parts) :]
    return posixpath.join(*_segments(new), *tail)


def plan_rewrites(old: str, new: str, imports: Iterable[str]) -> RewriteMap:
    """Compute the import rewrites needed when ``old`` becomes ``new``.

    Args:
        old: Import path being replaced
        new: Replacement import path
        imports: Import paths referenced by the package being updated

    Returns:
        Mapping of each affected import path to its replacement
    """
    if not _segments(old) or not _segments(new):
        raise ImportPathError(f"cannot rewrite {old!r} to {new!r}: empty import path")
    rewrites: RewriteMap = {}
    old_parts = _segments(old)
    for imp in imports:
        if _segments(imp) == old_parts:
            rewrites[imp] = posixpath.join(*_segments(new))
        elif is_child_package(old, imp):
            rewrites[imp] = change_path_parent(old, new, imp)
    return rewrites
