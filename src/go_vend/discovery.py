# SPDX-License-Identifier: MIT
"""Recursive package discovery."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator, Optional

from .config import BuildContext
from .copier import is_hidden
from .errors import GoSyntaxError, NoGoFilesError, VendError
from .output import echo_warning
from .resolver import Package, PackageResult, import_dir

Visitor = Callable[[Package, Optional[VendError]], None]


def walk_packages(ctx: BuildContext, root: str | Path) -> Iterator[PackageResult]:
    """Yield every package found under ``root``, root included.

    Hidden directories are not descended into. Directories without any Go
    source file are skipped. Packages with a soft resolution error (several
    package names in one directory, files that fail to parse) are yielded
    with the error attached; unparsable files are reported as warnings.

    Raises:
        OSError: If a directory or file cannot be read
    """
    for dirpath, dirs, _ in os.walk(root):
        dirs[:] = sorted(d for d in dirs if not is_hidden(d))
        result = import_dir(ctx, dirpath)
        if isinstance(result.error, GoSyntaxError):
            echo_warning(f"ignoring unparsable file: {result.error}")
        if isinstance(result.error, NoGoFilesError) or not result.package.has_go_files:
            continue
        yield result


def recurse_packages(ctx: BuildContext, root: str | Path, visit: Visitor) -> list[Package]:
    """Call ``visit`` on every package under ``root``.

    All packages are discovered before the first call, so a visitor that
    rewrites files cannot change which packages are visited.

    Args:
        ctx: Build context
        root: Directory to search
        visit: Called with each package and its soft resolution error

    Returns:
        The visited packages
    """
    results = list(walk_packages(ctx, root))
    for result in results:
        visit(result.package, result.error)
    return [result.package for result in results]
