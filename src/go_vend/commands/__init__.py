# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import cp, imports, info, init, mv, path

__all__ = ["cp", "imports", "info", "init", "mv", "path"]
