# SPDX-License-Identifier: MIT
"""Rewrite import paths without copying."""

from __future__ import annotations

import click

from ..errors import VendError
from ..main import Context, fail, pass_context
from ..operations import update_paths


@click.command()
@click.argument("old", metavar="FROM")
@click.argument("new", metavar="TO")
@click.option("--verbose", "-v", is_flag=True, help="Report rewritten files.")
@click.option("--recurse", "-r", is_flag=True, help="Update packages in subdirectories too.")
@pass_context
def path(ctx: Context, old: str, new: str, verbose: bool, recurse: bool) -> None:
    """Change imports of FROM (and its children) to TO.

    \b
    Examples:
        vend path github.com/old/lib github.com/new/lib
        vend update -r -v example.com/a/util example.com/a/internal/util
    """
    try:
        update_paths(ctx.build_context(verbose), ctx.cwd, old, new, recurse)
    except (VendError, OSError) as e:
        fail(e)
