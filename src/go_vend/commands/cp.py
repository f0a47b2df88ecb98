# SPDX-License-Identifier: MIT
"""Copy a package and rewrite imports."""

from __future__ import annotations

import click

from ..errors import VendError
from ..main import Context, fail, pass_context
from ..operations import copy_package
from ..output import echo_success


@click.command()
@click.argument("src", metavar="FROM")
@click.argument("dst", metavar="TO")
@click.option("--verbose", "-v", is_flag=True, help="Report copied and rewritten files.")
@click.option("--force", "-f", is_flag=True, help="Replace the destination if it exists.")
@click.option("--recurse", "-r", is_flag=True, help="Update packages in subdirectories too.")
@click.option("--hidden", "-i", is_flag=True, help="Copy hidden files and directories.")
@pass_context
def cp(
    ctx: Context,
    src: str,
    dst: str,
    verbose: bool,
    force: bool,
    recurse: bool,
    hidden: bool,
) -> None:
    """Copy a package and point imports at the copy.

    FROM is a directory or an import path; TO is the destination directory,
    which must lie inside a GOPATH or module.

    \b
    Examples:
        vend cp github.com/pkg/errors ./internal/errors
        vend cp -r -f ../lib ./third_party/lib
    """
    try:
        old, new = copy_package(
            ctx.build_context(verbose), ctx.cwd, src, dst, recurse, hidden, force
        )
    except (VendError, OSError) as e:
        fail(e)
    echo_success(f"{old} => {new}")
