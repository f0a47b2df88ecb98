# SPDX-License-Identifier: MIT
"""Vendor all external dependencies of a package."""

from __future__ import annotations

import click

from ..errors import VendError
from ..main import Context, fail, pass_context
from ..operations import vendor_init
from ..output import echo_info, echo_success


@click.command()
@click.argument("directory")
@click.option("--verbose", "-v", is_flag=True, help="Report copied and rewritten files.")
@click.option("--recurse", "-r", is_flag=True, help="Include packages in subdirectories.")
@click.option("--force", "-f", is_flag=True, help="Replace existing vendored copies.")
@click.option("--hidden", "-i", is_flag=True, help="Copy hidden files and directories.")
@pass_context
def init(
    ctx: Context,
    directory: str,
    verbose: bool,
    recurse: bool,
    force: bool,
    hidden: bool,
) -> None:
    """Copy every external dependency into DIRECTORY.

    Each dependency is placed in DIRECTORY/<package name>. If two
    dependencies share a package name nothing is copied; vendor one of them
    with `vend cp` first and run init again.

    \b
    Examples:
        vend init ./vendor
        vend init -r ./internal/third_party
    """
    try:
        vendored = vendor_init(
            ctx.build_context(verbose), ctx.cwd, directory, recurse, hidden, force
        )
    except (VendError, OSError) as e:
        fail(e)
    if not vendored:
        echo_info("No external packages to vendor.")
        return
    echo_success(f"Vendored {len(vendored)} package(s) into {directory}")
