# SPDX-License-Identifier: MIT
"""Show information about a package."""

from __future__ import annotations

import click

from ..errors import VendError
from ..main import Context, fail, pass_context
from ..operations import package_info
from ..output import echo_bold, echo_info, echo_wrap
from ..resolver import Package


def print_package(pkg: Package, verbose: bool = False) -> None:
    """Print the import path and documentation of a package."""
    echo_bold(pkg.import_path)
    if pkg.doc:
        echo_wrap(pkg.doc, 72)
    else:
        echo_info("No package documentation.")
    if verbose:
        echo_info()
        echo_info(f"  Standard : {pkg.goroot}")
        echo_info(f"  Directory : {pkg.directory or ''}")
        if pkg.all_tags:
            echo_info(f"  Tags : {' '.join(pkg.all_tags)}")
    echo_info()


@click.command()
@click.argument("path", default=".")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Also show the directory, build tags and whether the package is standard.",
)
@pass_context
def info(ctx: Context, path: str, verbose: bool) -> None:
    """Show a package's import path and documentation.

    PATH is a directory or an import path (defaults to the current directory).

    \b
    Examples:
        vend info
        vend info -v encoding/json
    """
    try:
        pkg = package_info(ctx.build_context(), ctx.cwd, path)
    except (VendError, OSError) as e:
        fail(e)
    print_package(pkg, verbose)
