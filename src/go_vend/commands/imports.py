# SPDX-License-Identifier: MIT
"""List the imports of a package."""

from __future__ import annotations

import click

from ..errors import VendError
from ..main import Context, fail, pass_context
from ..operations import list_imports as collect_imports
from ..operations import package_info
from ..output import echo_info
from .info import print_package


@click.command("list")
@click.argument("path", default=".")
@click.option("--quiet", "-q", is_flag=True, help="Only print import paths.")
@click.option("--verbose", "-v", is_flag=True, help="Show details for each import.")
@click.option("--recurse", "-r", is_flag=True, help="Include packages in subdirectories.")
@click.option("--tests", "-t", is_flag=True, help="Include test imports.")
@click.option("--no-std", "-s", "no_std", is_flag=True, help="Omit standard packages.")
@click.option("--no-child", "-c", "no_child", is_flag=True, help="Omit child packages.")
@pass_context
def list_imports(
    ctx: Context,
    path: str,
    quiet: bool,
    verbose: bool,
    recurse: bool,
    tests: bool,
    no_std: bool,
    no_child: bool,
) -> None:
    """List the packages imported by a package.

    PATH is a directory or an import path (defaults to the current directory).

    \b
    Examples:
        vend list
        vend list -q -s -c
        vend list -r -t ./cmd
    """
    try:
        build_ctx = ctx.build_context()
        imports = collect_imports(
            build_ctx,
            ctx.cwd,
            path,
            tests=tests,
            std=no_std,
            child=no_child,
            recurse=recurse,
        )
        for imp in imports:
            if quiet:
                echo_info(imp)
            else:
                print_package(package_info(build_ctx, ctx.cwd, imp), verbose)
    except (VendError, OSError) as e:
        fail(e)
