# SPDX-License-Identifier: MIT
"""CLI entry point for the vend command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from .config import BuildContext, parse_gopath
from .errors import VendError
from .output import echo_error


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.goroot: Optional[Path] = None
        self.gopath: Optional[str] = None
        self.directory: Optional[Path] = None

    @property
    def cwd(self) -> Path:
        """Working directory commands resolve relative paths from."""
        return (self.directory or Path.cwd()).absolute()

    def build_context(self, verbose: bool = False) -> BuildContext:
        """Create the build context from the environment and global options."""
        build_ctx = BuildContext.from_environ(verbose=verbose)
        if self.goroot is not None:
            build_ctx.goroot = self.goroot
        if self.gopath is not None:
            build_ctx.gopath = parse_gopath(self.gopath)
        return build_ctx


pass_context = click.make_pass_decorator(Context, ensure=True)


def fail(error: Exception) -> NoReturn:
    """Report an error and exit with status 1."""
    echo_error(str(error))
    raise SystemExit(1)


@click.group()
@click.version_option(package_name="go-vend")
@click.option(
    "--goroot",
    type=click.Path(file_okay=False, path_type=Path),
    help="Go installation root (defaults to $GOROOT or `go env GOROOT`).",
)
@click.option(
    "--gopath",
    help="GOPATH list (defaults to $GOPATH or ~/go).",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Change to directory before running command.",
)
@pass_context
def cli(
    ctx: Context,
    goroot: Optional[Path],
    gopath: Optional[str],
    directory: Optional[Path],
) -> None:
    """Vendor Go packages by copying them and rewriting import paths.

    \b
    Examples:
        vend list -s -c
        vend info golang.org/x/net/context
        vend cp github.com/pkg/errors ./internal/errors
        vend mv ./util ./internal/util
        vend init ./vendor
        vend path -r github.com/old/lib github.com/new/lib
    """
    ctx.goroot = goroot
    ctx.gopath = gopath
    ctx.directory = directory


# Import and register commands
from .commands import cp, imports, info, init, mv, path  # noqa: E402

cli.add_command(imports.list_imports)
cli.add_command(info.info)
cli.add_command(cp.cp)
cli.add_command(mv.mv)
cli.add_command(init.init)
cli.add_command(path.path)
cli.add_command(path.path, name="update")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except VendError as e:
        echo_error(str(e))
        sys.exit(1)
    except OSError as e:
        echo_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
