# SPDX-License-Identifier: MIT
"""Vendoring operations.

Each function here implements one vend subcommand on top of the resolver,
copier, planner and rewriter. Operations take an explicit
:class:`~go_vend.config.BuildContext` and working directory and either
complete every step or raise the first error; there is no rollback.
"""

from __future__ import annotations

import os
import shutil
from collections import defaultdict
from pathlib import Path
from typing import Optional

from .canonical import strip_canonical_import_dir
from .config import BuildContext
from .copier import copy_tree
from .discovery import recurse_packages, walk_packages
from .errors import (
    DestinationExistsError,
    DuplicatePackageError,
    ImportPathError,
    NoGoFilesError,
    NotInRootError,
    PseudoPackageError,
    StandardPackageError,
    VendError,
)
from .output import echo_bold
from .planner import is_child_package, plan_rewrites
from .resolver import (
    Package,
    PackageResult,
    filter_imports,
    find_package,
    get_package,
    get_import_path,
    get_imports,
    import_dir,
    import_path,
    is_standard_package,
    list_filter,
)
from .rewriter import rewrite_dir


def _abspath(cwd: str | Path, path: str | Path) -> Path:
    return Path(os.path.abspath(Path(cwd) / path))


def _is_within(path: Path, directory: Path) -> bool:
    return path == directory or directory in path.parents


def _require_located(result: PackageResult) -> Package:
    """Return the package if its import path and directory are known."""
    if isinstance(result.error, PseudoPackageError):
        raise result.error
    if not result.located:
        if result.error is not None:
            raise result.error
        raise ImportPathError(
            f"cannot determine import path of {result.package.directory}",
            str(result.package.directory or ""),
        )
    return result.package


def update_paths(
    ctx: BuildContext,
    directory: str | Path,
    old: str,
    new: str,
    recurse: bool = False,
    skip: Optional[Path] = None,
) -> list[Package]:
    """Rewrite references to ``old`` (and its children) into ``new``.

    Args:
        ctx: Build context
        directory: Package directory to update
        old: Import path being replaced
        new: Replacement import path
        recurse: Also update every package below ``directory``
        skip: Directory tree whose packages are left alone

    Returns:
        The packages that were inspected

    Raises:
        ImportPathError: If a package has no import path or directory
    """

    def update(pkg: Package, error: Optional[VendError] = None) -> None:
        if skip is not None and pkg.directory is not None and _is_within(pkg.directory, skip):
            return
        if not pkg.import_path or pkg.directory is None:
            raise ImportPathError(
                f"cannot determine import path of {pkg.directory}", str(pkg.directory or "")
            )
        rewrites = plan_rewrites(old, new, get_imports(pkg, True))
        if rewrites:
            rewrite_dir(pkg.directory, rewrites, ctx)

    if recurse:
        return recurse_packages(ctx, directory, update)

    result = import_dir(ctx, directory)
    if isinstance(result.error, NoGoFilesError):
        return []
    update(_require_located(result), result.error)
    return [result.package]


def copy_package(
    ctx: BuildContext,
    cwd: str | Path,
    src: str | Path,
    dst: str | Path,
    recurse: bool = False,
    hidden: bool = False,
    force: bool = False,
) -> tuple[str, str]:
    """Copy a package to a new location and update references to it.

    The copy has its canonical import comments stripped and its own
    references to the old location rewritten. The package in ``cwd`` (and
    with ``recurse`` every package below it, apart from the copy) is then
    updated to import the copy.

    Args:
        ctx: Build context
        cwd: Working directory; relative paths are resolved from here
        src: Directory or import path of the package to copy
        dst: Destination directory
        recurse: Update every package below ``cwd``
        hidden: Copy hidden files and directories
        force: Replace an existing destination

    Returns:
        Tuple of (old import path, new import path)

    Raises:
        DestinationExistsError: If ``dst`` exists and ``force`` is not set
        ImportPathError: If ``dst`` is the source directory or one of its parents
        NotInRootError: If ``dst`` is not inside GOPATH or a module
    """
    pkg = _require_located(find_package(ctx, cwd, src))
    assert pkg.directory is not None
    dst_path = _abspath(cwd, dst)
    old_imp = pkg.import_path
    new_imp = get_import_path(ctx, cwd, dst_path)
    if _is_within(pkg.directory, dst_path):
        raise ImportPathError(
            f"cannot copy {old_imp} over itself or a parent directory", old_imp
        )

    if dst_path.exists() or dst_path.is_symlink():
        if not force:
            raise DestinationExistsError(dst_path)
        if dst_path.is_dir() and not dst_path.is_symlink():
            shutil.rmtree(dst_path)
        else:
            dst_path.unlink()

    copy_tree(pkg.directory, dst_path, hidden, ctx)
    strip_canonical_import_dir(dst_path)

    update_paths(ctx, dst_path, old_imp, new_imp, recurse=True)
    update_paths(ctx, cwd, old_imp, new_imp, recurse=recurse, skip=dst_path)
    return old_imp, new_imp


def move_package(
    ctx: BuildContext,
    cwd: str | Path,
    src: str | Path,
    dst: str | Path,
    recurse: bool = False,
    hidden: bool = False,
    force: bool = False,
) -> tuple[str, str]:
    """Move a package to a new location and update references to it.

    Same as :func:`copy_package`, after which the source directory is removed.

    Raises:
        StandardPackageError: If the source is a standard library package
        ImportPathError: If the destination lies inside the source
    """
    pkg = _require_located(find_package(ctx, cwd, src))
    assert pkg.directory is not None
    if pkg.goroot or is_standard_package(ctx, cwd, pkg.import_path):
        raise StandardPackageError(pkg.import_path)
    if _is_within(_abspath(cwd, dst), pkg.directory):
        raise ImportPathError(
            f"cannot move {pkg.import_path} into its own directory", pkg.import_path
        )

    result = copy_package(ctx, cwd, pkg.directory, dst, recurse, hidden, force)
    shutil.rmtree(pkg.directory)
    return result


def _external_filter(ctx: BuildContext, cwd: Path, working: str):
    def keep(imp: str) -> bool:
        if imp == working or is_child_package(working, imp) or is_child_package(imp, working):
            return False
        return not is_standard_package(ctx, cwd, imp)

    return keep


def vendor_init(
    ctx: BuildContext,
    cwd: str | Path,
    dst: str | Path,
    recurse: bool = False,
    hidden: bool = False,
    force: bool = False,
) -> list[tuple[str, str]]:
    """Vendor every external dependency of the package in ``cwd``.

    External dependencies are imports (tests included) that are neither
    standard packages nor parents or children of the working package. Each
    is copied to ``dst/<package name>``. When two import paths would land in
    the same directory nothing is copied and a DuplicatePackageError lists
    every collision. A destination that already holds a package of the same
    name is reused (references are pointed at it) unless ``force`` is set.

    Args:
        ctx: Build context
        cwd: Working package directory
        dst: Directory the dependencies are copied into
        recurse: Collect dependencies of every package below ``cwd``
        hidden: Copy hidden files and directories
        force: Replace existing destinations

    Returns:
        List of (old import path, new import path) in name order

    Raises:
        DuplicatePackageError: If two dependencies share a package name
        NotInRootError: If ``cwd`` is not inside GOPATH or a module
        PackageNotFoundError: If a dependency cannot be resolved
    """
    cwd = Path(os.path.abspath(cwd))
    dst_root = _abspath(cwd, dst)

    working = import_dir(ctx, cwd)
    if not working.package.import_path:
        raise NotInRootError(cwd)

    packages: list[Package] = []
    if recurse:
        for result in walk_packages(ctx, cwd):
            directory = result.package.directory
            if directory is not None and not _is_within(directory, dst_root):
                packages.append(result.package)
    elif working.package.has_go_files:
        packages.append(working.package)

    imports: set[str] = set()
    for pkg in packages:
        imports.update(get_imports(pkg, True))
    external = filter_imports(
        sorted(imports), _external_filter(ctx, cwd, working.package.import_path)
    )

    by_name: dict[str, list[str]] = defaultdict(list)
    resolved: dict[str, Package] = {}
    for imp in external:
        pkg = _require_located(import_path(ctx, imp, cwd))
        by_name[pkg.name].append(pkg.import_path)
        resolved[pkg.import_path] = pkg
    if any(len(paths) > 1 for paths in by_name.values()):
        raise DuplicatePackageError(by_name)

    vendored: list[tuple[str, str]] = []
    for name in sorted(by_name):
        pkg = resolved[by_name[name][0]]
        target = dst_root / name
        echo_bold(f"{pkg.import_path} => {target}")
        if target.is_dir() and not force:
            existing = import_dir(ctx, target)
            if existing.package.name != name:
                raise DestinationExistsError(target)
            new_imp = get_import_path(ctx, cwd, target)
            update_paths(ctx, cwd, pkg.import_path, new_imp, recurse=recurse, skip=dst_root)
            vendored.append((pkg.import_path, new_imp))
            continue
        vendored.append(
            copy_package(ctx, cwd, pkg.directory, target, recurse, hidden, force)
        )
    return vendored


def list_imports(
    ctx: BuildContext,
    cwd: str | Path,
    path: str | Path = ".",
    tests: bool = False,
    std: bool = False,
    child: bool = False,
    recurse: bool = False,
) -> list[str]:
    """List the imports of a package.

    Args:
        ctx: Build context
        cwd: Working directory
        path: Directory or import path of the package
        tests: Include test and external test imports
        std: Omit standard packages
        child: Omit packages below the listed package
        recurse: List the imports of every package below ``path``

    Returns:
        Sorted, unique import paths
    """
    pkg = _require_located(find_package(ctx, cwd, path))
    packages = [pkg]
    if recurse:
        assert pkg.directory is not None
        packages = [result.package for result in walk_packages(ctx, pkg.directory)]

    imports: set[str] = set()
    for p in packages:
        keep = list_filter(ctx, cwd, p.import_path, child, std)
        imports.update(filter_imports(get_imports(p, tests), keep))
    return sorted(imports)


def package_info(ctx: BuildContext, cwd: str | Path, path: str | Path = ".") -> Package:
    """Resolve a package for display.

    The pseudo package ``C`` resolves to its partial description. Any other
    resolution error, a file that fails to parse included, is raised.
    """
    try:
        return get_package(ctx, cwd, path)
    except PseudoPackageError as e:
        return e.package
