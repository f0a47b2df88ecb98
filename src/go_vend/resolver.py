# SPDX-License-Identifier: MIT
"""Go package resolution.

This module answers the questions vend asks about Go packages: which import
path a directory has, where an import path lives, which files it is built
from, and what it imports. Packages are looked up in the GOROOT, then each
GOPATH root, then the module enclosing the importing directory.

Resolution problems (no Go files, several package names in one directory,
unknown import path) are returned as values in a :class:`PackageResult`
because callers often only need the import path and directory, which are
known even when the package itself is unusable. Filesystem and Go syntax
errors are raised.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .config import BuildContext
from .constraint import match_constraints, match_file_name
from .errors import (
    GoParseError,
    GoSyntaxError,
    MultiplePackageError,
    NoGoFilesError,
    NotInRootError,
    PackageNotFoundError,
    PseudoPackageError,
    VendError,
)
from .parser import parse_file, synopsis
from .planner import is_child_package

PSEUDO_PACKAGE = "C"

_MODULE_RE = re.compile(r"^\s*module\s+(?P<path>\"[^\"]+\"|\S+)", re.MULTILINE)


@dataclass
class Package:
    """Metadata about a Go package.

    Attributes:
        import_path: Logical import path ("" when not under any root)
        directory: Absolute directory holding the sources
        name: Declared package name
        doc: Synopsis of the package documentation
        goroot: True for packages in the standard library
        go_files: Non-test source files
        test_go_files: _test.go files in the same package
        xtest_go_files: _test.go files in the external <name>_test package
        ignored_go_files: Source files excluded by build constraints
        invalid_go_files: Source files that could not be parsed
        imports: Imports of go_files
        test_imports: Imports of test_go_files
        xtest_imports: Imports of xtest_go_files
        all_tags: Build tags mentioned by any file
    """

    import_path: str = ""
    directory: Optional[Path] = None
    name: str = ""
    doc: str = ""
    goroot: bool = False
    go_files: list[str] = field(default_factory=list)
    test_go_files: list[str] = field(default_factory=list)
    xtest_go_files: list[str] = field(default_factory=list)
    ignored_go_files: list[str] = field(default_factory=list)
    invalid_go_files: list[str] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    test_imports: list[str] = field(default_factory=list)
    xtest_imports: list[str] = field(default_factory=list)
    all_tags: list[str] = field(default_factory=list)

    @property
    def has_go_files(self) -> bool:
        """True when any buildable or test source file was found."""
        return bool(self.go_files or self.test_go_files or self.xtest_go_files)


@dataclass
class PackageResult:
    """A resolved package together with a non-fatal resolution error."""

    package: Package
    error: Optional[VendError] = None

    @property
    def located(self) -> bool:
        """True when both the import path and the directory are known."""
        return bool(self.package.import_path) and self.package.directory is not None


def cgo_package() -> Package:
    """Return the partial package describing the cgo pseudo package."""
    return Package(
        import_path=PSEUDO_PACKAGE,
        name=PSEUDO_PACKAGE,
        goroot=True,
        doc="Package C is a pseudo package that enables calls to C code via cgo.",
    )


def _abspath(path: Path) -> Path:
    return Path(os.path.abspath(path))


def _relative_import_path(directory: Path, root: Path) -> Optional[str]:
    try:
        rel = directory.relative_to(root)
    except ValueError:
        return None
    return rel.as_posix() if rel.parts else ""


def find_module(directory: Path) -> Optional[tuple[Path, str]]:
    """Find the nearest go.mod at or above ``directory``.

    Returns:
        Tuple of (module root, module path) or None
    """
    current = _abspath(directory)
    while True:
        go_mod = current / "go.mod"
        if go_mod.is_file():
            match = _MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
            if match:
                return current, match.group("path").strip('"')
        if current == current.parent:
            return None
        current = current.parent


def locate_directory(ctx: BuildContext, directory: Path) -> tuple[str, bool]:
    """Determine the import path of a directory.

    Args:
        ctx: Build context
        directory: Directory to locate

    Returns:
        Tuple of (import path or "", whether it lies in the GOROOT)
    """
    directory = _abspath(directory)
    if ctx.goroot_src is not None:
        imp = _relative_import_path(directory, _abspath(ctx.goroot_src))
        if imp is not None:
            return imp, True
    for root in ctx.gopath_src():
        imp = _relative_import_path(directory, _abspath(root))
        if imp is not None:
            return imp, False
    module = find_module(directory)
    if module is not None:
        module_root, module_path = module
        rel = _relative_import_path(directory, module_root)
        return (f"{module_path}/{rel}" if rel else module_path), False
    return "", False


def get_import_path(ctx: BuildContext, cwd: Path, path: str | Path) -> str:
    """Return the import path for a filesystem path inside a workspace root.

    Relative paths are resolved against ``cwd``. Only GOPATH roots and
    module roots are considered.

    Raises:
        NotInRootError: If the path is not under any GOPATH or module
    """
    abs_path = _abspath(Path(cwd) / path)
    for root in ctx.gopath_src():
        imp = _relative_import_path(abs_path, _abspath(root))
        if imp:
            return imp
    module = find_module(abs_path)
    if module is not None:
        module_root, module_path = module
        rel = _relative_import_path(abs_path, module_root)
        return f"{module_path}/{rel}" if rel else module_path
    raise NotInRootError(abs_path)


def _is_local(path: str) -> bool:
    return (
        path in (".", "..")
        or path.startswith("./")
        or path.startswith("../")
        or os.path.isabs(path)
    )


def import_dir(ctx: BuildContext, directory: str | Path) -> PackageResult:
    """Resolve the package in a directory.

    Args:
        ctx: Build context
        directory: Directory holding Go sources

    Returns:
        PackageResult; its error is a NoGoFilesError, MultiplePackageError,
        PackageNotFoundError (directory missing) or the GoSyntaxError of the
        first file that failed to parse. Unparsable files are listed in
        ``invalid_go_files`` and contribute no imports.

    Raises:
        OSError: If the directory or a file cannot be read
    """
    directory = _abspath(Path(directory))
    pkg = Package(directory=directory)
    pkg.import_path, pkg.goroot = locate_directory(ctx, directory)

    if not directory.is_dir():
        return PackageResult(
            pkg, PackageNotFoundError(pkg.import_path or str(directory), [directory])
        )

    error: Optional[VendError] = None
    first_file = ""
    imports: set[str] = set()
    test_imports: set[str] = set()
    xtest_imports: set[str] = set()

    with os.scandir(directory) as entries:
        names = sorted(e.name for e in entries if e.is_file())

    for filename in names:
        if not filename.endswith(".go") or filename.startswith(("_", ".")):
            continue
        if not ctx.use_all_files and not match_file_name(ctx, filename):
            pkg.ignored_go_files.append(filename)
            continue
        path = directory / filename
        try:
            source = parse_file(path.read_bytes(), str(path))
            selected = ctx.use_all_files or match_constraints(
                ctx, source.go_build, source.plus_build
            )
        except GoSyntaxError as e:
            pkg.invalid_go_files.append(filename)
            if error is None:
                error = e
            continue
        except ValueError as e:
            pkg.invalid_go_files.append(filename)
            if error is None:
                error = GoParseError(f"invalid build constraint: {e}", str(path), 1, 1)
            continue

        if not selected:
            pkg.ignored_go_files.append(filename)
            continue

        is_test = filename.endswith("_test.go")
        is_xtest = False
        name = source.package_name
        if is_test and name.endswith("_test") and name != pkg.name:
            is_xtest = True
            name = name[: -len("_test")]

        if name == "documentation":
            pkg.ignored_go_files.append(filename)
            continue
        if not pkg.name:
            pkg.name = name
            first_file = filename
        elif name != pkg.name:
            if error is None:
                error = MultiplePackageError(directory, [pkg.name, name], [first_file, filename])
            continue

        if not is_test and not pkg.doc and source.doc:
            pkg.doc = synopsis(source.doc)
        for tag in source.build_tags:
            if tag not in pkg.all_tags:
                pkg.all_tags.append(tag)

        if is_xtest:
            pkg.xtest_go_files.append(filename)
            xtest_imports.update(source.import_paths)
        elif is_test:
            pkg.test_go_files.append(filename)
            test_imports.update(source.import_paths)
        else:
            pkg.go_files.append(filename)
            imports.update(source.import_paths)

    pkg.imports = sorted(imports)
    pkg.test_imports = sorted(test_imports)
    pkg.xtest_imports = sorted(xtest_imports)

    if error is None and not pkg.has_go_files:
        error = NoGoFilesError(directory)
    return PackageResult(pkg, error)


def _find_import_dir(
    ctx: BuildContext, path: str, src_dir: Optional[Path]
) -> tuple[Optional[Path], list[Path]]:
    """Locate the directory of an import path without reading it."""
    searched: list[Path] = []
    for root in ctx.search_roots():
        candidate = root / path
        searched.append(candidate)
        if candidate.is_dir():
            return candidate, searched
    if src_dir is not None:
        module = find_module(src_dir)
        if module is not None:
            module_root, module_path = module
            if path == module_path or is_child_package(module_path, path):
                candidate = module_root / path[len(module_path) :].lstrip("/")
                searched.append(candidate)
                if candidate.is_dir():
                    return candidate, searched
    return None, searched


def import_path(
    ctx: BuildContext, path: str, src_dir: Optional[str | Path] = None
) -> PackageResult:
    """Resolve a package by import path.

    Args:
        ctx: Build context
        path: Import path, or a local path starting with ./ or ../
        src_dir: Directory of the importing code (for local paths and modules)

    Returns:
        PackageResult; the pseudo package ``C`` comes with a
        PseudoPackageError, unknown paths with a PackageNotFoundError
    """
    if path == PSEUDO_PACKAGE:
        pkg = cgo_package()
        return PackageResult(pkg, PseudoPackageError(pkg))

    base = Path(src_dir) if src_dir is not None else Path.cwd()
    if _is_local(path):
        return import_dir(ctx, base / path)

    directory, searched = _find_import_dir(ctx, path, base)
    if directory is None:
        return PackageResult(Package(import_path=path), PackageNotFoundError(path, searched))
    return import_dir(ctx, directory)


def find_package(ctx: BuildContext, cwd: str | Path, path: str | Path) -> PackageResult:
    """Resolve ``path`` first as a directory relative to ``cwd``, then as an import path."""
    candidate = Path(cwd) / path
    if candidate.is_dir():
        return import_dir(ctx, candidate)
    return import_path(ctx, str(path), cwd)


def get_package(ctx: BuildContext, cwd: str | Path, path: str | Path) -> Package:
    """Like :func:`find_package` but raises the resolution error, if any."""
    result = find_package(ctx, cwd, path)
    if result.error is not None:
        raise result.error
    return result.package


def is_standard_package(ctx: BuildContext, cwd: str | Path, path: str) -> bool:
    """Check whether ``path`` refers to a standard library package.

    Resolution failures count as not standard.
    """
    if path == PSEUDO_PACKAGE:
        return True
    candidate = Path(cwd) / path
    if candidate.is_dir():
        return locate_directory(ctx, candidate)[1]
    if _is_local(path):
        return False
    directory, _ = _find_import_dir(ctx, path, Path(cwd))
    if directory is None:
        return False
    return locate_directory(ctx, directory)[1]


def get_imports(pkg: Package, include_tests: bool) -> list[str]:
    """Return the sorted, unique imports of a package.

    Args:
        pkg: Package to inspect
        include_tests: Also include test and external test imports
    """
    imports = set(pkg.imports)
    if include_tests:
        imports.update(pkg.test_imports)
        imports.update(pkg.xtest_imports)
    return sorted(imports)


def filter_imports(imports: list[str], keep: Callable[[str], bool]) -> list[str]:
    """Return the imports for which ``keep`` returns True, order preserved."""
    return [imp for imp in imports if keep(imp)]


def list_filter(
    ctx: BuildContext,
    cwd: str | Path,
    parent: str,
    child: bool,
    std: bool,
) -> Callable[[str], bool]:
    """Build an import filter for listing.

    Args:
        ctx: Build context
        cwd: Directory imports are resolved from
        parent: Import path of the package whose imports are filtered
        child: Omit packages located under ``parent``
        std: Omit standard library packages
    """

    def keep(imp: str) -> bool:
        if child and is_child_package(parent, imp):
            return False
        if std and is_standard_package(ctx, cwd, imp):
            return False
        return True

    return keep
