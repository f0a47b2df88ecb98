# SPDX-License-Identifier: MIT
"""Error taxonomy for vend operations.

Every failure raised by the library is a :class:`VendError` subclass that
carries an :class:`ErrorKind` tag and the data needed to report it, so callers
can branch on ``err.kind`` instead of comparing messages.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .resolver import Package


class ErrorKind(Enum):
    """Kinds of errors reported by vend."""

    DESTINATION_EXISTS = "destination-exists"
    IRREGULAR_FILE = "irregular-file"
    PSEUDO_PACKAGE = "pseudo-package"
    IMPORT_PATH = "import-path"
    PACKAGE_NOT_FOUND = "package-not-found"
    NO_GO_FILES = "no-go-files"
    MULTIPLE_PACKAGES = "multiple-packages"
    DUPLICATE_PACKAGE_NAMES = "duplicate-package-names"
    STANDARD_PACKAGE = "standard-package"
    NOT_IN_ROOT = "not-in-root"
    SCAN = "scan"
    PARSE = "parse"
    CONFIG = "config"


class VendError(Exception):
    """Base class for all vend errors."""

    kind: ErrorKind


class ConfigError(VendError):
    """Raised when the build context cannot be configured."""

    kind = ErrorKind.CONFIG


class DestinationExistsError(VendError):
    """Raised when copying onto an existing destination without force."""

    kind = ErrorKind.DESTINATION_EXISTS

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"destination already exists: {path}")


class IrregularFileError(VendError):
    """Raised when a copy meets a link, pipe, device or socket."""

    kind = ErrorKind.IRREGULAR_FILE

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"non regular file: {path}")


class PseudoPackageError(VendError):
    """Returned alongside the partial package for the cgo pseudo package ``C``.

    This is a sentinel rather than a failure: the reference is valid but has no
    directory to resolve.
    """

    kind = ErrorKind.PSEUDO_PACKAGE

    def __init__(self, package: "Package") -> None:
        self.package = package
        super().__init__(f"pseudo package: {package.import_path}")


class ImportPathError(VendError):
    """Raised when an import path cannot be determined or transformed."""

    kind = ErrorKind.IMPORT_PATH

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class PackageNotFoundError(VendError):
    """Raised when an import path is not found in any root."""

    kind = ErrorKind.PACKAGE_NOT_FOUND

    def __init__(self, import_path: str, searched: Optional[list[Path]] = None) -> None:
        self.import_path = import_path
        self.searched = list(searched or [])
        where = ", ".join(str(p) for p in self.searched) or "no roots"
        super().__init__(f'cannot find package "{import_path}" in any of: {where}')


class NoGoFilesError(VendError):
    """Raised when a directory holds no buildable Go source files."""

    kind = ErrorKind.NO_GO_FILES

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        super().__init__(f"no buildable Go source files in {directory}")


class MultiplePackageError(VendError):
    """Raised when one directory declares more than one package name.

    Soft wherever the import path and directory were still determined.
    """

    kind = ErrorKind.MULTIPLE_PACKAGES

    def __init__(self, directory: Path, names: list[str], files: list[str]) -> None:
        self.directory = directory
        self.names = names
        self.files = files
        super().__init__(
            f"found packages {names[0]} ({files[0]}) and {names[1]} ({files[1]}) in {directory}"
        )


class DuplicatePackageError(VendError):
    """Raised by ``init`` when distinct imports share a destination name.

    Attributes:
        duplicates: Package name to every import path that would be copied
            under that name. Only names with more than one path are kept.
    """

    kind = ErrorKind.DUPLICATE_PACKAGE_NAMES

    def __init__(self, duplicates: dict[str, list[str]]) -> None:
        self.duplicates = {
            name: sorted(paths) for name, paths in duplicates.items() if len(paths) > 1
        }
        lines = [
            f"{name} found at {', '.join(paths)}"
            for name, paths in sorted(self.duplicates.items())
        ]
        super().__init__("duplicate package names found :\n" + "\n".join(lines))


class StandardPackageError(VendError):
    """Raised when moving a package from the standard library."""

    kind = ErrorKind.STANDARD_PACKAGE

    def __init__(self, import_path: str) -> None:
        self.import_path = import_path
        super().__init__(f"standard package specified: {import_path}")


class NotInRootError(VendError):
    """Raised when a path is not located under GOPATH or a module root."""

    kind = ErrorKind.NOT_IN_ROOT

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"path not located in GOPATH or a module: {path}")


class GoSyntaxError(VendError):
    """Base for errors in Go source text."""

    def __init__(self, message: str, filename: str = "", line: int = 0, column: int = 0) -> None:
        self.filename = filename
        self.line = line
        self.column = column
        location = f"{filename or '<input>'}:{line}:{column}"
        super().__init__(f"{location}: {message}")


class GoScanError(GoSyntaxError):
    """Raised when Go source cannot be tokenized."""

    kind = ErrorKind.SCAN


class GoParseError(GoSyntaxError):
    """Raised when Go source cannot be parsed."""

    kind = ErrorKind.PARSE
