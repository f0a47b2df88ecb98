# SPDX-License-Identifier: MIT
"""Vendor Go packages by copying them and rewriting their import paths."""

from .config import BuildContext
from .errors import ErrorKind, VendError
from .operations import (
    copy_package,
    list_imports,
    move_package,
    package_info,
    update_paths,
    vendor_init,
)

__version__ = "0.1.0"

__all__ = [
    "BuildContext",
    "ErrorKind",
    "VendError",
    "copy_package",
    "list_imports",
    "move_package",
    "package_info",
    "update_paths",
    "vendor_init",
]
