# SPDX-License-Identifier: MIT
"""Build context configuration.

The :class:`BuildContext` holds everything package resolution depends on (the
GOROOT, the GOPATH roots, the target platform) and is passed explicitly to
every operation instead of living in process-wide state.
"""

from __future__ import annotations

import os
import platform
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError

_GOARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
}

_GOOS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
    "freebsd": "freebsd",
}


def _default_goos() -> str:
    return _GOOS_ALIASES.get(platform.system().lower(), platform.system().lower())


def _default_goarch() -> str:
    machine = platform.machine().lower()
    return _GOARCH_ALIASES.get(machine, machine)


def _go_env(name: str) -> str:
    """Ask the ``go`` tool for an environment value, if it is installed."""
    go = shutil.which("go")
    if go is None:
        return ""
    try:
        result = subprocess.run(
            [go, "env", name],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def parse_gopath(value: str) -> list[Path]:
    """Split a GOPATH list into absolute roots.

    Args:
        value: OS path-list separated GOPATH value

    Returns:
        List of roots, empty entries dropped

    Raises:
        ConfigError: If an entry is relative
    """
    roots: list[Path] = []
    for entry in value.split(os.pathsep):
        if not entry:
            continue
        path = Path(entry).expanduser()
        if not path.is_absolute():
            raise ConfigError(f"GOPATH entry is relative; must be absolute path: {entry!r}")
        roots.append(path)
    return roots


@dataclass
class BuildContext:
    """Resolution roots and options shared by all vend operations.

    Attributes:
        goroot: Root of the Go installation (standard packages under src/)
        gopath: Workspace roots (packages under <root>/src/)
        goos: Target operating system
        goarch: Target architecture
        use_all_files: Select files regardless of build constraints
        verbose: Report each copied and rewritten file
    """

    goroot: Optional[Path] = None
    gopath: list[Path] = field(default_factory=list)
    goos: str = field(default_factory=_default_goos)
    goarch: str = field(default_factory=_default_goarch)
    use_all_files: bool = True
    verbose: bool = False

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        verbose: bool = False,
    ) -> "BuildContext":
        """Create a BuildContext from Go environment variables.

        Reads ``GOROOT``, ``GOPATH``, ``GOOS`` and ``GOARCH``. A missing
        GOROOT is looked up with ``go env GOROOT``; a missing GOPATH defaults
        to ``~/go``.

        Args:
            environ: Environment mapping (defaults to ``os.environ``)
            verbose: Enable verbose reporting

        Returns:
            BuildContext instance

        Raises:
            ConfigError: If GOPATH contains a relative entry
        """
        env = os.environ if environ is None else environ

        goroot_value = env.get("GOROOT") or _go_env("GOROOT")
        goroot = Path(goroot_value).expanduser() if goroot_value else None

        gopath_value = env.get("GOPATH")
        if gopath_value is None:
            gopath_value = str(Path.home() / "go")
        gopath = parse_gopath(gopath_value)

        return cls(
            goroot=goroot,
            gopath=gopath,
            goos=env.get("GOOS") or _default_goos(),
            goarch=env.get("GOARCH") or _default_goarch(),
            verbose=verbose,
        )

    @property
    def goroot_src(self) -> Optional[Path]:
        """Directory holding standard package sources."""
        if self.goroot is None:
            return None
        return self.goroot / "src"

    def gopath_src(self) -> list[Path]:
        """Directories holding GOPATH package sources, in search order."""
        return [root / "src" for root in self.gopath]

    def search_roots(self) -> list[Path]:
        """All source roots in resolution order, GOROOT first."""
        roots = self.gopath_src()
        if self.goroot_src is not None:
            roots.insert(0, self.goroot_src)
        return roots
